"""
Pytest configuration and shared fixtures.

Builders and fakes live in tests/helpers.py; the fixtures here wire them into the service.
"""
import pytest

from app.config.index_sets.models import IndexSetStoreConfig
from app.services.index_sets.rebalancing import RebalancingController
from app.services.index_sets.service import IndexSetService
from tests.helpers import COLLECTION_KEY, FakeIndexEngine, FakeIndexSetStore


@pytest.fixture
def engine() -> FakeIndexEngine:
    return FakeIndexEngine()


@pytest.fixture
def store() -> FakeIndexSetStore:
    return FakeIndexSetStore()


@pytest.fixture
def service(engine, store) -> IndexSetService:
    return IndexSetService(engine=engine, store=store, config=IndexSetStoreConfig(collection_name=COLLECTION_KEY))


@pytest.fixture
def rebalancing(service) -> RebalancingController:
    return RebalancingController(service)
