"""Singleton wiring of the index-set service and its collaborators for the routes."""

from app.config.index_sets.models import get_index_set_store_config
from app.repositories.mongodb.index_sets_repository import MongoIndexSetStore
from app.resources.opensearch.index_manager import OpenSearchIndexEngine
from app.services.index_sets.rebalancing import RebalancingController
from app.services.index_sets.service import IndexSetService

_service: IndexSetService | None = None
_rebalancing: RebalancingController | None = None


def get_index_set_service() -> IndexSetService:
    """Return the shared service. One instance, so per-id locks are shared by every request."""
    global _service
    if _service is None:
        _service = IndexSetService(
            engine=OpenSearchIndexEngine(),
            store=MongoIndexSetStore(),
            config=get_index_set_store_config(),
        )
    return _service


def get_rebalancing_controller() -> RebalancingController:
    global _rebalancing
    if _rebalancing is None:
        _rebalancing = RebalancingController(get_index_set_service())
    return _rebalancing
