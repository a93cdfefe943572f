"""
Tests for the OpenSearch index engine, with the async client mocked
"""
from unittest.mock import AsyncMock, Mock

import pytest
from opensearchpy.exceptions import NotFoundError, RequestError, TransportError

from app.resources.opensearch.index_manager import OpenSearchIndexEngine, modifiable_settings
from app.services.index_sets.errors import EngineError

SETTINGS = {"index": {"number_of_shards": 3, "number_of_replicas": 1, "refresh_interval": "1s"}}
MAPPING = {"properties": {"concept-id": {"type": "keyword"}}}


@pytest.fixture
def client():
    client = Mock()
    client.indices = Mock()
    for method in ("create", "exists", "close", "open", "put_settings", "put_mapping", "delete"):
        setattr(client.indices, method, AsyncMock())
    return client


@pytest.fixture
def engine(client):
    return OpenSearchIndexEngine(client=client)


def test_modifiable_settings_drops_static_settings():
    assert modifiable_settings(SETTINGS) == {"index": {"number_of_replicas": 1, "refresh_interval": "1s"}}
    assert modifiable_settings({"index.number_of_shards": 2, "index.number_of_replicas": 0}) == {
        "index.number_of_replicas": 0
    }
    assert modifiable_settings({"index": {"number_of_shards": 2}}) == {}


@pytest.mark.asyncio
async def test_create_index_sends_settings_and_mappings(engine, client):
    await engine.create_index("3_coll1", SETTINGS, MAPPING)

    client.indices.create.assert_awaited_once_with(
        index="3_coll1", body={"settings": SETTINGS, "mappings": MAPPING}
    )


@pytest.mark.asyncio
async def test_create_index_wraps_engine_reason(engine, client):
    client.indices.create.side_effect = RequestError(
        400, "resource_already_exists_exception", {"error": {"reason": "index [3_coll1] already exists"}}
    )

    with pytest.raises(EngineError) as exc_info:
        await engine.create_index("3_coll1", SETTINGS, MAPPING)

    assert "index [3_coll1] already exists" in str(exc_info.value)
    assert isinstance(exc_info.value.cause, RequestError)


@pytest.mark.asyncio
async def test_update_creates_missing_index(engine, client):
    client.indices.exists.return_value = False

    await engine.update_index("3_c123", SETTINGS, MAPPING)

    client.indices.create.assert_awaited_once()
    client.indices.put_settings.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_existing_index_applies_modifiable_settings_and_mapping(engine, client):
    client.indices.exists.return_value = True

    await engine.update_index("3_coll1", SETTINGS, MAPPING)

    client.indices.close.assert_awaited_once_with(index="3_coll1")
    client.indices.put_settings.assert_awaited_once_with(
        index="3_coll1", body={"index": {"number_of_replicas": 1, "refresh_interval": "1s"}}
    )
    client.indices.open.assert_awaited_once_with(index="3_coll1")
    client.indices.put_mapping.assert_awaited_once_with(index="3_coll1", body=MAPPING)
    client.indices.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_reopens_index_when_settings_fail(engine, client):
    client.indices.exists.return_value = True
    client.indices.put_settings.side_effect = RequestError(400, "illegal_argument_exception", {})

    with pytest.raises(EngineError):
        await engine.update_index("3_coll1", SETTINGS, MAPPING)

    client.indices.open.assert_awaited_once_with(index="3_coll1")
    client.indices.put_mapping.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_skips_close_when_nothing_modifiable(engine, client):
    client.indices.exists.return_value = True

    await engine.update_index("3_coll1", {"index": {"number_of_shards": 1}}, MAPPING)

    client.indices.close.assert_not_awaited()
    client.indices.put_mapping.assert_awaited_once()


@pytest.mark.asyncio
async def test_delete_missing_index_is_not_an_error(engine, client):
    client.indices.delete.side_effect = NotFoundError(404, "index_not_found_exception", {})

    await engine.delete_index("3_gone")

    client.indices.delete.assert_awaited_once_with(index="3_gone")


@pytest.mark.asyncio
async def test_delete_failure_raises_engine_error(engine, client):
    client.indices.delete.side_effect = TransportError(500, "internal", {})

    with pytest.raises(EngineError):
        await engine.delete_index("3_coll1")
