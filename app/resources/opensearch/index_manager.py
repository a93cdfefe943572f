"""
Async OpenSearch index engine: create, update and delete the physical indices of an index set.
No business logic beyond index definition and mapping.
"""

from typing import Any

from opensearchpy import AsyncOpenSearch
from opensearchpy.exceptions import NotFoundError, OpenSearchException, RequestError

from app.config.logging import get_logger
from app.resources.opensearch.client import get_opensearch_client
from app.services.index_sets.base import BaseIndexEngine
from app.services.index_sets.errors import EngineError

logger = get_logger(__name__)

# Static index settings; OpenSearch rejects changing them on an existing index.
NON_MODIFIABLE_SETTINGS = frozenset(
    {
        "number_of_shards",
        "number_of_routing_shards",
        "routing_partition_size",
        "codec",
        "knn",
    }
)


def _error_reason(e: OpenSearchException) -> str:
    """Pull the engine's reason out of a RequestError, falling back to str(e)."""
    if isinstance(e, RequestError) and isinstance(getattr(e, "info", None), dict):
        error_info = e.info.get("error", {})
        if isinstance(error_info, dict) and "reason" in error_info:
            return error_info["reason"]
    return str(e)


def modifiable_settings(settings: dict[str, Any]) -> dict[str, Any]:
    """
    Drop static settings so the rest can be applied to an existing index.
    Handles both nested ({"index": {"number_of_shards": 1}}) and dotted ("index.number_of_shards") keys.
    """
    out: dict[str, Any] = {}
    for key, value in settings.items():
        if key == "index" and isinstance(value, dict):
            nested = modifiable_settings(value)
            if nested:
                out[key] = nested
        elif key.removeprefix("index.") not in NON_MODIFIABLE_SETTINGS:
            out[key] = value
    return out


def build_index_body(settings: dict[str, Any], mapping: dict[str, Any]) -> dict[str, Any]:
    return {"settings": settings, "mappings": mapping}


class OpenSearchIndexEngine(BaseIndexEngine):
    """BaseIndexEngine over the shared AsyncOpenSearch client."""

    def __init__(self, client: AsyncOpenSearch | None = None):
        self._client = client

    @property
    def client(self) -> AsyncOpenSearch:
        return self._client if self._client is not None else get_opensearch_client()

    async def create_index(self, name: str, settings: dict[str, Any], mapping: dict[str, Any]) -> None:
        """Create the index. Raises EngineError if it already exists or the definition is rejected."""
        try:
            await self.client.indices.create(index=name, body=build_index_body(settings, mapping))
        except OpenSearchException as e:
            reason = _error_reason(e)
            logger.error(
                "Failed to create OpenSearch index",
                extra={"index_name": name, "error": reason, "error_type": type(e).__name__},
            )
            raise EngineError(f"Failed to create index '{name}': {reason}", cause=e) from e
        logger.info("Index created", extra={"index_name": name})

    async def update_index(self, name: str, settings: dict[str, Any], mapping: dict[str, Any]) -> None:
        """
        Create the index if absent. Otherwise close it, apply the modifiable settings, reopen it
        and put the mapping. The index is reopened even if the settings update fails.
        """
        client = self.client
        try:
            exists = await client.indices.exists(index=name)
        except OpenSearchException as e:
            raise EngineError(f"Failed to check index '{name}': {_error_reason(e)}", cause=e) from e
        if not exists:
            await self.create_index(name, settings, mapping)
            return

        try:
            updatable = modifiable_settings(settings)
            if updatable:
                await client.indices.close(index=name)
                try:
                    await client.indices.put_settings(index=name, body=updatable)
                finally:
                    await client.indices.open(index=name)
            await client.indices.put_mapping(index=name, body=mapping)
        except OpenSearchException as e:
            reason = _error_reason(e)
            logger.error(
                "Failed to update OpenSearch index",
                extra={"index_name": name, "error": reason, "error_type": type(e).__name__},
            )
            raise EngineError(f"Failed to update index '{name}': {reason}", cause=e) from e
        logger.info("Index updated", extra={"index_name": name})

    async def delete_index(self, name: str) -> None:
        """Delete the index. Deleting an index that does not exist is not an error."""
        try:
            await self.client.indices.delete(index=name)
        except NotFoundError:
            logger.debug("Index already absent", extra={"index_name": name})
            return
        except OpenSearchException as e:
            raise EngineError(f"Failed to delete index '{name}': {_error_reason(e)}", cause=e) from e
        logger.info("Index deleted", extra={"index_name": name})
