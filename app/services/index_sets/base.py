"""Contracts of the two collaborators the index-set service drives."""

from abc import ABC, abstractmethod
from typing import Any


class BaseIndexEngine(ABC):
    """
    Physical index operations in the search engine.
    create_index and update_index raise EngineError on failure; delete_index of an absent index is a no-op.
    """

    @abstractmethod
    async def create_index(self, name: str, settings: dict[str, Any], mapping: dict[str, Any]) -> None:
        ...

    @abstractmethod
    async def update_index(self, name: str, settings: dict[str, Any], mapping: dict[str, Any]) -> None:
        """Apply settings and mapping to an existing index, creating it if absent."""
        ...

    @abstractmethod
    async def delete_index(self, name: str) -> None:
        ...


class BaseIndexSetStore(ABC):
    """
    Persistence of index-set documents, keyed by (collection key, document id).
    Operations raise RepositoryError when the store is unavailable.
    """

    @abstractmethod
    async def put(self, collection_key: str, doc_id: str, document: dict[str, Any]) -> None:
        ...

    @abstractmethod
    async def get(self, collection_key: str, doc_id: str) -> dict[str, Any] | None:
        """Return the document, or None if absent."""
        ...

    @abstractmethod
    async def delete(self, collection_key: str, doc_id: str) -> None:
        ...

    @abstractmethod
    async def exists(self, collection_key: str, doc_id: str) -> bool:
        ...

    @abstractmethod
    async def list_ids(self, collection_key: str) -> list[str]:
        ...
