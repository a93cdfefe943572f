"""
Shared builders and in-memory collaborators for the test suite.

The fakes record every call so tests can assert on exactly which indices were touched and in what order.
"""
import asyncio
from typing import Any

from app.repositories.mongodb.base import RepositoryError
from app.services.index_sets.base import BaseIndexEngine, BaseIndexSetStore
from app.services.index_sets.errors import EngineError
from app.services.index_sets.models import IndexSet

COLLECTION_KEY = "index-sets"
SETTINGS = {"index": {"number_of_shards": 1, "number_of_replicas": 0}}
MAPPING = {"properties": {"concept-id": {"type": "keyword"}}}
INDIVIDUAL_SETTINGS = {"index": {"number_of_shards": 2, "number_of_replicas": 0}}


class FakeIndexEngine(BaseIndexEngine):
    """Keeps indices in a dict. fail_on maps (operation, index name) -> error to raise."""

    def __init__(self):
        self.indices: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail_on: dict[tuple[str, str], EngineError] = {}

    def _maybe_fail(self, op: str, name: str) -> None:
        self.calls.append((op, name))
        error = self.fail_on.get((op, name))
        if error is not None:
            raise error

    async def create_index(self, name, settings, mapping):
        self._maybe_fail("create", name)
        if name in self.indices:
            raise EngineError(f"index {name} already exists")
        self.indices[name] = {"settings": settings, "mapping": mapping}

    async def update_index(self, name, settings, mapping):
        # Yield to the loop like a real network call so interleavings are observable
        await asyncio.sleep(0)
        self._maybe_fail("update", name)
        self.indices[name] = {"settings": settings, "mapping": mapping}

    async def delete_index(self, name):
        self._maybe_fail("delete", name)
        self.indices.pop(name, None)

    def calls_for(self, op: str) -> list[str]:
        return [name for call_op, name in self.calls if call_op == op]


class FakeIndexSetStore(BaseIndexSetStore):
    """Keeps documents per collection key. Set fail_put to make put raise RepositoryError."""

    def __init__(self):
        self.documents: dict[str, dict[str, dict[str, Any]]] = {}
        self.fail_put = False
        self.puts = 0

    async def put(self, collection_key, doc_id, document):
        self.puts += 1
        if self.fail_put:
            raise RepositoryError("Dependency temporarily unavailable: save index-set document")
        self.documents.setdefault(collection_key, {})[doc_id] = dict(document)

    async def get(self, collection_key, doc_id):
        return self.documents.get(collection_key, {}).get(doc_id)

    async def delete(self, collection_key, doc_id):
        self.documents.get(collection_key, {}).pop(doc_id, None)

    async def exists(self, collection_key, doc_id):
        return doc_id in self.documents.get(collection_key, {})

    async def list_ids(self, collection_key):
        return list(self.documents.get(collection_key, {}))


def make_index_set(index_set_id: Any = 3, name: Any = "Test", **groups: Any) -> IndexSet:
    """Build an IndexSet from wire-shaped group dicts; defaults to one collection index."""
    if not groups:
        groups = {"collection": {"mapping": MAPPING, "indexes": [{"name": "coll1", "settings": SETTINGS}]}}
    return IndexSet.model_validate({"id": index_set_id, "name": name, **groups})


def granule_group(*index_names: str, rebalancing: list[str] | None = None) -> dict[str, Any]:
    group: dict[str, Any] = {
        "mapping": MAPPING,
        "indexes": [{"name": n, "settings": SETTINGS} for n in index_names],
        "individual-index-settings": INDIVIDUAL_SETTINGS,
    }
    if rebalancing is not None:
        group["rebalancing-collections"] = rebalancing
    return group

