"""
Index-set lifecycle: validate, apply physical indices, persist the document.

Create is all-or-nothing from the caller's view: indices it attempted are deleted again when a later
step fails. Update has no such rollback; indices already updated stay updated and the error is
surfaced so the caller can re-run it. Delete removes indices before the document, so an interrupted
delete is finished by running it again.
"""

from contextlib import AbstractAsyncContextManager
from typing import Any, NoReturn

from app.config.index_sets.models import IndexSetStoreConfig
from app.config.logging import get_logger
from app.repositories.mongodb.base import RepositoryError
from app.services.index_sets import messages
from app.services.index_sets.base import BaseIndexEngine, BaseIndexSetStore
from app.services.index_sets.codec import build_stored_document, document_id, read_stored_document
from app.services.index_sets.errors import EngineError, ErrorKind, IndexSetError
from app.services.index_sets.models import IndexSet
from app.services.index_sets.naming import IndexPlanEntry, build_index_plan, index_names, prune_index_set
from app.services.index_sets.validation import ValidationFailure, validate_index_set
from app.utils.locks import KeyedLocks

logger = get_logger(__name__)


def _raise_failure(failure: ValidationFailure) -> NoReturn:
    raise IndexSetError(failure.kind, failure.message)


def _projection(payload: dict[str, Any]) -> dict[str, Any]:
    return {key: payload.get(key) for key in ("id", "name", "concepts")}


class IndexSetService:
    """Stateless between calls apart from the per-id locks; all state lives in the store and the engine."""

    def __init__(self, engine: BaseIndexEngine, store: BaseIndexSetStore, config: IndexSetStoreConfig):
        self._engine = engine
        self._store = store
        self._config = config
        self._locks = KeyedLocks()

    @property
    def collection_key(self) -> str:
        return self._config.collection_name

    def lock(self, index_set_id: Any) -> AbstractAsyncContextManager[None]:
        """Serialize every mutation of one index set. Hold it around load -> mutate -> apply_update."""
        return self._locks.hold(document_id(index_set_id))

    # ---- reads

    async def load_index_set(self, index_set_id: Any) -> IndexSet:
        """Full stored definition, including settings and mappings. Raises NOT_FOUND."""
        document = await self._store.get(self.collection_key, document_id(index_set_id))
        if document is None:
            raise IndexSetError(ErrorKind.NOT_FOUND, messages.index_set_not_found(index_set_id))
        return IndexSet.model_validate(read_stored_document(document))

    async def get_index_set(self, index_set_id: Any) -> dict[str, Any]:
        """Pruned view of one index set: id, name and the logical -> physical name map."""
        document = await self._store.get(self.collection_key, document_id(index_set_id))
        if document is None:
            raise IndexSetError(ErrorKind.NOT_FOUND, messages.index_set_not_found(index_set_id))
        return _projection(read_stored_document(document))

    async def list_index_sets(self) -> list[dict[str, Any]]:
        out: list[dict[str, Any]] = []
        for doc_id in await self._store.list_ids(self.collection_key):
            document = await self._store.get(self.collection_key, doc_id)
            if document is not None:
                out.append(_projection(read_stored_document(document)))
        return out

    # ---- create

    async def create_index_set(self, index_set: IndexSet) -> dict[str, Any]:
        """Create every planned index then store the document. Returns the pruned view."""
        async with self.lock(index_set.id):
            failure = await validate_index_set(self._store, self.collection_key, index_set, allow_update=False)
            if failure is not None:
                _raise_failure(failure)

            plan = build_index_plan(index_set)
            logger.info(
                "Creating index-set",
                extra={"index_set_id": index_set.id, "index_count": len(plan)},
            )
            attempted, error = await self._create_indices(plan)
            if error is not None:
                await self._rollback(index_set.id, attempted)
                raise IndexSetError(
                    ErrorKind.ENGINE_FAILURE,
                    messages.engine_failure("attempt to create indices of index-set failed", error),
                    cause=error,
                )

            error = await self._save_document(index_set)
            if error is not None:
                await self._rollback(index_set.id, attempted)
                raise IndexSetError(
                    ErrorKind.ENGINE_FAILURE,
                    messages.engine_failure("attempt to index index-set doc failed", error),
                    cause=error,
                )
            logger.info("Index-set created", extra={"index_set_id": index_set.id})
            return prune_index_set(index_set)

    async def _create_indices(self, plan: list[IndexPlanEntry]) -> tuple[list[str], EngineError | None]:
        """
        Create in plan order, stopping at the first failure. Returns (attempted names, failure).
        The failing index is included: the engine may have created it before the call failed.
        """
        attempted: list[str] = []
        for entry in plan:
            attempted.append(entry.index_name)
            try:
                await self._engine.create_index(entry.index_name, entry.settings, entry.mapping)
            except EngineError as e:
                logger.warning(
                    "Index creation failed",
                    extra={"index_name": entry.index_name, "error": str(e)},
                )
                return attempted, e
            logger.debug("Index created", extra={"index_name": entry.index_name})
        return attempted, None

    async def _save_document(self, index_set: IndexSet) -> Exception | None:
        try:
            await self._store.put(self.collection_key, document_id(index_set.id), build_stored_document(index_set))
        except (RepositoryError, EngineError) as e:
            logger.warning(
                "Storing index-set document failed",
                extra={"index_set_id": index_set.id, "error": str(e)},
            )
            return e
        return None

    async def _rollback(self, index_set_id: Any, names: list[str]) -> None:
        """Best-effort delete of indices touched by a failed create; individual failures are logged and skipped."""
        logger.warning(
            "Rolling back index-set creation",
            extra={"index_set_id": index_set_id, "indices": names},
        )
        for name in names:
            try:
                await self._engine.delete_index(name)
            except EngineError as e:
                logger.warning(
                    "Ignoring index delete failure during rollback",
                    extra={"index_name": name, "error": str(e)},
                )

    # ---- update

    async def update_index_set(self, index_set: IndexSet) -> None:
        async with self.lock(index_set.id):
            await self.apply_update(index_set)

    async def apply_update(self, index_set: IndexSet) -> None:
        """
        Update every planned index (creating missing ones), then store the document.
        The caller must hold lock(index_set.id). A failed index update aborts immediately and
        leaves earlier updates in place.
        """
        logger.info("Updating index-set", extra={"index_set_id": index_set.id})
        failure = await validate_index_set(self._store, self.collection_key, index_set, allow_update=True)
        if failure is not None:
            _raise_failure(failure)

        for entry in build_index_plan(index_set):
            try:
                await self._engine.update_index(entry.index_name, entry.settings, entry.mapping)
            except EngineError as e:
                raise IndexSetError(
                    ErrorKind.ENGINE_FAILURE,
                    messages.engine_failure("attempt to update indices of index-set failed", e),
                    cause=e,
                ) from e
            logger.debug("Index updated", extra={"index_name": entry.index_name})

        await self._store.put(self.collection_key, document_id(index_set.id), build_stored_document(index_set))

    # ---- delete

    async def delete_index_set(self, index_set_id: Any) -> None:
        async with self.lock(index_set_id):
            await self._delete(index_set_id)

    async def _delete(self, index_set_id: Any) -> None:
        """
        Delete every index named by the stored definition, then the document. An index that fails
        to delete does not stop the others, but keeps the document so a re-run can finish the job.
        """
        index_set = await self.load_index_set(index_set_id)
        failed: list[str] = []
        for name in index_names(index_set):
            try:
                await self._engine.delete_index(name)
            except EngineError as e:
                logger.warning("Index delete failed", extra={"index_name": name, "error": str(e)})
                failed.append(name)
        if failed:
            raise IndexSetError(ErrorKind.ENGINE_FAILURE, messages.index_deletion_failed(index_set_id, failed))
        await self._store.delete(self.collection_key, document_id(index_set_id))
        logger.info("Index-set deleted", extra={"index_set_id": index_set_id})

    async def reset(self) -> None:
        """Delete every stored index set, one at a time. Re-run after a failure to converge."""
        ids = await self._store.list_ids(self.collection_key)
        logger.info("Resetting index-sets", extra={"index_set_ids": ids})
        for index_set_id in ids:
            async with self.lock(index_set_id):
                try:
                    await self._delete(index_set_id)
                except IndexSetError as e:
                    if e.kind is not ErrorKind.NOT_FOUND:
                        raise
                    logger.info("Index-set already gone during reset", extra={"index_set_id": index_set_id})
