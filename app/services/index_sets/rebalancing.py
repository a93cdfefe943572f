"""
Rebalancing: moving one collection's granules onto a dedicated granule index.

Per concept id the granule group goes absent -> rebalancing (start: marker added and a dedicated
index named after the concept id appended) -> settled (finalize: marker removed, index kept).
Starting twice and finalizing without a start are rejected with BAD_REQUEST.
"""

from typing import Any

from app.config.logging import get_logger
from app.services.index_sets import messages
from app.services.index_sets.errors import ErrorKind, IndexSetError
from app.services.index_sets.models import GranuleIndexGroup, IndexSet, IndexSpec
from app.services.index_sets.service import IndexSetService
from app.services.index_sets.validation import ValidationFailure

logger = get_logger(__name__)


def _granule_group(index_set: IndexSet) -> GranuleIndexGroup:
    return index_set.granule if index_set.granule is not None else GranuleIndexGroup()


def add_rebalancing_collection(index_set: IndexSet, concept_id: str) -> IndexSet | ValidationFailure:
    granule = _granule_group(index_set)
    if concept_id in granule.rebalancing_collections:
        return ValidationFailure(kind=ErrorKind.BAD_REQUEST, message=messages.already_rebalancing(concept_id))
    granule = granule.model_copy(
        update={"rebalancing_collections": granule.rebalancing_collections | {concept_id}}
    )
    return index_set.model_copy(update={"granule": granule})


def remove_rebalancing_collection(index_set: IndexSet, concept_id: str) -> IndexSet | ValidationFailure:
    granule = _granule_group(index_set)
    if concept_id not in granule.rebalancing_collections:
        return ValidationFailure(kind=ErrorKind.BAD_REQUEST, message=messages.not_rebalancing(concept_id))
    granule = granule.model_copy(
        update={"rebalancing_collections": granule.rebalancing_collections - {concept_id}}
    )
    return index_set.model_copy(update={"granule": granule})


def add_granule_index(index_set: IndexSet, concept_id: str) -> IndexSet | ValidationFailure:
    """Append a granule index named after the concept id, using the individual index settings."""
    granule = _granule_group(index_set)
    if concept_id in granule.index_names():
        return ValidationFailure(kind=ErrorKind.BAD_REQUEST, message=messages.granule_index_exists(concept_id))
    spec = IndexSpec(name=concept_id, settings=granule.individual_index_settings)
    granule = granule.model_copy(update={"indexes": (*granule.indexes, spec)})
    return index_set.model_copy(update={"granule": granule})


def _unwrap(result: IndexSet | ValidationFailure) -> IndexSet:
    if isinstance(result, ValidationFailure):
        raise IndexSetError(result.kind, result.message)
    return result


class RebalancingController:
    """Applies rebalancing transitions through the service's regular update path."""

    def __init__(self, service: IndexSetService):
        self._service = service

    async def start_rebalancing(self, index_set_id: Any, concept_id: str) -> None:
        """Mark the collection as rebalancing and create its dedicated granule index."""
        async with self._service.lock(index_set_id):
            index_set = await self._service.load_index_set(index_set_id)
            index_set = _unwrap(add_rebalancing_collection(index_set, concept_id))
            index_set = _unwrap(add_granule_index(index_set, concept_id))
            logger.info(
                "Starting collection rebalancing",
                extra={"index_set_id": index_set_id, "concept_id": concept_id},
            )
            await self._service.apply_update(index_set)

    async def finalize_rebalancing(self, index_set_id: Any, concept_id: str) -> None:
        """Clear the rebalancing marker. The dedicated index stays in the layout."""
        async with self._service.lock(index_set_id):
            index_set = await self._service.load_index_set(index_set_id)
            index_set = _unwrap(remove_rebalancing_collection(index_set, concept_id))
            logger.info(
                "Finalizing collection rebalancing",
                extra={"index_set_id": index_set_id, "concept_id": concept_id},
            )
            await self._service.apply_update(index_set)
