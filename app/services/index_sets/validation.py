"""
Checks over a candidate index-set definition. Each check returns None when it passes or a
ValidationFailure describing the first problem; nothing here raises.
"""

from collections import Counter

from pydantic import BaseModel, ConfigDict

from app.services.index_sets import messages
from app.services.index_sets.base import BaseIndexSetStore
from app.services.index_sets.codec import document_id
from app.services.index_sets.errors import ErrorKind
from app.services.index_sets.models import IndexSet
from app.services.index_sets.naming import build_index_plan


class ValidationFailure(BaseModel):
    """Why a definition or state transition was rejected."""

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    message: str


def check_id(index_set: IndexSet) -> ValidationFailure | None:
    """The id must be an integer greater than zero. Booleans are not integers here."""
    index_set_id = index_set.id
    if isinstance(index_set_id, int) and not isinstance(index_set_id, bool) and index_set_id > 0:
        return None
    return ValidationFailure(
        kind=ErrorKind.INVALID_DATA,
        message=messages.invalid_id(index_set_id, index_set.to_wire()),
    )


def check_id_name_existence(index_set: IndexSet) -> ValidationFailure | None:
    if index_set.id is not None and index_set.name:
        return None
    return ValidationFailure(kind=ErrorKind.INVALID_DATA, message=messages.missing_id_name(index_set.to_wire()))


def check_index_config(index_set: IndexSet) -> ValidationFailure | None:
    """Every planned index needs a name, settings and the group's mapping."""
    for entry in build_index_plan(index_set):
        if entry.index_name is None or entry.settings is None or entry.mapping is None:
            return ValidationFailure(
                kind=ErrorKind.INVALID_DATA,
                message=messages.missing_index_config(index_set.to_wire()),
            )
    return None


def check_unique_index_names(index_set: IndexSet) -> ValidationFailure | None:
    """No two planned indices may resolve to the same physical name ('a-b' and 'a_b' collide)."""
    counts = Counter(entry.index_name for entry in build_index_plan(index_set))
    duplicates = sorted(name for name, count in counts.items() if count > 1 and name is not None)
    if not duplicates:
        return None
    return ValidationFailure(
        kind=ErrorKind.INVALID_DATA,
        message=messages.duplicate_index_names(duplicates, index_set.to_wire()),
    )


async def check_existence(
    store: BaseIndexSetStore, collection_key: str, index_set: IndexSet
) -> ValidationFailure | None:
    """Create only: the id must not already have a stored document."""
    if await store.exists(collection_key, document_id(index_set.id)):
        return ValidationFailure(kind=ErrorKind.CONFLICT, message=messages.index_set_exists(index_set.id))
    return None


async def validate_index_set(
    store: BaseIndexSetStore,
    collection_key: str,
    index_set: IndexSet,
    *,
    allow_update: bool,
) -> ValidationFailure | None:
    """
    Run the checks in order and return the first failure.
    Create: existence, id/name presence, id format, index config, unique names.
    Update skips the first two since the set already exists.
    """
    if not allow_update:
        failure = await check_existence(store, collection_key, index_set)
        if failure is None:
            failure = check_id_name_existence(index_set)
        if failure is not None:
            return failure
    for check in (check_id, check_index_config, check_unique_index_names):
        failure = check(index_set)
        if failure is not None:
            return failure
    return None
