"""Client-facing message texts for index-set failures."""

import json
from typing import Any


def _serialize(definition: dict[str, Any]) -> str:
    return json.dumps(definition, sort_keys=True, default=str)


def invalid_id(index_set_id: Any, definition: dict[str, Any]) -> str:
    return f"id: {index_set_id!r} is not a positive integer. index-set: {_serialize(definition)}"


def missing_id_name(definition: dict[str, Any]) -> str:
    return f"missing id or name in index-set: {_serialize(definition)}"


def missing_index_config(definition: dict[str, Any]) -> str:
    return f"missing index name, settings or mapping in index-set: {_serialize(definition)}"


def index_set_exists(index_set_id: Any) -> str:
    return f"index-set id: {index_set_id} already exists"


def index_set_not_found(index_set_id: Any) -> str:
    return f"index-set with id: {index_set_id} not found"


def id_mismatch(path_id: Any, body_id: Any) -> str:
    return f"index-set id in the body [{body_id}] does not match the id in the URL [{path_id}]"


def engine_failure(context: str, cause: Exception) -> str:
    return f"{context}: {cause}"


def index_deletion_failed(index_set_id: Any, failed: list[str]) -> str:
    return f"failed to delete indices {failed} of index-set {index_set_id}; index-set document kept"


def already_rebalancing(concept_id: str) -> str:
    return f"The index set already contains rebalancing collection [{concept_id}]"


def not_rebalancing(concept_id: str) -> str:
    return f"The index set does not contain the rebalancing collection [{concept_id}]"


def granule_index_exists(concept_id: str) -> str:
    return f"The collection [{concept_id}] already has a separate granule index"


def duplicate_index_names(duplicates: list[str], definition: dict[str, Any]) -> str:
    return f"index names {duplicates} are not unique in index-set: {_serialize(definition)}"
