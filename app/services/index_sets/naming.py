"""
Physical index naming and the derived index plan. Names are recomputed from the definition
every time they are needed; nothing here is cached.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict

from app.services.index_sets.models import IndexSet


class IndexPlanEntry(BaseModel):
    """One physical index to create or update. index_name is None when the IndexSpec has no name."""

    model_config = ConfigDict(frozen=True)

    concept_type: str
    index_name: str | None
    settings: dict[str, Any] | None
    mapping: dict[str, Any] | None


def derive_index_name(prefix: Any, suffix: Any) -> str:
    """Join prefix and suffix with '_', turn every '-' into '_', lowercase the result."""
    return f"{prefix}_{suffix}".replace("-", "_").lower()


def build_index_plan(index_set: IndexSet) -> list[IndexPlanEntry]:
    """One entry per (concept type, index spec), concept types in fixed order, specs in list order."""
    plan: list[IndexPlanEntry] = []
    for concept_type, group in index_set.concept_groups().items():
        for spec in group.indexes:
            plan.append(
                IndexPlanEntry(
                    concept_type=concept_type,
                    index_name=derive_index_name(index_set.id, spec.name) if spec.name is not None else None,
                    settings=spec.settings,
                    mapping=group.mapping,
                )
            )
    return plan


def index_names(index_set: IndexSet) -> list[str]:
    """Physical names of every named index in the set, in plan order."""
    return [entry.index_name for entry in build_index_plan(index_set) if entry.index_name is not None]


def prune_index_set(index_set: IndexSet) -> dict[str, Any]:
    """Client view: id, name and concept type -> {logical name -> physical name}."""
    return {
        "id": index_set.id,
        "name": index_set.name,
        "concepts": {
            concept_type: {
                spec.name: derive_index_name(index_set.id, spec.name)
                for spec in group.indexes
                if spec.name is not None
            }
            for concept_type, group in index_set.concept_groups().items()
        },
    }
