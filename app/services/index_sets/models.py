"""
Index-set domain models. Frozen: every change produces a new value via model_copy.

Fields the validator inspects (id, name, settings, mapping) are accepted loosely so that a
malformed definition reaches validation and fails with the definition embedded in the message.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from app.config.index_sets.models import CONCEPT_TYPES


class IndexSpec(BaseModel):
    """One physical index of a concept group: a logical name and its engine settings."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str | None = None
    settings: dict[str, Any] | None = None


class ConceptIndexGroup(BaseModel):
    """Indices of one concept type, all sharing the same mapping."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    mapping: dict[str, Any] | None = None
    indexes: tuple[IndexSpec, ...] = ()

    def index_names(self) -> set[str]:
        return {idx.name for idx in self.indexes if idx.name is not None}


class GranuleIndexGroup(ConceptIndexGroup):
    """Granule indices plus the state needed to split a collection onto its own index."""

    individual_index_settings: dict[str, Any] | None = Field(
        default=None, alias="individual-index-settings"
    )
    rebalancing_collections: frozenset[str] = Field(
        default_factory=frozenset, alias="rebalancing-collections"
    )

    @field_validator("rebalancing_collections", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return frozenset() if value is None else value

    @field_serializer("rebalancing_collections")
    def _sorted(self, value: frozenset[str]) -> list[str]:
        return sorted(value)


class IndexSet(BaseModel):
    """A named, numbered set of physical index definitions grouped by concept type."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: Any = None
    name: Any = None
    collection: ConceptIndexGroup | None = None
    granule: GranuleIndexGroup | None = None
    tag: ConceptIndexGroup | None = None

    def concept_groups(self) -> dict[str, ConceptIndexGroup]:
        """Concept type -> group, in plan order. Absent groups are omitted."""
        groups = {}
        for concept_type in CONCEPT_TYPES:
            group = getattr(self, concept_type)
            if group is not None:
                groups[concept_type] = group
        return groups

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready dict using the wire field names (e.g. rebalancing-collections)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
