"""Request/response schemas for the /index-sets API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.services.index_sets.models import IndexSet


class IndexSetRequest(BaseModel):
    """Body of POST /index-sets and PUT /index-sets/{id}: {"index-set": {...}}."""

    model_config = ConfigDict(populate_by_name=True)

    index_set: IndexSet = Field(..., alias="index-set")


class IndexSetSummary(BaseModel):
    """Pruned view of an index set: concept type -> {logical index name -> physical index name}."""

    id: Any
    name: Any
    concepts: dict[str, dict[str, str]] = Field(default_factory=dict)
