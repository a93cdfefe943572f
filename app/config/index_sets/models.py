"""Index-set configuration models. Read-only; no business logic."""

from pydantic import BaseModel, ConfigDict, Field

from app.config.settings import get_settings

# Concept types an index set partitions its indices by, in plan order.
CONCEPT_TYPES: tuple[str, ...] = ("collection", "granule", "tag")


class IndexSetStoreConfig(BaseModel):
    """Where index-set documents live. Injected into the service at construction."""

    model_config = ConfigDict(frozen=True)

    collection_name: str = Field(default="index-sets", min_length=1)


def get_index_set_store_config() -> IndexSetStoreConfig:
    """Build the store config from settings."""
    return IndexSetStoreConfig(collection_name=get_settings().index_set_collection)
