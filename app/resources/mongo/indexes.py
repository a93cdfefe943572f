"""MongoDB indexes for the index-set document collection. Created on startup."""

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.config.index_sets.models import IndexSetStoreConfig
from app.config.logging import get_logger

logger = get_logger(__name__)


async def create_indexes(db: AsyncIOMotorDatabase, config: IndexSetStoreConfig) -> None:
    """Unique index on index_set_id (the document _id is its string form) and a lookup index on name."""
    try:
        index_sets = db[config.collection_name]
        await index_sets.create_index([("index_set_id", 1)], unique=True)
        await index_sets.create_index([("index_set_name", 1)])
        logger.info("Created indexes for index-set collection", extra={"collection": config.collection_name})
    except Exception as e:
        logger.error("Failed to create MongoDB indexes", extra={"error": str(e), "error_type": type(e).__name__})
        raise
