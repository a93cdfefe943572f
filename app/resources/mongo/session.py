"""MongoDB readiness probe for /ready."""

from typing import Any

from pymongo.errors import PyMongoError, ServerSelectionTimeoutError

from app.config.logging import get_logger
from app.resources.mongo.client import get_mongo_client

logger = get_logger(__name__)


async def ping_mongo() -> dict[str, Any]:
    """
    Return {'ok': True} when the server answers a ping, else {'ok': False, 'error': <code>}.
    The error code never carries internal details.
    """
    try:
        await get_mongo_client().admin.command("ping")
        return {"ok": True}
    except ServerSelectionTimeoutError as e:
        logger.warning("MongoDB ping timeout", extra={"error": type(e).__name__})
        return {"ok": False, "error": "connection_timeout"}
    except PyMongoError as e:
        logger.warning("MongoDB ping failed", extra={"error": type(e).__name__})
        return {"ok": False, "error": "connection_failed"}
