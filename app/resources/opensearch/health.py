"""OpenSearch readiness probe for /ready."""

from typing import Any

from opensearchpy.exceptions import ConnectionError as OSConnectionError
from opensearchpy.exceptions import ConnectionTimeout as OSConnectionTimeout
from opensearchpy.exceptions import OpenSearchException

from app.config.logging import get_logger
from app.resources.opensearch.client import get_opensearch_client

logger = get_logger(__name__)


async def ping_opensearch() -> dict[str, Any]:
    """
    Return {'ok': True} when the cluster answers a ping, else {'ok': False, 'error': <code>}.
    The error code never carries internal details.
    """
    try:
        ok = await get_opensearch_client().ping()
    except OSConnectionTimeout as e:
        logger.warning("OpenSearch ping timeout", extra={"error": type(e).__name__})
        return {"ok": False, "error": "connection_timeout"}
    except (OSConnectionError, OpenSearchException) as e:
        logger.warning("OpenSearch ping failed", extra={"error": type(e).__name__})
        return {"ok": False, "error": "connection_failed"}
    if not ok:
        return {"ok": False, "error": "connection_failed"}
    return {"ok": True}
