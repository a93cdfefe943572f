"""FastAPI app entry: config, logging, health, error mapping, and graceful shutdown."""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.config.index_sets.models import get_index_set_store_config
from app.config.logging import configure_logging, get_logger
from app.config.settings import get_settings
from app.controllers.routes.index_sets import router as index_sets_router
from app.repositories.mongodb.base import RepositoryError
from app.resources.mongo.client import close_mongo_client, get_database
from app.resources.mongo.indexes import create_indexes
from app.resources.mongo.session import ping_mongo
from app.resources.opensearch.client import close_opensearch_client
from app.resources.opensearch.health import ping_opensearch
from app.services.index_sets.errors import ErrorKind, IndexSetError

logger = get_logger(__name__)

ERROR_STATUS = {
    ErrorKind.INVALID_DATA: 400,
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.CONFLICT: 409,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.ENGINE_FAILURE: 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: logging and the index-set collection indexes. Shutdown: close MongoDB and OpenSearch clients."""
    settings = get_settings()
    configure_logging()
    logger.info("Application starting", extra={"app_name": settings.app_name, "environment": settings.environment})
    try:
        await create_indexes(get_database(), get_index_set_store_config())
    except Exception as e:
        # Startup continues; /ready reports the store as degraded
        logger.error("Failed to create MongoDB indexes on startup", extra={"error": str(e)})
    yield
    logger.info("Application shutting down")
    close_mongo_client()
    await close_opensearch_client()
    logger.info("Shutdown complete")


app = FastAPI(
    title="Index Set Service",
    description="Create and maintain named sets of search indices",
    version="1.0.0",
    lifespan=lifespan,
)
app.include_router(index_sets_router)


def _health_response(ok: bool, mongo: dict[str, Any], opensearch: dict[str, Any]) -> dict[str, Any]:
    return {
        "status": "ok" if ok else "degraded",
        "mongo": {"ok": mongo.get("ok", False), "error": mongo.get("error")},
        "opensearch": {"ok": opensearch.get("ok", False), "error": opensearch.get("error")},
    }


@app.get("/health")
async def health() -> dict[str, Any]:
    """Liveness: service is up. Does not check dependencies."""
    return {"status": "ok"}


@app.get("/ready")
async def ready() -> JSONResponse:
    """Readiness: verifies MongoDB and OpenSearch connectivity."""
    mongo = await ping_mongo()
    opensearch = await ping_opensearch()
    ok = mongo.get("ok", False) and opensearch.get("ok", False)
    return JSONResponse(content=_health_response(ok, mongo, opensearch), status_code=200 if ok else 503)


@app.exception_handler(IndexSetError)
async def index_set_error_handler(_request: Request, exc: IndexSetError) -> JSONResponse:
    status_code = ERROR_STATUS[exc.kind]
    if status_code >= 500:
        logger.error("Index-set operation failed", extra={"kind": exc.kind.value, "errors": exc.errors})
    return JSONResponse(content={"errors": exc.errors}, status_code=status_code)


@app.exception_handler(RepositoryError)
async def repository_error_handler(_request: Request, exc: RepositoryError) -> JSONResponse:
    logger.warning("Storage unavailable", extra={"error": str(exc)})
    return JSONResponse(content={"errors": ["Storage temporarily unavailable"]}, status_code=503)


@app.exception_handler(Exception)
async def global_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Connection failures and timeouts get a 503; anything else a 500. No internals leak to the client."""
    exc_name = type(exc).__name__
    if "Connection" in exc_name or "Timeout" in exc_name or "connection" in str(type(exc).__module__).lower():
        logger.warning("Connection or timeout error", extra={"error": exc_name})
        return JSONResponse(
            content={"errors": ["A dependency is temporarily unavailable. Please retry later."]},
            status_code=503,
        )
    logger.exception("Unhandled error")
    return JSONResponse(content={"errors": ["An internal error occurred."]}, status_code=500)
