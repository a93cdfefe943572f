"""Shared async MongoDB access and error translation for repositories."""

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from app.config.logging import get_logger
from app.resources.mongo.client import get_database

logger = get_logger(__name__)


class RepositoryError(Exception):
    """Raised when a repository operation fails after handling PyMongo errors."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


def _translate_pymongo_error(e: PyMongoError, context: str) -> RepositoryError:
    """Wrap PyMongo errors into a non-leaking RepositoryError."""
    logger.warning(
        "MongoDB operation failed",
        extra={"context": context, "error_type": type(e).__name__},
    )
    return RepositoryError(f"Dependency temporarily unavailable: {context}", cause=e)


def get_collection(name: str, db: AsyncIOMotorDatabase | None = None) -> AsyncIOMotorCollection:
    """Return the named collection from db, or from the default database."""
    if db is None:
        db = get_database()
    return db[name]
