"""Error kinds raised out of the index-set service and the index engine adapter."""

from enum import Enum


class ErrorKind(str, Enum):
    """Category of an index-set failure. Routes map each kind to an HTTP status."""

    INVALID_DATA = "invalid_data"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    BAD_REQUEST = "bad_request"
    ENGINE_FAILURE = "engine_failure"


class IndexSetError(Exception):
    """Raised by the service layer. Carries the kind, client-facing messages, and the original cause."""

    def __init__(self, kind: ErrorKind, errors: list[str] | str, cause: Exception | None = None):
        self.kind = kind
        self.errors = [errors] if isinstance(errors, str) else list(errors)
        self.cause = cause
        super().__init__("; ".join(self.errors))


class EngineError(Exception):
    """Raised when the search engine rejects or fails an index operation."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause
