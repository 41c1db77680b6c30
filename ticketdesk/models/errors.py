"""
Error taxonomy for the ticketdesk application.

Anticipated failures travel as ``StoreFailure`` values inside store and
repository results. ``StoreFailure.to_exception()`` turns them into the
matching ``TrackerError`` subclass so the action layer can handle every
kind in one ``except`` clause and convert it into a form state.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from .enums import ErrorKind


# SQLSTATE codes used to classify store failures
FOREIGN_KEY_VIOLATION = "23503"
UNIQUE_VIOLATION = "23505"
NOT_NULL_VIOLATION = "23502"
NOT_FOUND_CODE = "404"


@dataclass(frozen=True)
class StoreFailure:
    """Classified store error carrying the store-specific code."""
    kind: ErrorKind
    message: str
    code: Optional[str] = None
    table: Optional[str] = None

    def to_exception(self) -> "TrackerError":
        exc_class = _EXCEPTIONS_BY_KIND.get(self.kind, StoreError)
        return exc_class(self.message, code=self.code, table=self.table)


class TrackerError(Exception):
    """Base class for anticipated ticketdesk failures."""
    kind = ErrorKind.STORE

    def __init__(self, message: str, code: Optional[str] = None, table: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.table = table

    def to_failure(self) -> StoreFailure:
        return StoreFailure(kind=self.kind, message=self.message, code=self.code, table=self.table)


class ValidationFailed(TrackerError):
    """Field-level validation errors for a form."""
    kind = ErrorKind.VALIDATION

    def __init__(self, errors: Dict[str, List[str]], message: str = "Validation failed"):
        super().__init__(message)
        self.errors = errors


class ReferentialIntegrityError(TrackerError):
    """Delete blocked because dependent rows still reference the target."""
    kind = ErrorKind.REFERENTIAL_INTEGRITY_VIOLATION


class UniqueViolationError(TrackerError):
    """Insert or update collided with a unique constraint."""
    kind = ErrorKind.UNIQUE_VIOLATION


class NotFoundError(TrackerError):
    """Update, delete or get targeted an id that does not exist."""
    kind = ErrorKind.NOT_FOUND


class StoreError(TrackerError):
    """Generic persistence failure."""
    kind = ErrorKind.STORE


_EXCEPTIONS_BY_KIND = {
    ErrorKind.REFERENTIAL_INTEGRITY_VIOLATION: ReferentialIntegrityError,
    ErrorKind.UNIQUE_VIOLATION: UniqueViolationError,
    ErrorKind.NOT_FOUND: NotFoundError,
    ErrorKind.STORE: StoreError,
}
