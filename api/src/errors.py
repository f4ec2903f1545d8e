"""
Error taxonomy for the booking service.

Domain errors carry an ``ErrorKind`` so the API layer can map them to
status codes by kind instead of by message. Stores signal a missing row
with ``RecordNotFoundError``; services translate it into the domain
``NotFoundError`` (or a booking-specific refinement).
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Client-facing error categories."""

    INVALID_DATA = "invalid_data"
    NOT_FOUND = "not_found"
    MEMBER_NOT_FOUND = "member_not_found"
    CLASS_NOT_FOUND = "class_not_found"
    INVALID_CLASS_DATE = "invalid_class_date"


class DomainError(Exception):
    """Base class for errors caused by client-supplied data."""

    kind: ErrorKind = ErrorKind.INVALID_DATA
    default_message = "invalid data"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidDataError(DomainError):
    """Data failed domain validation (empty name, bad capacity, inverted range)."""

    kind = ErrorKind.INVALID_DATA
    default_message = "invalid data"


class NotFoundError(DomainError):
    """Requested entity does not exist."""

    kind = ErrorKind.NOT_FOUND
    default_message = "not found"


class MemberNotFoundError(DomainError):
    """Booking references a member that does not exist."""

    kind = ErrorKind.MEMBER_NOT_FOUND
    default_message = "member not found"


class ClassNotFoundError(DomainError):
    """Booking references a class that does not exist."""

    kind = ErrorKind.CLASS_NOT_FOUND
    default_message = "class not found"


class InvalidClassDateError(DomainError):
    """Booking date falls outside the class date range."""

    kind = ErrorKind.INVALID_CLASS_DATE
    default_message = "invalid class date"


class RecordNotFoundError(Exception):
    """Raised by a repository when a query matched zero rows."""

    def __init__(self, table: str, record_id: object):
        self.table = table
        self.record_id = record_id
        super().__init__(f"no row in {table} with id {record_id}")


class StoreError(Exception):
    """Unexpected persistence failure, wrapped with the failing operation."""
