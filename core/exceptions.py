"""
=====================================
Exception hierarchy for SecureDB.
=====================================

Every failure raised by the data-access layer derives from SecureDBError so
callers can catch the whole family in one place, while each kind stays
distinguishable for diagnostics.

Validation errors (identifiers, directions, arguments, builder state) are
always raised before any SQL reaches the connection. Execution errors wrap
the underlying SQLAlchemy exception, which stays reachable via __cause__.

Example:
    >>> from core.exceptions import SecureDBError, InvalidIdentifier
    >>>
    >>> try:
    ...     db.from_('users; DROP TABLE users').get()
    ... except InvalidIdentifier as e:
    ...     print(f"Rejected: {e}")
"""

from typing import Optional


class SecureDBError(Exception):
    """Base class for every error raised by SecureDB."""
    pass


class ConfigurationError(SecureDBError):
    """Exception raised when database configuration is missing or invalid."""
    pass


class InvalidIdentifier(SecureDBError):
    """Exception raised when a table or column name fails validation.

    Identifiers cannot be bound as parameters, so they are checked against
    a strict grammar before being interpolated into SQL text.
    """
    pass


class InvalidDirection(SecureDBError):
    """Exception raised when an ORDER BY direction is not ASC or DESC."""
    pass


class InvalidArgument(SecureDBError):
    """Exception raised for malformed scalar arguments (limit, batch size, bind names)."""
    pass


class MissingRequiredInput(SecureDBError):
    """Exception raised when a terminal call lacks the data it needs."""
    pass


class EmptyConditions(MissingRequiredInput):
    """Exception raised when an UPDATE or DELETE would run without a WHERE clause."""
    pass


class EmptyBatch(MissingRequiredInput):
    """Exception raised when a bulk insert is given no rows."""
    pass


class InconsistentRowShape(SecureDBError):
    """Exception raised when bulk insert rows do not share the same ordered keys."""
    pass


class InvalidOperationState(SecureDBError):
    """Exception raised when a fluent call does not match the pending operation."""
    pass


class NoTableSpecified(SecureDBError):
    """Exception raised when a terminal call runs before any operation-entry call."""
    pass


class NoOperationPending(SecureDBError):
    """Exception raised when a call needs a pending operation and the builder is idle."""
    pass


class DriverError(SecureDBError):
    """Exception raised when the database driver rejects or fails a statement."""
    pass


class BulkInsertFailed(SecureDBError):
    """Exception raised after a bulk insert has been rolled back.

    Attributes:
        cause: The exception that aborted the batch (shape mismatch or driver error)
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
