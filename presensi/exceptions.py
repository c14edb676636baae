"""
Error taxonomy for attendance actions.

Precondition errors are raised before any store I/O. Store errors wrap
failures of the record store; reads and writes are distinguished so the
API layer can keep stale data visible on read failures and report an
actionable failure on write failures.
"""


class PresensiError(Exception):
    """Base class for all domain errors."""

    default_message = "Attendance action failed"

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class PreconditionError(PresensiError):
    default_message = "Action not allowed"


class NotAuthenticatedError(PreconditionError):
    default_message = "No authenticated user"


class SessionAlreadyOpenError(PreconditionError):
    default_message = "An attendance session is already open today, clock out first"


class NoOpenSessionError(PreconditionError):
    default_message = "No open attendance session today, clock in first"


class RecordNotFoundError(PreconditionError):
    default_message = "Record not found"


class RecordImmutableError(PreconditionError):
    default_message = "Closed attendance records cannot be changed"


class LeaveValidationError(PreconditionError):
    default_message = "Invalid leave request"


class StoreError(PresensiError):
    default_message = "Record store unavailable"


class StoreReadError(StoreError):
    default_message = "Failed to load records, please try again"


class StoreWriteError(StoreError):
    default_message = "Failed to save record, please try again"


class OpenSessionConflictError(SessionAlreadyOpenError):
    """The store rejected a second open session for the same user and day."""

    default_message = "Another attendance session was opened concurrently"
