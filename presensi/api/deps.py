"""
Shared route dependencies and the conversion of domain errors into HTTP
responses at the action boundary.
"""

from fastapi import HTTPException, Request, status

from presensi.exceptions import (
    NotAuthenticatedError, PresensiError, RecordImmutableError, RecordNotFoundError,
    NoOpenSessionError, SessionAlreadyOpenError, StoreError
)
from presensi.services.attendance_service import AttendanceService
from presensi.services.record_store import RecordStore


def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def get_attendance_service(request: Request) -> AttendanceService:
    return request.app.state.attendance_service


def to_http_exception(error: PresensiError) -> HTTPException:
    """Map a domain error to the HTTP error shown to the user."""
    if isinstance(error, NotAuthenticatedError):
        status_code = status.HTTP_401_UNAUTHORIZED
    elif isinstance(error, RecordNotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, (SessionAlreadyOpenError, NoOpenSessionError, RecordImmutableError)):
        status_code = status.HTTP_409_CONFLICT
    elif isinstance(error, StoreError):
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        status_code = status.HTTP_400_BAD_REQUEST

    return HTTPException(status_code=status_code, detail=error.message)
