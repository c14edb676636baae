"""
Leave request normalisation.

A leave request (permission, sick, or vacation leave) becomes one attendance
record written in closed form: clock_in and clock_out both carry the
submission time, so a leave record is never an open session.
"""

from datetime import datetime
from typing import Optional

from presensi.exceptions import LeaveValidationError, NotAuthenticatedError
from presensi.schemas.attendance import (
    AttendanceCreate, LeaveCategory, LeaveRequest, LocationSnapshot
)
from presensi.services.status_classifier import status_for_leave
from presensi.utils.datetime_utils import ensure_utc, format_date, local_date, utc_now
from presensi.utils.validators import (
    MAX_LEAVE_DAYS, sanitize_input, validate_date_range, validate_leave_purpose
)

MULTI_DAY_CATEGORIES = (LeaveCategory.SICK, LeaveCategory.LEAVE)


def validate_leave_request(request: LeaveRequest) -> None:
    """
    Check a leave request before anything is written.

    Raises:
        LeaveValidationError: if the purpose is missing, the permission kind
            is missing, or a sick/leave request has no usable dates
    """
    if not validate_leave_purpose(request.purpose):
        raise LeaveValidationError("A purpose is required (max 500 characters)")

    # Raises for a permission request without a kind
    status_for_leave(request.category, request.permission_kind)

    if request.category in MULTI_DAY_CATEGORIES:
        if request.start_date is None and request.end_date is None:
            raise LeaveValidationError("Sick and leave requests need a start or end date")
        if request.start_date and request.end_date:
            if not validate_date_range(request.start_date, request.end_date):
                raise LeaveValidationError(
                    f"End date must not be before start date and span at most {MAX_LEAVE_DAYS} days"
                )


def compose_leave_notes(request: LeaveRequest) -> str:
    parts = [sanitize_input(request.purpose)]
    if request.category in MULTI_DAY_CATEGORIES:
        if request.start_date:
            parts.append(f"Mulai: {format_date(request.start_date)}")
        if request.end_date:
            parts.append(f"Selesai: {format_date(request.end_date)}")
    return " | ".join(parts)


def build_leave_record(
    request: LeaveRequest,
    user_id: str,
    location: Optional[LocationSnapshot] = None,
    now: Optional[datetime] = None,
    timezone_str: Optional[str] = None
) -> AttendanceCreate:
    """
    Build the unpersisted attendance record for a leave request.

    Args:
        request: leave category and form fields
        user_id: authenticated user
        location: best-effort device snapshot; falls back to the one on the
            request, and is left absent when neither is given
        now: submission time (defaults to the current UTC time)
        timezone_str: user's time zone, used to pick the business day

    Returns:
        An AttendanceCreate with clock_in == clock_out == now

    Raises:
        NotAuthenticatedError: without a user
        LeaveValidationError: if the request is invalid
    """
    if not user_id:
        raise NotAuthenticatedError()

    validate_leave_request(request)

    now = ensure_utc(now) or utc_now()
    location = location or request.location

    if request.category in MULTI_DAY_CATEGORIES and request.start_date:
        record_date = request.start_date
    else:
        record_date = local_date(now, timezone_str)

    return AttendanceCreate(
        user_id=user_id,
        date=record_date,
        clock_in=now,
        clock_out=now,
        status=status_for_leave(request.category, request.permission_kind),
        notes=compose_leave_notes(request),
        location_name=location.location_name if location else None,
        coordinates=location.coordinates if location else None,
    )
