from datetime import datetime, time
from typing import Optional

from presensi.config import settings
from presensi.exceptions import LeaveValidationError
from presensi.schemas.attendance import AttendanceStatus, LeaveCategory, PermissionKind
from presensi.utils.datetime_utils import to_user_timezone


def late_cutoff() -> time:
    return time(settings.LATE_CUTOFF_HOUR, settings.LATE_CUTOFF_MINUTE)


def classify_clock_in_status(
    timestamp: datetime,
    timezone_str: Optional[str] = None,
    cutoff: Optional[time] = None
) -> AttendanceStatus:
    """
    Classify a clock-in as on time or late.

    Aware timestamps are converted to the user's time zone; naive ones are
    taken as local wall-clock time. Anything strictly after the cutoff
    (09:15:00 by default) is late.
    """
    if cutoff is None:
        cutoff = late_cutoff()

    local = to_user_timezone(timestamp, timezone_str) if timestamp.tzinfo else timestamp
    wall_clock = local.time().replace(tzinfo=None)

    if wall_clock > cutoff:
        return AttendanceStatus.LATE
    return AttendanceStatus.PRESENT


def status_for_leave(
    category: LeaveCategory,
    permission_kind: Optional[PermissionKind] = None
) -> AttendanceStatus:
    """Map a leave category straight onto its status."""
    if category == LeaveCategory.PERMISSION:
        if permission_kind == PermissionKind.HALF_DAY:
            return AttendanceStatus.PERMISSION_HALF_DAY
        if permission_kind == PermissionKind.FULL_DAY:
            return AttendanceStatus.PERMISSION_FULL_DAY
        raise LeaveValidationError("Permission requests need a half_day or full_day kind")

    if category == LeaveCategory.SICK:
        return AttendanceStatus.SICK

    return AttendanceStatus.LEAVE
