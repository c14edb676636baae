"""
Resolution of a user's current attendance session.

The current session is re-derived from the full history on every read. A user
may hold several records for the same day (a leave record followed by a later
clock-in, or a finished shift followed by another), so the session is the
most recently created record of today, not "the record without clock_out".
"""

from datetime import date
from typing import Iterable, Optional

from presensi.schemas.attendance import AttendanceResponse, AttendanceStatus
from presensi.utils.datetime_utils import get_today


def _recency_key(record: AttendanceResponse):
    # Equal created_at values fall back to the highest id
    return (record.created_at, record.id)


def resolve_today_session(
    history: Iterable[AttendanceResponse],
    today: Optional[date] = None
) -> Optional[AttendanceResponse]:
    """
    Return today's latest attendance record.

    Args:
        history: the user's attendance records, in any order
        today: the user's current calendar date (defaults to today in the
            configured time zone)

    Returns:
        The record for `today` with the greatest `created_at`, or None when
        the user has no record for today. It is the open session when its
        `clock_out` is None.
    """
    if today is None:
        today = get_today()

    todays_records = [record for record in history if record.date == today]
    if not todays_records:
        return None

    return max(todays_records, key=_recency_key)


def can_clock_in(session: Optional[AttendanceResponse]) -> bool:
    """Clock-in is allowed when nothing is open for today."""
    return session is None or session.clock_out is not None


def can_clock_out(session: Optional[AttendanceResponse]) -> bool:
    """Clock-out needs today's latest record to still be open."""
    return session is not None and session.clock_out is None


def session_status(session: Optional[AttendanceResponse]) -> AttendanceStatus:
    if session is None:
        return AttendanceStatus.NOT_CLOCKED_IN
    return session.status
