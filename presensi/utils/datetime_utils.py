import re
from datetime import datetime, date
from typing import Optional, Union
import pytz

from presensi.config import settings

HARI = ["Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu", "Minggu"]
BULAN = [
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
]
KTP_DATE_PATTERN = re.compile(r"(\d{2})-(\d{2})-(\d{4})")


def get_user_timezone(timezone_str: Optional[str] = None) -> pytz.BaseTzInfo:
    """Resolve a time zone name, falling back to the configured default."""
    try:
        return pytz.timezone(timezone_str or settings.TIMEZONE)
    except pytz.UnknownTimeZoneError:
        return pytz.timezone(settings.TIMEZONE)


def utc_now() -> datetime:
    return datetime.now(pytz.UTC)


def user_now(timezone_str: Optional[str] = None) -> datetime:
    """Current time in the user's time zone."""
    return utc_now().astimezone(get_user_timezone(timezone_str))


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive values read back from the database."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return pytz.UTC.localize(dt)
    return dt.astimezone(pytz.UTC)


def to_user_timezone(dt: datetime, timezone_str: Optional[str] = None) -> datetime:
    """Convert a UTC (or naive UTC) time to the user's time zone."""
    if dt.tzinfo is None:
        dt = pytz.UTC.localize(dt)
    return dt.astimezone(get_user_timezone(timezone_str))


def get_today(timezone_str: Optional[str] = None) -> date:
    """Today's calendar date in the user's time zone."""
    return user_now(timezone_str).date()


def local_date(dt: datetime, timezone_str: Optional[str] = None) -> date:
    """Business day a timestamp falls on for the user."""
    return to_user_timezone(dt, timezone_str).date()


def format_time(dt: datetime, timezone_str: Optional[str] = None, with_seconds: bool = False) -> str:
    fmt = "%H:%M:%S" if with_seconds else "%H:%M"
    return to_user_timezone(dt, timezone_str).strftime(fmt)


def format_date(dt: Union[datetime, date]) -> str:
    """Format as the dd-mm-YYYY form used on Indonesian forms."""
    if isinstance(dt, datetime):
        dt = dt.date()
    return dt.strftime("%d-%m-%Y")


def format_long_date(dt: Union[datetime, date], with_year: bool = False) -> str:
    """Indonesian long date, e.g. 'Senin, 19 Oktober'."""
    if isinstance(dt, datetime):
        dt = dt.date()
    text = f"{HARI[dt.weekday()]}, {dt.day} {BULAN[dt.month - 1]}"
    if with_year:
        text = f"{text} {dt.year}"
    return text


def parse_indonesian_date(date_str: str) -> Optional[date]:
    """Find and parse the dd-mm-YYYY date printed on a KTP."""
    match = KTP_DATE_PATTERN.search(date_str or "")
    if not match:
        return None
    day, month, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None
