import re
from datetime import date
from typing import Optional

import pytz

from presensi.config import settings

MAX_NOTE_LENGTH = 500
MAX_LEAVE_DAYS = 365


def validate_nik(nik: str) -> bool:
    """NIK on a KTP is exactly 16 digits."""
    return re.match(r'^\d{16}$', nik or "") is not None


def validate_timezone(timezone_str: str) -> bool:
    try:
        pytz.timezone(timezone_str)
        return True
    except pytz.UnknownTimeZoneError:
        return False


def validate_leave_purpose(purpose: Optional[str]) -> bool:
    """Leave purpose is required and bounded."""
    if purpose is None or len(purpose.strip()) == 0:
        return False
    return len(purpose.strip()) <= MAX_NOTE_LENGTH


def validate_date_range(start_date: date, end_date: date) -> bool:
    if start_date > end_date:
        return False

    if (end_date - start_date).days > MAX_LEAVE_DAYS:
        return False

    return True


def validate_activity_limit(limit: int) -> bool:
    return 1 <= limit <= settings.MAX_ACTIVITY_LIMIT


def sanitize_input(text: Optional[str]) -> str:
    """Trim and collapse whitespace."""
    if not text:
        return ""

    text = text.strip()
    text = re.sub(r'\s+', ' ', text)

    return text
