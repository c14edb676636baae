from .profile import Profile
from .attendance import AttendanceRecord
from .sliks import SliksKtp

__all__ = ["Profile", "AttendanceRecord", "SliksKtp"]
