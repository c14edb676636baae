from .attendance import (
    AttendanceStatus, LeaveCategory, PermissionKind, Coordinates, LocationSnapshot,
    AttendanceBase, AttendanceCreate, AttendanceUpdate, AttendanceResponse,
    LeaveRequest, ClockInRequest, AttendanceAmendRequest, TodayAttendanceResponse,
)
from .sliks import KtpData, SliksCreate, SliksResponse
from .activity import AttendanceActivity, SlikActivity, CombinedActivity, ActivityFeedResponse
from .profile import ProfileUpdate, ProfileResponse

__all__ = [
    "AttendanceStatus", "LeaveCategory", "PermissionKind", "Coordinates", "LocationSnapshot",
    "AttendanceBase", "AttendanceCreate", "AttendanceUpdate", "AttendanceResponse",
    "LeaveRequest", "ClockInRequest", "AttendanceAmendRequest", "TodayAttendanceResponse",
    "KtpData", "SliksCreate", "SliksResponse",
    "AttendanceActivity", "SlikActivity", "CombinedActivity", "ActivityFeedResponse",
    "ProfileUpdate", "ProfileResponse",
]
