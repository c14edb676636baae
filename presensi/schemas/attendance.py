from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional
from datetime import datetime, date
from enum import Enum

from presensi.utils.datetime_utils import ensure_utc
from presensi.utils.validators import MAX_NOTE_LENGTH


class AttendanceStatus(str, Enum):
    NOT_CLOCKED_IN = "Belum Absen"  # virtual, never persisted
    PRESENT = "Hadir"
    LATE = "Terlambat"
    PERMISSION_HALF_DAY = "Izin - Half Day"
    PERMISSION_FULL_DAY = "Izin - Full Day"
    SICK = "Sakit"
    LEAVE = "Cuti"

    @property
    def is_leave(self) -> bool:
        return self in LEAVE_STATUSES


LEAVE_STATUSES = frozenset({
    AttendanceStatus.PERMISSION_HALF_DAY,
    AttendanceStatus.PERMISSION_FULL_DAY,
    AttendanceStatus.SICK,
    AttendanceStatus.LEAVE,
})


class LeaveCategory(str, Enum):
    PERMISSION = "permission"
    SICK = "sick"
    LEAVE = "leave"


class PermissionKind(str, Enum):
    HALF_DAY = "half_day"
    FULL_DAY = "full_day"


class Coordinates(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class LocationSnapshot(BaseModel):
    """Device-reported location at the moment of an action."""
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    location_name: Optional[str] = Field(None, max_length=255)

    @property
    def coordinates(self) -> Optional[Coordinates]:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinates(latitude=self.latitude, longitude=self.longitude)


class AttendanceBase(BaseModel):
    user_id: str
    date: date
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    status: AttendanceStatus
    location_name: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    notes: Optional[str] = None


class AttendanceCreate(AttendanceBase):

    @model_validator(mode="after")
    def check_persistable(self):
        if self.status == AttendanceStatus.NOT_CLOCKED_IN:
            raise ValueError("'Belum Absen' is not a persisted status")
        if self.clock_out is not None and self.clock_in is None:
            raise ValueError("clock_out requires clock_in")
        return self


class AttendanceUpdate(BaseModel):
    clock_out: Optional[datetime] = None
    status: Optional[AttendanceStatus] = None
    notes: Optional[str] = None


class AttendanceResponse(AttendanceBase):
    id: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    @field_validator("clock_in", "clock_out", "created_at", "updated_at")
    @classmethod
    def as_utc(cls, value):
        return ensure_utc(value)

    class Config:
        from_attributes = True


class LeaveRequest(BaseModel):
    category: LeaveCategory
    permission_kind: Optional[PermissionKind] = None
    purpose: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    location: Optional[LocationSnapshot] = None


class ClockInRequest(BaseModel):
    location: Optional[LocationSnapshot] = None


class AttendanceAmendRequest(BaseModel):
    notes: Optional[str] = Field(None, max_length=MAX_NOTE_LENGTH)
    status: Optional[AttendanceStatus] = None


class TodayAttendanceResponse(BaseModel):
    """The user's current day as seen by the attendance screen."""
    status: AttendanceStatus
    session: Optional[AttendanceResponse] = None
    can_clock_in: bool
    can_clock_out: bool
    date: date
