from pydantic import BaseModel, Field
from typing import Optional, Union, Literal, List, Annotated
from datetime import datetime, date

from presensi.schemas.attendance import AttendanceStatus, Coordinates

ATTENDANCE_ACTIVITY = "Absensi"
SLIK_ACTIVITY = "Slik"


class AttendanceActivity(BaseModel):
    type: Literal["Absensi"] = ATTENDANCE_ACTIVITY
    title: str
    id: str
    status: AttendanceStatus
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    location_name: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    date: date


class SlikActivity(BaseModel):
    type: Literal["Slik"] = SLIK_ACTIVITY
    title: str
    id: str
    nik: Optional[str] = None
    nama_lengkap: Optional[str] = None
    tempat_lahir: Optional[str] = None
    tanggal_lahir: Optional[date] = None
    jenis_kelamin: Optional[str] = None
    alamat: Optional[str] = None
    rt_rw: Optional[str] = None
    agama: Optional[str] = None
    kewarganegaraan: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


CombinedActivity = Annotated[
    Union[AttendanceActivity, SlikActivity],
    Field(discriminator="type"),
]


class ActivityFeedResponse(BaseModel):
    activities: List[CombinedActivity]
    limit: int
