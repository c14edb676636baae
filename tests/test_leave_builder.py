from datetime import date, datetime

import pytest
import pytz

from presensi.exceptions import LeaveValidationError, NotAuthenticatedError
from presensi.schemas.attendance import (
    AttendanceStatus, LeaveCategory, LeaveRequest, LocationSnapshot, PermissionKind
)
from presensi.services.leave_builder import build_leave_record, compose_leave_notes

NOW = datetime(2026, 10, 19, 3, 30, tzinfo=pytz.UTC)  # 10:30 in Jakarta


def permission(kind=PermissionKind.HALF_DAY, **kwargs):
    return LeaveRequest(category=LeaveCategory.PERMISSION, permission_kind=kind, purpose="Urusan keluarga", **kwargs)


def test_permission_is_written_closed_on_the_local_day():
    record = build_leave_record(permission(), "user-1", now=NOW, timezone_str="Asia/Jakarta")

    assert record.status == AttendanceStatus.PERMISSION_HALF_DAY
    assert record.clock_in == NOW
    assert record.clock_out == NOW
    assert record.date == date(2026, 10, 19)
    assert record.notes == "Urusan keluarga"
    assert record.user_id == "user-1"


def test_permission_ignores_dates():
    request = permission(PermissionKind.FULL_DAY, start_date=date(2026, 11, 1), end_date=date(2026, 11, 2))

    record = build_leave_record(request, "user-1", now=NOW, timezone_str="Asia/Jakarta")

    assert record.status == AttendanceStatus.PERMISSION_FULL_DAY
    assert record.date == date(2026, 10, 19)
    assert record.notes == "Urusan keluarga"


def test_sick_request_uses_start_date_and_records_range_in_notes():
    request = LeaveRequest(
        category=LeaveCategory.SICK,
        purpose="  Demam   tinggi ",
        start_date=date(2026, 10, 1),
        end_date=date(2026, 10, 3),
    )

    record = build_leave_record(request, "user-1", now=NOW)

    assert record.status == AttendanceStatus.SICK
    assert record.date == date(2026, 10, 1)
    assert record.notes == "Demam tinggi | Mulai: 01-10-2026 | Selesai: 03-10-2026"
    assert record.clock_in == record.clock_out == NOW


def test_leave_with_only_end_date_is_dated_today():
    request = LeaveRequest(category=LeaveCategory.LEAVE, purpose="Cuti tahunan", end_date=date(2026, 10, 24))

    record = build_leave_record(request, "user-1", now=NOW, timezone_str="Asia/Jakarta")

    assert record.status == AttendanceStatus.LEAVE
    assert record.date == date(2026, 10, 19)
    assert record.notes == "Cuti tahunan | Selesai: 24-10-2026"
    assert record.clock_in == record.clock_out == NOW


def test_business_day_follows_user_time_zone():
    late_evening_utc = datetime(2026, 10, 19, 18, 0, tzinfo=pytz.UTC)

    record = build_leave_record(permission(), "user-1", now=late_evening_utc, timezone_str="Asia/Jakarta")

    assert record.date == date(2026, 10, 20)


def test_location_is_carried_when_given():
    location = LocationSnapshot(latitude=-6.2, longitude=106.8166, location_name="Kantor Pusat")

    record = build_leave_record(permission(), "user-1", location=location, now=NOW)

    assert record.location_name == "Kantor Pusat"
    assert record.coordinates.latitude == -6.2
    assert record.coordinates.longitude == 106.8166


def test_location_is_optional():
    record = build_leave_record(permission(), "user-1", now=NOW)

    assert record.location_name is None
    assert record.coordinates is None


@pytest.mark.parametrize("request_data", [
    {"category": LeaveCategory.PERMISSION, "purpose": "Urusan keluarga"},
    {"category": LeaveCategory.PERMISSION, "permission_kind": PermissionKind.HALF_DAY, "purpose": "   "},
    {"category": LeaveCategory.SICK, "purpose": "Demam"},
    {"category": LeaveCategory.LEAVE, "purpose": "Liburan",
     "start_date": date(2026, 10, 10), "end_date": date(2026, 10, 9)},
    {"category": LeaveCategory.LEAVE, "purpose": "Liburan",
     "start_date": date(2026, 1, 1), "end_date": date(2027, 1, 2)},
    {"category": LeaveCategory.LEAVE, "purpose": "x" * 501, "start_date": date(2026, 10, 10)},
])
def test_invalid_requests_are_rejected(request_data):
    with pytest.raises(LeaveValidationError):
        build_leave_record(LeaveRequest(**request_data), "user-1", now=NOW)


def test_requires_user():
    with pytest.raises(NotAuthenticatedError):
        build_leave_record(permission(), "", now=NOW)


def test_notes_for_start_only_range():
    request = LeaveRequest(category=LeaveCategory.SICK, purpose="Rawat inap", start_date=date(2026, 10, 5))

    assert compose_leave_notes(request) == "Rawat inap | Mulai: 05-10-2026"
