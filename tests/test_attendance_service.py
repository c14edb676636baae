import asyncio
from datetime import date, datetime, timedelta

import pytest
import pytz

from presensi.config import settings
from presensi.exceptions import (
    NoOpenSessionError, NotAuthenticatedError, PreconditionError, RecordImmutableError,
    RecordNotFoundError, SessionAlreadyOpenError, StoreWriteError
)
from presensi.schemas.attendance import (
    AttendanceAmendRequest, AttendanceStatus, LeaveCategory, LeaveRequest,
    LocationSnapshot, PermissionKind
)
from presensi.services.attendance_service import AttendanceService

from tests.fakes import FakeRecordStore

USER = "user-1"
TODAY = date(2026, 10, 19)


def jakarta(hour, minute=0, second=0, day=19):
    # Jakarta is UTC+7 all year
    return datetime(2026, 10, day, hour, minute, second, tzinfo=pytz.UTC) - timedelta(hours=7)


def permission_request(**kwargs):
    return LeaveRequest(
        category=LeaveCategory.PERMISSION,
        permission_kind=PermissionKind.HALF_DAY,
        purpose="Ke dokter gigi",
        **kwargs,
    )


@pytest.fixture
def service(fake_store):
    return AttendanceService(fake_store)


def run(coro):
    return asyncio.run(coro)


def test_first_clock_in_of_the_day(service, fake_store):
    record = run(service.clock_in(USER, now=jakarta(8, 5)))

    assert record.status == AttendanceStatus.PRESENT
    assert record.date == TODAY
    assert record.clock_out is None

    today = run(service.get_today(USER, now=jakarta(8, 6)))
    assert today.session.id == record.id
    assert not today.can_clock_in
    assert today.can_clock_out


def test_late_clock_in(service):
    assert run(service.clock_in(USER, now=jakarta(9, 15, 1))).status == AttendanceStatus.LATE


def test_clock_in_uses_profile_time_zone(service, fake_store):
    fake_store.set_timezone(USER, "Asia/Makassar")

    # 09:05 in Jakarta is 10:05 in Makassar
    record = run(service.clock_in(USER, now=jakarta(9, 5)))

    assert record.status == AttendanceStatus.LATE


def test_second_clock_in_is_rejected(service, fake_store):
    run(service.clock_in(USER, now=jakarta(8, 0)))

    with pytest.raises(SessionAlreadyOpenError):
        run(service.clock_in(USER, now=jakarta(8, 1)))

    assert len(fake_store.attendance) == 1
    assert service._locks == {}


def test_concurrent_clock_ins_create_one_session(service, fake_store):
    async def race():
        return await asyncio.gather(
            service.clock_in(USER, now=jakarta(8, 0)),
            service.clock_in(USER, now=jakarta(8, 0)),
            return_exceptions=True,
        )

    results = run(race())

    assert sum(isinstance(r, SessionAlreadyOpenError) for r in results) == 1
    assert len(fake_store.attendance) == 1
    assert service._locks == {}


def test_clock_out_closes_the_session(service):
    opened = run(service.clock_in(USER, now=jakarta(8, 0)))
    closed = run(service.clock_out(USER, now=jakarta(17, 0)))

    assert closed.id == opened.id
    assert closed.clock_out == jakarta(17, 0)

    today = run(service.get_today(USER, now=jakarta(17, 1)))
    assert today.can_clock_in
    assert not today.can_clock_out


def test_clock_out_without_session(service):
    with pytest.raises(NoOpenSessionError):
        run(service.clock_out(USER, now=jakarta(17, 0)))


def test_user_locks_are_released_after_each_action(service):
    for n in range(50):
        with pytest.raises(NoOpenSessionError):
            run(service.clock_out(f"user-{n}", now=jakarta(17, 0)))

    assert service._locks == {}
    assert service._lock_holders == {}


def test_yesterdays_open_session_does_not_carry_over(service):
    run(service.clock_in(USER, now=jakarta(8, 0, day=18)))

    today = run(service.get_today(USER, now=jakarta(8, 0)))
    assert today.status == AttendanceStatus.NOT_CLOCKED_IN
    with pytest.raises(NoOpenSessionError):
        run(service.clock_out(USER, now=jakarta(8, 0)))
    assert run(service.clock_in(USER, now=jakarta(8, 1))).date == TODAY


def test_second_shift_after_clock_out(service):
    run(service.clock_in(USER, now=jakarta(8, 0)))
    run(service.clock_out(USER, now=jakarta(12, 0)))

    second = run(service.clock_in(USER, now=jakarta(13, 0)))

    assert second.status == AttendanceStatus.LATE
    assert run(service.get_today(USER, now=jakarta(13, 1))).session.id == second.id


def test_leave_then_clock_in_same_day(service):
    leave = run(service.submit_leave(USER, permission_request(), now=jakarta(7, 0)))
    assert leave.status == AttendanceStatus.PERMISSION_HALF_DAY
    assert leave.clock_in == leave.clock_out

    today = run(service.get_today(USER, now=jakarta(7, 1)))
    assert today.status == AttendanceStatus.PERMISSION_HALF_DAY
    assert today.can_clock_in

    session = run(service.clock_in(USER, now=jakarta(13, 0)))
    assert run(service.get_today(USER, now=jakarta(13, 1))).session.id == session.id


def test_leave_for_today_while_session_is_open(service, fake_store):
    run(service.clock_in(USER, now=jakarta(8, 0)))

    with pytest.raises(SessionAlreadyOpenError):
        run(service.submit_leave(USER, permission_request(), now=jakarta(10, 0)))

    assert len(fake_store.attendance) == 1


def test_future_leave_while_session_is_open(service):
    run(service.clock_in(USER, now=jakarta(8, 0)))
    request = LeaveRequest(
        category=LeaveCategory.LEAVE, purpose="Cuti", start_date=date(2026, 10, 26), end_date=date(2026, 10, 28),
    )

    record = run(service.submit_leave(USER, request, now=jakarta(10, 0)))

    assert record.date == date(2026, 10, 26)
    assert record.notes == "Cuti | Mulai: 26-10-2026 | Selesai: 28-10-2026"
    assert run(service.get_today(USER, now=jakarta(10, 1))).can_clock_out


def test_clock_in_location_without_geocoder(service):
    location = LocationSnapshot(latitude=-6.2, longitude=106.816666)

    record = run(service.clock_in(USER, location, now=jakarta(8, 0)))

    assert record.location_name == "-6.2000, 106.8167"
    assert record.coordinates.latitude == -6.2


def test_clock_in_location_with_geocoder(fake_store, monkeypatch):
    monkeypatch.setattr(settings, "ENABLE_REVERSE_GEOCODING", True)

    class StaticGeocoder:
        async def reverse(self, latitude, longitude):
            return "Jalan Sudirman, Setiabudi, Jakarta Selatan"

    service = AttendanceService(fake_store, StaticGeocoder())
    record = run(service.clock_in(USER, LocationSnapshot(latitude=-6.2, longitude=106.8), now=jakarta(8, 0)))

    assert record.location_name == "Jalan Sudirman, Setiabudi, Jakarta Selatan"


def test_write_failure_is_reported(service, fake_store):
    fake_store.fail_writes = True

    with pytest.raises(StoreWriteError):
        run(service.clock_in(USER, now=jakarta(8, 0)))

    assert fake_store.attendance == {}


def test_actions_require_user(service):
    with pytest.raises(NotAuthenticatedError):
        run(service.clock_in("", now=jakarta(8, 0)))
    with pytest.raises(NotAuthenticatedError):
        run(service.submit_leave(None, permission_request()))


def test_history_is_newest_day_first(service):
    run(service.clock_in(USER, now=jakarta(8, 0, day=17)))
    run(service.clock_in(USER, now=jakarta(8, 0, day=19)))
    run(service.clock_in(USER, now=jakarta(8, 0, day=18)))

    history = run(service.get_history(USER, limit=2))

    assert [r.date for r in history] == [date(2026, 10, 19), date(2026, 10, 18)]


class TestAmendRecord:

    def test_open_session_notes(self, service):
        record = run(service.clock_in(USER, now=jakarta(8, 0)))

        amended = run(service.amend_record(USER, record.id, AttendanceAmendRequest(notes="Kunjungan nasabah")))

        assert amended.notes == "Kunjungan nasabah"
        assert amended.status == AttendanceStatus.PRESENT

    def test_closed_session_is_immutable(self, service):
        record = run(service.clock_in(USER, now=jakarta(8, 0)))
        run(service.clock_out(USER, now=jakarta(17, 0)))

        with pytest.raises(RecordImmutableError):
            run(service.amend_record(USER, record.id, AttendanceAmendRequest(notes="late edit")))

    def test_leave_record_keeps_leave_status(self, service):
        leave = run(service.submit_leave(USER, permission_request(), now=jakarta(7, 0)))

        amended = run(service.amend_record(
            USER, leave.id, AttendanceAmendRequest(status=AttendanceStatus.PERMISSION_FULL_DAY)
        ))
        assert amended.status == AttendanceStatus.PERMISSION_FULL_DAY

        with pytest.raises(RecordImmutableError):
            run(service.amend_record(USER, leave.id, AttendanceAmendRequest(status=AttendanceStatus.PRESENT)))

    def test_open_session_can_return_from_leave_status(self, service):
        record = run(service.clock_in(USER, now=jakarta(8, 0)))

        sick = run(service.amend_record(USER, record.id, AttendanceAmendRequest(status=AttendanceStatus.SICK)))
        assert sick.status == AttendanceStatus.SICK
        assert sick.clock_out is None

        back = run(service.amend_record(USER, record.id, AttendanceAmendRequest(status=AttendanceStatus.PRESENT)))
        assert back.status == AttendanceStatus.PRESENT
        assert back.clock_out is None

    def test_other_users_record_is_not_found(self, service):
        record = run(service.clock_in("user-2", now=jakarta(8, 0)))

        with pytest.raises(RecordNotFoundError):
            run(service.amend_record(USER, record.id, AttendanceAmendRequest(notes="x")))

    def test_missing_record(self, service):
        with pytest.raises(RecordNotFoundError):
            run(service.amend_record(USER, "missing", AttendanceAmendRequest(notes="x")))

    @pytest.mark.parametrize("amendment", [
        AttendanceAmendRequest(),
        AttendanceAmendRequest(status=AttendanceStatus.NOT_CLOCKED_IN),
    ])
    def test_rejected_amendments(self, service, amendment):
        record = run(service.clock_in(USER, now=jakarta(8, 0)))

        with pytest.raises(PreconditionError):
            run(service.amend_record(USER, record.id, amendment))
