"""
Attendance action boundary: clock-in, clock-out, leave submission and
amendment of existing records.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Dict, List, Optional

from presensi.config import settings
from presensi.exceptions import (
    NoOpenSessionError, NotAuthenticatedError, PreconditionError,
    RecordImmutableError, RecordNotFoundError, SessionAlreadyOpenError
)
from presensi.schemas.attendance import (
    AttendanceAmendRequest, AttendanceCreate, AttendanceResponse, AttendanceStatus,
    AttendanceUpdate, LeaveRequest, LocationSnapshot, TodayAttendanceResponse
)
from presensi.services.leave_builder import build_leave_record, validate_leave_request
from presensi.services.location_service import ReverseGeocoder, resolve_snapshot
from presensi.services.record_store import RecordStore
from presensi.services.session_resolver import (
    can_clock_in, can_clock_out, resolve_today_session, session_status
)
from presensi.services.status_classifier import classify_clock_in_status
from presensi.utils.datetime_utils import ensure_utc, local_date, utc_now

logger = logging.getLogger(__name__)


class AttendanceService:
    """
    Attendance actions for authenticated users.

    Actions for one user run one at a time: each takes the user's lock,
    re-reads the history and re-checks eligibility before writing. The
    store's partial unique index on open sessions covers writers in other
    processes.
    """

    def __init__(self, store: RecordStore, geocoder: Optional[ReverseGeocoder] = None):
        self.store = store
        self.geocoder = geocoder
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_holders: Dict[str, int] = {}

    @asynccontextmanager
    async def _user_lock(self, user_id: str):
        # Dropped once the last holder or waiter leaves
        lock = self._locks.setdefault(user_id, asyncio.Lock())
        self._lock_holders[user_id] = self._lock_holders.get(user_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_holders[user_id] -= 1
            if not self._lock_holders[user_id]:
                del self._lock_holders[user_id]
                del self._locks[user_id]

    @staticmethod
    def _require_user(user_id: Optional[str]):
        if not user_id:
            raise NotAuthenticatedError()

    async def get_timezone(self, user_id: str) -> str:
        profile = await self.store.get_profile(user_id)
        if profile and profile.timezone:
            return profile.timezone
        return settings.TIMEZONE

    async def _today_session(self, user_id: str, now: datetime, timezone_str: str):
        today = local_date(now, timezone_str)
        history = await self.store.list_attendance(user_id)
        return today, resolve_today_session(history, today)

    async def get_history(self, user_id: str, limit: Optional[int] = None) -> List[AttendanceResponse]:
        self._require_user(user_id)
        return await self.store.list_attendance(user_id, limit)

    async def get_today(self, user_id: str, now: Optional[datetime] = None) -> TodayAttendanceResponse:
        """Today's session and the actions currently allowed."""
        self._require_user(user_id)
        now = ensure_utc(now) or utc_now()

        timezone_str = await self.get_timezone(user_id)
        today, session = await self._today_session(user_id, now, timezone_str)

        return TodayAttendanceResponse(
            date=today,
            status=session_status(session),
            session=session,
            can_clock_in=can_clock_in(session),
            can_clock_out=can_clock_out(session),
        )

    async def clock_in(
        self,
        user_id: str,
        location: Optional[LocationSnapshot] = None,
        now: Optional[datetime] = None
    ) -> AttendanceResponse:
        """
        Open a new attendance session for today.

        Raises:
            NotAuthenticatedError: without a user
            SessionAlreadyOpenError: if today's latest record is still open
            StoreReadError / StoreWriteError: if the store fails
        """
        self._require_user(user_id)
        now = ensure_utc(now) or utc_now()

        async with self._user_lock(user_id):
            timezone_str = await self.get_timezone(user_id)
            today, session = await self._today_session(user_id, now, timezone_str)

            if not can_clock_in(session):
                logger.info(f"Clock-in rejected for user {user_id}: session {session.id} is open")
                raise SessionAlreadyOpenError()

            snapshot = await resolve_snapshot(location, self.geocoder)
            record = AttendanceCreate(
                user_id=user_id,
                date=today,
                clock_in=now,
                status=classify_clock_in_status(now, timezone_str),
                location_name=snapshot.location_name if snapshot else None,
                coordinates=snapshot.coordinates if snapshot else None,
            )

            new_record = await self.store.insert_attendance(record)
            logger.info(f"User {user_id} clocked in ({new_record.status.value}) on {today}")
            return new_record

    async def clock_out(self, user_id: str, now: Optional[datetime] = None) -> AttendanceResponse:
        """
        Close today's open session.

        Raises:
            NotAuthenticatedError: without a user
            NoOpenSessionError: if there is nothing open today
            StoreReadError / StoreWriteError: if the store fails
        """
        self._require_user(user_id)
        now = ensure_utc(now) or utc_now()

        async with self._user_lock(user_id):
            timezone_str = await self.get_timezone(user_id)
            today, session = await self._today_session(user_id, now, timezone_str)

            if not can_clock_out(session):
                logger.info(f"Clock-out rejected for user {user_id}: no open session on {today}")
                raise NoOpenSessionError()

            updated = await self.store.update_attendance(session.id, AttendanceUpdate(clock_out=now))
            logger.info(f"User {user_id} clocked out of session {session.id}")
            return updated

    async def submit_leave(
        self,
        user_id: str,
        request: LeaveRequest,
        now: Optional[datetime] = None
    ) -> AttendanceResponse:
        """
        Record a permission, sick or leave request as a closed record.

        A request that lands on today while a session is still open is
        rejected; the user has to clock out first.

        Raises:
            NotAuthenticatedError: without a user
            LeaveValidationError: if the request is invalid
            SessionAlreadyOpenError: if it would shadow today's open session
            StoreReadError / StoreWriteError: if the store fails
        """
        self._require_user(user_id)
        validate_leave_request(request)
        now = ensure_utc(now) or utc_now()

        async with self._user_lock(user_id):
            timezone_str = await self.get_timezone(user_id)
            today, session = await self._today_session(user_id, now, timezone_str)

            snapshot = await resolve_snapshot(request.location, self.geocoder)
            record = build_leave_record(request, user_id, snapshot, now, timezone_str)

            if record.date == today and can_clock_out(session):
                logger.info(f"Leave rejected for user {user_id}: session {session.id} is open")
                raise SessionAlreadyOpenError("Clock out before submitting a leave request for today")

            new_record = await self.store.insert_attendance(record)
            logger.info(f"User {user_id} submitted {new_record.status.value} for {new_record.date}")
            return new_record

    async def amend_record(
        self,
        user_id: str,
        record_id: str,
        amendment: AttendanceAmendRequest
    ) -> AttendanceResponse:
        """
        Change notes and/or status of one of the user's records.

        Open sessions accept any persisted status. Leave records stay leave
        records. Closed regular sessions are immutable.

        Raises:
            NotAuthenticatedError: without a user
            PreconditionError: if the amendment is empty or uses the virtual status
            RecordNotFoundError: if the record is missing or not the user's
            RecordImmutableError: if the record can no longer change that way
        """
        self._require_user(user_id)

        if amendment.notes is None and amendment.status is None:
            raise PreconditionError("Nothing to update")
        if amendment.status == AttendanceStatus.NOT_CLOCKED_IN:
            raise PreconditionError("'Belum Absen' cannot be stored")

        async with self._user_lock(user_id):
            record = await self.store.get_attendance(record_id)
            if record is None or record.user_id != user_id:
                raise RecordNotFoundError("Attendance record not found")

            if record.clock_out is not None and not record.status.is_leave:
                raise RecordImmutableError()
            if (
                record.clock_out is not None
                and amendment.status is not None
                and not amendment.status.is_leave
            ):
                raise RecordImmutableError("Leave records can only take a leave status")

            fields = AttendanceUpdate(**amendment.model_dump(exclude_none=True))
            updated = await self.store.update_attendance(record_id, fields)
            logger.info(f"User {user_id} amended record {record_id}")
            return updated
