"""
Record store for attendance, SLIK intake and profile rows.

Callers only see the async `RecordStore` interface. `SqlRecordStore` runs each
call on a worker thread with its own SQLAlchemy session, so concurrent calls
never share a session.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.concurrency import run_in_threadpool

from presensi.database import SessionLocal
from presensi.exceptions import (
    OpenSessionConflictError, RecordNotFoundError, StoreReadError, StoreWriteError
)
from presensi.models.attendance import AttendanceRecord
from presensi.models.profile import Profile
from presensi.models.sliks import SliksKtp
from presensi.schemas.attendance import AttendanceCreate, AttendanceResponse, AttendanceUpdate
from presensi.schemas.profile import ProfileResponse, ProfileUpdate
from presensi.schemas.sliks import SliksCreate, SliksResponse

logger = logging.getLogger(__name__)


class RecordStore(ABC):
    """Persistence operations the attendance core depends on."""

    @abstractmethod
    async def list_attendance(self, user_id: str, limit: Optional[int] = None) -> List[AttendanceResponse]:
        """Attendance history sorted by date desc, then created_at desc."""

    @abstractmethod
    async def list_recent_attendance(self, user_id: str, limit: int) -> List[AttendanceResponse]:
        """The `limit` most recently created attendance records."""

    @abstractmethod
    async def get_attendance(self, record_id: str) -> Optional[AttendanceResponse]:
        pass

    @abstractmethod
    async def insert_attendance(self, record: AttendanceCreate) -> AttendanceResponse:
        pass

    @abstractmethod
    async def update_attendance(self, record_id: str, fields: AttendanceUpdate) -> AttendanceResponse:
        pass

    @abstractmethod
    async def list_document_records(self, user_id: str, limit: int) -> List[SliksResponse]:
        """The `limit` most recent SLIK intake records."""

    @abstractmethod
    async def insert_document_record(self, record: SliksCreate) -> SliksResponse:
        pass

    @abstractmethod
    async def get_profile(self, user_id: str) -> Optional[ProfileResponse]:
        pass

    @abstractmethod
    async def get_or_create_profile(self, user_id: str) -> ProfileResponse:
        pass

    @abstractmethod
    async def update_profile(self, user_id: str, fields: ProfileUpdate) -> ProfileResponse:
        pass


class SqlRecordStore(RecordStore):
    """SQLAlchemy-backed record store."""

    def __init__(self, session_factory=None):
        self.session_factory = session_factory or SessionLocal

    async def _read(self, func, *args):
        try:
            return await run_in_threadpool(func, *args)
        except SQLAlchemyError as e:
            logger.error(f"Store read failed in {func.__name__}: {e}")
            raise StoreReadError() from e

    async def _write(self, func, *args):
        try:
            return await run_in_threadpool(func, *args)
        except SQLAlchemyError as e:
            logger.error(f"Store write failed in {func.__name__}: {e}")
            raise StoreWriteError() from e

    # Attendance

    async def list_attendance(self, user_id, limit=None):
        return await self._read(self._list_attendance, user_id, limit)

    async def list_recent_attendance(self, user_id, limit):
        return await self._read(self._list_recent_attendance, user_id, limit)

    async def get_attendance(self, record_id):
        return await self._read(self._get_attendance, record_id)

    async def insert_attendance(self, record):
        try:
            return await self._write(self._insert_attendance, record)
        except StoreWriteError as e:
            if isinstance(e.__cause__, IntegrityError) and record.clock_out is None:
                raise OpenSessionConflictError() from e.__cause__
            raise

    async def update_attendance(self, record_id, fields):
        return await self._write(self._update_attendance, record_id, fields)

    def _list_attendance(self, user_id: str, limit: Optional[int]) -> List[AttendanceResponse]:
        with self.session_factory() as db:
            query = db.query(AttendanceRecord).filter(
                AttendanceRecord.user_id == user_id
            ).order_by(desc(AttendanceRecord.date), desc(AttendanceRecord.created_at))

            if limit:
                query = query.limit(limit)

            return [AttendanceResponse.model_validate(record) for record in query.all()]

    def _list_recent_attendance(self, user_id: str, limit: int) -> List[AttendanceResponse]:
        with self.session_factory() as db:
            records = db.query(AttendanceRecord).filter(
                AttendanceRecord.user_id == user_id
            ).order_by(desc(AttendanceRecord.created_at)).limit(limit).all()

            return [AttendanceResponse.model_validate(record) for record in records]

    def _get_attendance(self, record_id: str) -> Optional[AttendanceResponse]:
        with self.session_factory() as db:
            record = db.get(AttendanceRecord, record_id)
            return AttendanceResponse.model_validate(record) if record else None

    def _insert_attendance(self, record_data: AttendanceCreate) -> AttendanceResponse:
        with self.session_factory() as db:
            try:
                self._ensure_profile(db, record_data.user_id)

                data = record_data.model_dump()
                data["status"] = record_data.status.value
                new_record = AttendanceRecord(**data)

                db.add(new_record)
                db.commit()
                db.refresh(new_record)

                return AttendanceResponse.model_validate(new_record)
            except SQLAlchemyError:
                db.rollback()
                raise

    def _update_attendance(self, record_id: str, update_data: AttendanceUpdate) -> AttendanceResponse:
        with self.session_factory() as db:
            try:
                record = db.get(AttendanceRecord, record_id)
                if not record:
                    raise RecordNotFoundError("Attendance record not found")

                for field, value in update_data.model_dump(exclude_unset=True).items():
                    if field == "status" and value is not None:
                        value = value.value
                    setattr(record, field, value)

                db.commit()
                db.refresh(record)

                return AttendanceResponse.model_validate(record)
            except SQLAlchemyError:
                db.rollback()
                raise

    # SLIK intake

    async def list_document_records(self, user_id, limit):
        return await self._read(self._list_document_records, user_id, limit)

    async def insert_document_record(self, record):
        return await self._write(self._insert_document_record, record)

    def _list_document_records(self, user_id: str, limit: int) -> List[SliksResponse]:
        with self.session_factory() as db:
            records = db.query(SliksKtp).filter(
                SliksKtp.user_id == user_id
            ).order_by(desc(SliksKtp.created_at)).limit(limit).all()

            return [SliksResponse.model_validate(record) for record in records]

    def _insert_document_record(self, record_data: SliksCreate) -> SliksResponse:
        with self.session_factory() as db:
            try:
                self._ensure_profile(db, record_data.user_id)

                new_record = SliksKtp(**record_data.model_dump())
                db.add(new_record)
                db.commit()
                db.refresh(new_record)

                return SliksResponse.model_validate(new_record)
            except SQLAlchemyError:
                db.rollback()
                raise

    # Profiles

    async def get_profile(self, user_id):
        return await self._read(self._get_profile, user_id)

    async def get_or_create_profile(self, user_id):
        return await self._write(self._get_or_create_profile, user_id)

    async def update_profile(self, user_id, fields):
        return await self._write(self._update_profile, user_id, fields)

    def _get_profile(self, user_id: str) -> Optional[ProfileResponse]:
        with self.session_factory() as db:
            profile = db.get(Profile, user_id)
            return ProfileResponse.model_validate(profile) if profile else None

    def _get_or_create_profile(self, user_id: str) -> ProfileResponse:
        with self.session_factory() as db:
            try:
                profile = self._ensure_profile(db, user_id)
                db.commit()
                db.refresh(profile)
                return ProfileResponse.model_validate(profile)
            except SQLAlchemyError:
                db.rollback()
                raise

    def _update_profile(self, user_id: str, update_data: ProfileUpdate) -> ProfileResponse:
        with self.session_factory() as db:
            try:
                profile = self._ensure_profile(db, user_id)

                for field, value in update_data.model_dump(exclude_unset=True).items():
                    setattr(profile, field, value)

                db.commit()
                db.refresh(profile)
                return ProfileResponse.model_validate(profile)
            except SQLAlchemyError:
                db.rollback()
                raise

    @staticmethod
    def _ensure_profile(db, user_id: str) -> Profile:
        """Profiles are created on first contact with a new user."""
        profile = db.get(Profile, user_id)
        if not profile:
            profile = Profile(id=user_id)
            db.add(profile)
            db.flush()
        return profile
