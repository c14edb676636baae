import uuid

from sqlalchemy import Column, String, Date, DateTime, Text, JSON, ForeignKey, Index, text
from sqlalchemy.orm import relationship

from presensi.database import Base
from presensi.utils.datetime_utils import utc_now


class AttendanceRecord(Base):
    __tablename__ = "attendance"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    clock_in = Column(DateTime(timezone=True))
    clock_out = Column(DateTime(timezone=True))
    status = Column(String(30), nullable=False)
    location_name = Column(String(255))
    coordinates = Column(JSON)  # {"latitude": ..., "longitude": ...}
    notes = Column(Text)
    # Set in Python for sub-second precision; orders sessions within a day
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    profile = relationship("Profile", backref="attendance_records")

    __table_args__ = (
        Index("ix_attendance_user_date_created", "user_id", "date", "created_at"),
        # At most one open session per user and day
        Index(
            "uix_attendance_open_session",
            "user_id",
            "date",
            unique=True,
            postgresql_where=text("clock_out IS NULL"),
            sqlite_where=text("clock_out IS NULL"),
        ),
    )
