from sqlalchemy import Column, String, DateTime

from presensi.database import Base
from presensi.config import settings
from presensi.utils.datetime_utils import utc_now


class Profile(Base):
    __tablename__ = "profiles"

    # Same id as the identity provider's user
    id = Column(String(36), primary_key=True, index=True)
    full_name = Column(String(100))
    alias = Column(String(50))
    avatar_url = Column(String(500))
    position = Column(String(100))
    timezone = Column(String(50), default=settings.TIMEZONE)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)
