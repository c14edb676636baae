import uuid

from sqlalchemy import Column, String, Date, DateTime, Text, ForeignKey, Index
from sqlalchemy.orm import relationship

from presensi.database import Base
from presensi.utils.datetime_utils import utc_now


class SliksKtp(Base):
    """Identity-card (KTP) intake record captured through the SLIK flow."""

    __tablename__ = "sliks_ktp"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False)
    nik = Column(String(16))
    nama_lengkap = Column(String(100))
    tempat_lahir = Column(String(100))
    tanggal_lahir = Column(Date)
    jenis_kelamin = Column(String(20))
    alamat = Column(Text)
    rt_rw = Column(String(20))
    kel_desa = Column(String(100))
    kecamatan = Column(String(100))
    agama = Column(String(30))
    status_perkawinan = Column(String(30))
    pekerjaan = Column(String(100))
    kewarganegaraan = Column(String(30))
    berlaku_hingga = Column(String(30))
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    profile = relationship("Profile", backref="sliks_records")

    __table_args__ = (
        Index("ix_sliks_ktp_user_created", "user_id", "created_at"),
    )
