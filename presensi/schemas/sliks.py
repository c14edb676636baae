from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime, date

from presensi.utils.datetime_utils import ensure_utc, parse_indonesian_date
from presensi.utils.validators import validate_nik, sanitize_input


class KtpData(BaseModel):
    """Fields extracted from a KTP image, as returned by the extraction step."""
    nik: str
    nama: str
    tempat_tgl_lahir: Optional[str] = None
    jenis_kelamin: Optional[str] = None
    alamat: Optional[str] = None
    rt_rw: Optional[str] = None
    kel_desa: Optional[str] = None
    kecamatan: Optional[str] = None
    agama: Optional[str] = None
    status_perkawinan: Optional[str] = None
    pekerjaan: Optional[str] = None
    kewarganegaraan: Optional[str] = None
    berlaku_hingga: Optional[str] = None

    @field_validator("nik")
    @classmethod
    def check_nik(cls, value: str) -> str:
        value = value.strip()
        if not validate_nik(value):
            raise ValueError("NIK must be 16 digits")
        return value

    @field_validator("nama")
    @classmethod
    def check_nama(cls, value: str) -> str:
        value = sanitize_input(value)
        if not value:
            raise ValueError("nama is required")
        return value


class SliksBase(BaseModel):
    nik: Optional[str] = None
    nama_lengkap: Optional[str] = None
    tempat_lahir: Optional[str] = None
    tanggal_lahir: Optional[date] = None
    jenis_kelamin: Optional[str] = None
    alamat: Optional[str] = None
    rt_rw: Optional[str] = None
    kel_desa: Optional[str] = None
    kecamatan: Optional[str] = None
    agama: Optional[str] = None
    status_perkawinan: Optional[str] = None
    pekerjaan: Optional[str] = None
    kewarganegaraan: Optional[str] = None
    berlaku_hingga: Optional[str] = None


class SliksCreate(SliksBase):
    user_id: str = Field(min_length=1)

    @classmethod
    def from_ktp(cls, user_id: str, ktp: KtpData) -> "SliksCreate":
        """
        Map extracted KTP fields onto the stored record.

        `tempat_tgl_lahir` reads like "JAKARTA, 17-08-1990"; the place is the
        part before the first comma and the date is stored only when a
        dd-mm-YYYY value can be found after it.
        """
        tempat_lahir = None
        tanggal_lahir = None
        if ktp.tempat_tgl_lahir:
            place, _, birth_date = ktp.tempat_tgl_lahir.partition(",")
            tempat_lahir = place.strip() or None
            tanggal_lahir = parse_indonesian_date(birth_date)

        return cls(
            user_id=user_id,
            nik=ktp.nik,
            nama_lengkap=ktp.nama,
            tempat_lahir=tempat_lahir,
            tanggal_lahir=tanggal_lahir,
            jenis_kelamin=ktp.jenis_kelamin,
            alamat=ktp.alamat,
            rt_rw=ktp.rt_rw,
            kel_desa=ktp.kel_desa,
            kecamatan=ktp.kecamatan,
            agama=ktp.agama,
            status_perkawinan=ktp.status_perkawinan,
            pekerjaan=ktp.pekerjaan,
            kewarganegaraan=ktp.kewarganegaraan,
            berlaku_hingga=ktp.berlaku_hingga,
        )


class SliksResponse(SliksBase):
    id: str
    user_id: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    @field_validator("created_at", "updated_at")
    @classmethod
    def as_utc(cls, value):
        return ensure_utc(value)

    class Config:
        from_attributes = True
