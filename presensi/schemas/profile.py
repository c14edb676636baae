from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

from presensi.utils.validators import validate_timezone


class ProfileBase(BaseModel):
    full_name: Optional[str] = Field(None, max_length=100)
    alias: Optional[str] = Field(None, max_length=50)
    avatar_url: Optional[str] = Field(None, max_length=500)
    position: Optional[str] = Field(None, max_length=100)
    timezone: Optional[str] = None


class ProfileUpdate(ProfileBase):

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, value):
        if value is not None and not validate_timezone(value):
            raise ValueError(f"Unknown time zone: {value}")
        return value


class ProfileResponse(ProfileBase):
    id: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
