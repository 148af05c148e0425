from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime


MAX_DISPLAY_NAME_LENGTH = 100


class ProfileUpdate(BaseModel):
    display_name: str = Field(..., max_length=MAX_DISPLAY_NAME_LENGTH)
    photo_url: Optional[str] = None
    email: Optional[str] = None

    @field_validator("display_name")
    @classmethod
    def strip_display_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Display name must not be empty")
        return value


class ProfileResponse(BaseModel):
    id: int
    firebase_uid: str
    display_name: str
    photo_url: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
