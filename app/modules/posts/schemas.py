from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime

from app.core.points import FetchType, VerificationStatus

PARTNER_PLACEHOLDER = "Select users"


class PostCreate(BaseModel):
    message: str = Field(..., max_length=500)
    fetch_type: FetchType = FetchType.SINGLE
    bottles: int = Field(1, ge=1, le=2)
    partner_name: Optional[str] = None

    @field_validator("message")
    @classmethod
    def strip_message(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Please enter a message")
        return value

    @field_validator("partner_name")
    @classmethod
    def normalize_partner(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if not value or value == PARTNER_PLACEHOLDER:
            return None
        return value


class PostResponse(BaseModel):
    id: int
    firebase_uid: str
    owner_name: str = "Unknown User"
    owner_photo_url: str = ""
    message: str
    fetch_type: FetchType
    partner_user_id: Optional[str] = None
    points: float
    awarded_points: float = 0.0
    verification_status: VerificationStatus = VerificationStatus.PENDING
    verified_by: List[str] = Field(default_factory=list)
    rejected_by: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DailySummary(BaseModel):
    date: str
    total_points: float
    verified_points: float
    posts: List[PostResponse]


class UserPoints(BaseModel):
    display_name: str
    total_points: float
