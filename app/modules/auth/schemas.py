from pydantic import BaseModel
from typing import Optional

from app.modules.profiles.schemas import ProfileResponse


class Identity(BaseModel):
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    photo_url: Optional[str] = None


class MeResponse(BaseModel):
    identity: Identity
    profile: Optional[ProfileResponse] = None
