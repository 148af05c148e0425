import logging
from datetime import datetime, timezone
from supabase import Client
from app.modules.auth.schemas import Identity
from app.modules.profiles.schemas import ProfileUpdate, ProfileResponse, MAX_DISPLAY_NAME_LENGTH
from typing import List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

BLOCKED_NAMES = frozenset({
    "john doe",
    "jane smith",
    "john smith",
    "jane doe",
    "test user",
    "sample user",
    "demo user",
    "example user",
})


def is_blocked_name(name: str) -> bool:
    return name.strip().lower() in BLOCKED_NAMES


def fallback_display_name(uid: str) -> str:
    return f"User {uid[:8]}"


class ProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_profile(self, firebase_uid: str) -> Optional[ProfileResponse]:
        """Get profile by Firebase uid, or None"""
        try:
            result = self.supabase.table("user_profiles")\
                .select("*")\
                .eq("firebase_uid", firebase_uid)\
                .limit(1)\
                .execute()
            if not result.data:
                return None
            return ProfileResponse(**result.data[0])
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_profile_or_404(self, firebase_uid: str) -> ProfileResponse:
        profile = self.get_profile(firebase_uid)
        if profile is None:
            raise HTTPException(status_code=404, detail="Profile not found")
        return profile

    def create_or_update_profile(self, firebase_uid: str, profile_data: ProfileUpdate) -> ProfileResponse:
        """Upsert profile keyed on firebase_uid"""
        if is_blocked_name(profile_data.display_name):
            raise HTTPException(status_code=400, detail="This name is not allowed. Please use your real name.")
        try:
            result = self.supabase.table("user_profiles").upsert({
                "firebase_uid": firebase_uid,
                "display_name": profile_data.display_name,
                "photo_url": profile_data.photo_url,
                "email": profile_data.email,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            }, on_conflict="firebase_uid").execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to save profile")

            return ProfileResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def initialize_profile(self, identity: Identity) -> ProfileResponse:
        """Create the caller's profile on first login, or refresh its name from the identity provider"""
        existing = self.get_profile(identity.uid)
        provider_name = (identity.display_name or "").strip()[:MAX_DISPLAY_NAME_LENGTH].strip()
        if existing is None:
            logger.info(f"Creating new profile for {identity.uid}")
            return self.create_or_update_profile(identity.uid, ProfileUpdate(
                display_name=provider_name or fallback_display_name(identity.uid),
                photo_url=identity.photo_url,
                email=identity.email,
            ))

        if provider_name and existing.display_name != provider_name:
            logger.info(f"Updating profile name for {identity.uid}")
            return self.create_or_update_profile(identity.uid, ProfileUpdate(
                display_name=provider_name,
                photo_url=identity.photo_url or existing.photo_url,
                email=identity.email or existing.email,
            ))
        return existing

    def list_profiles(self) -> List[ProfileResponse]:
        """All profiles ordered by display name"""
        try:
            result = self.supabase.table("user_profiles")\
                .select("*")\
                .order("display_name")\
                .execute()
            return [ProfileResponse(**p) for p in result.data or []]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_other_display_names(self, firebase_uid: str) -> List[str]:
        """Display names of everyone except the caller (partner picker)"""
        try:
            result = self.supabase.table("user_profiles")\
                .select("display_name")\
                .neq("firebase_uid", firebase_uid)\
                .execute()
            return [p.get("display_name") or "Unknown User" for p in result.data or []]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def find_uids_by_display_name(self, display_name: str) -> List[str]:
        try:
            result = self.supabase.table("user_profiles")\
                .select("firebase_uid")\
                .eq("display_name", display_name)\
                .execute()
            return [p["firebase_uid"] for p in result.data or []]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
