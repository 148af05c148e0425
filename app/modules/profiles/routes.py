from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.auth.schemas import Identity
from app.modules.profiles.schemas import ProfileUpdate, ProfileResponse
from app.modules.profiles.service import ProfileService
from app.core.dependencies import get_current_identity
from supabase import Client
from typing import List

router = APIRouter(prefix="/profiles", tags=["profiles"])


def get_profile_service(supabase: Client = Depends(get_supabase)) -> ProfileService:
    return ProfileService(supabase)


@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(
    profile_data: ProfileUpdate,
    identity: Identity = Depends(get_current_identity),
    service: ProfileService = Depends(get_profile_service)
):
    """Create or update the caller's profile"""
    if profile_data.email is None:
        profile_data.email = identity.email
    if profile_data.photo_url is None:
        existing = service.get_profile(identity.uid)
        profile_data.photo_url = (existing.photo_url if existing else None) or identity.photo_url
    return service.create_or_update_profile(identity.uid, profile_data)


@router.get("/others", response_model=List[str])
async def list_other_users(
    identity: Identity = Depends(get_current_identity),
    service: ProfileService = Depends(get_profile_service)
):
    """Display names available as a Together partner"""
    return service.list_other_display_names(identity.uid)


@router.get("/{firebase_uid}", response_model=ProfileResponse)
async def get_profile(
    firebase_uid: str,
    identity: Identity = Depends(get_current_identity),
    service: ProfileService = Depends(get_profile_service)
):
    return service.get_profile_or_404(firebase_uid)
