from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.auth.schemas import Identity, MeResponse
from app.modules.profiles.schemas import ProfileResponse
from app.modules.profiles.service import ProfileService
from app.core.dependencies import get_current_identity
from supabase import Client

router = APIRouter(prefix="/auth", tags=["auth"])


def get_profile_service(supabase: Client = Depends(get_supabase)) -> ProfileService:
    return ProfileService(supabase)


@router.get("/me", response_model=MeResponse)
async def get_me(
    identity: Identity = Depends(get_current_identity),
    service: ProfileService = Depends(get_profile_service)
):
    """Get the verified identity and its stored profile, if any"""
    return MeResponse(identity=identity, profile=service.get_profile(identity.uid))


@router.post("/session", response_model=ProfileResponse)
async def start_session(
    identity: Identity = Depends(get_current_identity),
    service: ProfileService = Depends(get_profile_service)
):
    """Called after Firebase sign-in: create or refresh the caller's profile"""
    return service.initialize_profile(identity)
