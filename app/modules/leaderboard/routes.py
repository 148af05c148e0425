from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.auth.schemas import Identity
from app.modules.leaderboard.schemas import LeaderboardEntry
from app.modules.leaderboard.service import LeaderboardService
from app.core.dependencies import get_current_identity
from supabase import Client
from typing import List

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


def get_leaderboard_service(supabase: Client = Depends(get_supabase)) -> LeaderboardService:
    return LeaderboardService(supabase)


@router.get("", response_model=List[LeaderboardEntry])
async def get_leaderboard(
    identity: Identity = Depends(get_current_identity),
    service: LeaderboardService = Depends(get_leaderboard_service)
):
    return service.get_leaderboard()


@router.get("/me", response_model=LeaderboardEntry)
async def get_my_standing(
    identity: Identity = Depends(get_current_identity),
    service: LeaderboardService = Depends(get_leaderboard_service)
):
    return service.get_user_standing(identity.uid)
