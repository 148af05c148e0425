from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.auth.schemas import Identity
from app.modules.notifications.service import NotificationService
from app.modules.posts.schemas import PostCreate, PostResponse, DailySummary, UserPoints
from app.modules.posts.service import PostService
from app.core.dependencies import get_current_identity, get_notification_service
from supabase import Client
from typing import List

router = APIRouter(prefix="/posts", tags=["posts"])


def get_post_service(
    supabase: Client = Depends(get_supabase),
    notifications: NotificationService = Depends(get_notification_service)
) -> PostService:
    return PostService(supabase, notifications)


@router.post("", response_model=PostResponse, status_code=201)
async def create_post(
    post_data: PostCreate,
    identity: Identity = Depends(get_current_identity),
    service: PostService = Depends(get_post_service)
):
    """Log a water fetch (Single, or Together with a partner)"""
    return service.create_post(identity, post_data)


@router.get("", response_model=List[PostResponse])
async def list_posts(
    identity: Identity = Depends(get_current_identity),
    service: PostService = Depends(get_post_service)
):
    return service.list_posts()


@router.get("/daily-summary", response_model=List[DailySummary])
async def daily_summary(
    identity: Identity = Depends(get_current_identity),
    service: PostService = Depends(get_post_service)
):
    """Posts grouped by day with total and verified points"""
    return service.daily_summary()


@router.get("/me/points", response_model=UserPoints)
async def my_points(
    identity: Identity = Depends(get_current_identity),
    service: PostService = Depends(get_post_service)
):
    """Caller's verified points, counting Together posts they partnered on"""
    return service.my_points(identity)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: str,
    identity: Identity = Depends(get_current_identity),
    service: PostService = Depends(get_post_service)
):
    return service.get_post(post_id)


@router.post("/{post_id}/verify", response_model=PostResponse)
async def verify_post(
    post_id: str,
    identity: Identity = Depends(get_current_identity),
    service: PostService = Depends(get_post_service)
):
    """Verify someone else's post; clears any earlier rejection by the caller"""
    return service.verify_post(post_id, identity)


@router.post("/{post_id}/reject", response_model=PostResponse)
async def reject_post(
    post_id: str,
    identity: Identity = Depends(get_current_identity),
    service: PostService = Depends(get_post_service)
):
    """Reject someone else's post; clears any earlier verification by the caller"""
    return service.reject_post(post_id, identity)


@router.delete("/{post_id}", status_code=204)
async def delete_post(
    post_id: str,
    identity: Identity = Depends(get_current_identity),
    service: PostService = Depends(get_post_service)
):
    """Delete own post (not allowed once verified)"""
    service.delete_post(post_id, identity)
    return None
