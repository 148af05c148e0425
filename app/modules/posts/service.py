import logging
from datetime import datetime, timezone
from supabase import Client
from app.config import settings
from app.core import points as rules
from app.core.points import FetchType, VerificationStatus
from app.modules.auth.schemas import Identity
from app.modules.notifications.service import NotificationService
from app.modules.posts.schemas import PostCreate, PostResponse, DailySummary, UserPoints
from app.modules.profiles.service import ProfileService
from typing import Any, Dict, List, Optional, Union
from fastapi import HTTPException

logger = logging.getLogger(__name__)


def coerce_post_id(post_id: Union[str, int]) -> Union[str, int]:
    """Post ids are bigserial; match on an int whenever the value parses as one."""
    try:
        return int(post_id)
    except (TypeError, ValueError):
        return post_id


def build_post(row: Dict[str, Any], owner: Optional[Dict[str, Any]] = None) -> PostResponse:
    owner = owner or {}
    fetch_type = row.get("fetch_type") or FetchType.SINGLE.value
    post = PostResponse(
        id=row["id"],
        firebase_uid=row["firebase_uid"],
        owner_name=owner.get("display_name") or "Unknown User",
        owner_photo_url=owner.get("photo_url") or "",
        message=row.get("message") or "",
        fetch_type=fetch_type,
        partner_user_id=row.get("partner_user_id") if fetch_type == FetchType.TOGETHER.value else None,
        points=float(row.get("points") or 0.0),
        verification_status=rules.parse_status(row.get("verification_status")),
        verified_by=list(row.get("verified_by") or []),
        rejected_by=list(row.get("rejected_by") or []),
        created_at=row["created_at"],
        updated_at=row.get("updated_at"),
    )
    post.awarded_points = rules.awarded_points(post)
    return post


class PostService:
    def __init__(self, supabase: Client, notifications: Optional[NotificationService] = None):
        self.supabase = supabase
        self.profiles = ProfileService(supabase)
        self.notifications = notifications

    def _get_post_row(self, post_id: Union[str, int]) -> Optional[Dict[str, Any]]:
        post_key = coerce_post_id(post_id)
        # The id column is bigserial; a non-numeric id can never match
        if not isinstance(post_key, int):
            return None
        result = self.supabase.table("water_fetch_posts")\
            .select("*")\
            .eq("id", post_key)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def _owners_by_uid(self, uids: List[str]) -> Dict[str, Dict[str, Any]]:
        if not uids:
            return {}
        result = self.supabase.table("user_profiles")\
            .select("firebase_uid, display_name, photo_url")\
            .in_("firebase_uid", list(set(uids)))\
            .execute()
        return {p["firebase_uid"]: p for p in result.data or []}

    def _participant_uids(self, post: PostResponse) -> List[str]:
        uids = [post.firebase_uid]
        if rules.is_together(post):
            uids.extend(self.profiles.find_uids_by_display_name(post.partner_user_id))
        return list(dict.fromkeys(uids))

    def create_post(self, identity: Identity, post_data: PostCreate) -> PostResponse:
        """Create a new water fetch post; points are computed here, never taken from the client"""
        owner = self.profiles.get_profile_or_404(identity.uid)

        partner_name = None
        if post_data.fetch_type == FetchType.TOGETHER:
            if not post_data.partner_name:
                raise HTTPException(status_code=400, detail="Please select a user for together mode")
            if post_data.partner_name == owner.display_name:
                raise HTTPException(status_code=400, detail="You cannot fetch water together with yourself")
            if post_data.partner_name not in self.profiles.list_other_display_names(identity.uid):
                raise HTTPException(status_code=400, detail="Selected partner does not exist")
            partner_name = post_data.partner_name

        try:
            result = self.supabase.table("water_fetch_posts").insert({
                "firebase_uid": identity.uid,
                "message": post_data.message,
                "fetch_type": post_data.fetch_type.value,
                "partner_user_id": partner_name,
                "points": rules.points_per_user(post_data.bottles, post_data.fetch_type),
                "verification_status": VerificationStatus.PENDING.value,
                "verified_by": [],
                "rejected_by": [],
                "created_at": datetime.now(timezone.utc).isoformat(),
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create post")
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        post = build_post(result.data[0], owner.model_dump())
        logger.info(f"Post {post.id} created by {identity.uid} ({post.fetch_type.value}, {post.points} pts)")

        if self.notifications:
            try:
                others = [
                    p.firebase_uid for p in self.profiles.list_profiles()
                    if p.firebase_uid != identity.uid
                ]
                self.notifications.post_created(
                    recipients=others,
                    owner_name=owner.display_name,
                    message=post.message,
                    post_id=str(post.id),
                    partner_name=partner_name,
                )
            except Exception as e:
                logger.error(f"Error sending post notifications: {e}")
        return post

    def get_post(self, post_id: Union[str, int]) -> PostResponse:
        return self._load_post(post_id)[0]

    def _load_post(self, post_id: Union[str, int]) -> tuple:
        """Return (post, raw row)"""
        try:
            row = self._get_post_row(post_id)
            if not row:
                raise HTTPException(status_code=404, detail="Post not found")
            owners = self._owners_by_uid([row["firebase_uid"]])
            return build_post(row, owners.get(row["firebase_uid"])), row
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_posts(self) -> List[PostResponse]:
        """All posts, newest first, with poster name and photo"""
        try:
            result = self.supabase.table("water_fetch_posts")\
                .select("*")\
                .order("created_at", desc=True)\
                .execute()
            rows = result.data or []
            owners = self._owners_by_uid([r["firebase_uid"] for r in rows])
            return [build_post(r, owners.get(r["firebase_uid"])) for r in rows]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def daily_summary(self) -> List[DailySummary]:
        return [DailySummary(**day) for day in rules.daily_totals(self.list_posts())]

    def my_points(self, identity: Identity) -> UserPoints:
        """Points the caller has earned from verified posts, as poster or partner"""
        profile = self.profiles.get_profile_or_404(identity.uid)
        return UserPoints(
            display_name=profile.display_name,
            total_points=rules.user_points(self.list_posts(), profile.display_name),
        )

    def verify_post(self, post_id: Union[str, int], identity: Identity) -> PostResponse:
        return self._record_review(post_id, identity, VerificationStatus.VERIFIED)

    def reject_post(self, post_id: Union[str, int], identity: Identity) -> PostResponse:
        return self._record_review(post_id, identity, VerificationStatus.REJECTED)

    def _record_review(self, post_id: Union[str, int], identity: Identity, outcome: VerificationStatus) -> PostResponse:
        reviewer = self.profiles.get_profile_or_404(identity.uid)
        apply = rules.apply_verification if outcome == VerificationStatus.VERIFIED else rules.apply_rejection
        verb = "verify" if outcome == VerificationStatus.VERIFIED else "reject"
        attempts = max(0, settings.verification_max_retries) + 1

        for attempt in range(1, attempts + 1):
            post, row = self._load_post(post_id)
            if rules.is_participant(post, identity.uid, reviewer.display_name):
                raise HTTPException(status_code=403, detail=f"You cannot {verb} your own activity")

            status, verified_by, rejected_by = apply(post.verified_by, post.rejected_by, reviewer.display_name)
            try:
                query = self.supabase.table("water_fetch_posts")\
                    .update({
                        "verification_status": status.value,
                        "verified_by": verified_by,
                        "rejected_by": rejected_by,
                        "updated_at": datetime.now(timezone.utc).isoformat(),
                    })\
                    .eq("id", post.id)
                # Only write if nobody else touched the row since we read it
                if row.get("updated_at") is not None:
                    query = query.eq("updated_at", row["updated_at"])
                result = query.execute()
            except Exception as e:
                logger.error(f"Error trying to {verb} post {post.id}: {e}")
                raise HTTPException(status_code=500, detail=str(e))

            if result.data:
                updated = build_post(result.data[0], {
                    "display_name": post.owner_name,
                    "photo_url": post.owner_photo_url,
                })
                logger.info(f"Post {post.id} {status.value} by {reviewer.display_name}")
                self._notify_review(updated, reviewer.display_name, identity.uid, outcome)
                return updated
            logger.warning(f"Post {post.id} changed during {verb} (attempt {attempt}/{attempts}), retrying")

        raise HTTPException(status_code=409, detail="Post was modified concurrently, please retry")

    def _notify_review(self, post: PostResponse, reviewer_name: str, reviewer_uid: str, outcome: VerificationStatus):
        if not self.notifications:
            return
        try:
            recipients = [uid for uid in self._participant_uids(post) if uid != reviewer_uid]
            if outcome == VerificationStatus.VERIFIED:
                self.notifications.post_verified(recipients, reviewer_name, str(post.id))
            else:
                self.notifications.post_rejected(recipients, reviewer_name, str(post.id))
        except Exception as e:
            logger.error(f"Notification error ({outcome.value}): {e}")

    def delete_post(self, post_id: Union[str, int], identity: Identity) -> bool:
        """Delete own unverified post, then confirm the row is gone"""
        post_key = coerce_post_id(post_id)
        try:
            row = self._get_post_row(post_key)
            if not row:
                raise HTTPException(status_code=404, detail="Post not found")
            if row["firebase_uid"] != identity.uid:
                raise HTTPException(status_code=403, detail="You can only delete your own posts")
            if rules.parse_status(row.get("verification_status")) == VerificationStatus.VERIFIED:
                raise HTTPException(status_code=400, detail="Verified posts cannot be deleted")

            self.supabase.table("water_fetch_posts")\
                .delete()\
                .eq("id", post_key)\
                .execute()

            if self._get_post_row(post_key):
                raise HTTPException(status_code=403, detail="Delete failed or not permitted by RLS/policies")
            logger.info(f"Post {post_key} deleted by {identity.uid}")
            return True
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting post {post_key}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
