from supabase import Client
from app.core.points import rank_users
from app.modules.leaderboard.schemas import LeaderboardEntry, DEFAULT_PHOTO_URL
from typing import List
from fastapi import HTTPException


class LeaderboardService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_leaderboard(self) -> List[LeaderboardEntry]:
        """Rank every user by points earned from verified posts"""
        try:
            profiles = self.supabase.table("user_profiles")\
                .select("display_name, photo_url, firebase_uid")\
                .order("display_name")\
                .execute()
            posts = self.supabase.table("water_fetch_posts")\
                .select("firebase_uid, points, verification_status, fetch_type, partner_user_id")\
                .eq("verification_status", "verified")\
                .execute()
            standings = rank_users(profiles.data or [], posts.data or [])
            return [
                LeaderboardEntry(**{**s, "photo_url": s.get("photo_url") or DEFAULT_PHOTO_URL})
                for s in standings
            ]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_user_standing(self, firebase_uid: str) -> LeaderboardEntry:
        for entry in self.get_leaderboard():
            if entry.firebase_uid == firebase_uid:
                return entry
        raise HTTPException(status_code=404, detail="Profile not found")
