from pydantic import BaseModel

DEFAULT_PHOTO_URL = "https://picsum.photos/150/150"


class LeaderboardEntry(BaseModel):
    rank: int
    firebase_uid: str
    display_name: str
    photo_url: str = DEFAULT_PHOTO_URL
    total_points: float
    verified_posts: int
