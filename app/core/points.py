"""
Point allocation and verification rules.

Every participant of a verified post earns the post's per-user ``points``.
A Together post is shared by the poster and one partner, so the base award
is split in two. Nothing counts toward a score until a peer verifies it.
"""

from collections import OrderedDict
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple


class FetchType(str, Enum):
    SINGLE = "Single"
    TOGETHER = "Together"


class VerificationStatus(str, Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


# Points for one fetch, keyed by bottle count
BOTTLE_POINTS = {1: 0.5, 2: 1.0}
TOGETHER_PARTICIPANTS = 2


def parse_status(value: Optional[str]) -> VerificationStatus:
    """Unknown or missing status strings read as pending."""
    try:
        return VerificationStatus(value)
    except ValueError:
        return VerificationStatus.PENDING


def base_points(bottles: int) -> float:
    if bottles not in BOTTLE_POINTS:
        raise ValueError(f"Unsupported bottle count: {bottles}")
    return BOTTLE_POINTS[bottles]


def points_per_user(bottles: int, fetch_type: FetchType) -> float:
    base = base_points(bottles)
    if FetchType(fetch_type) == FetchType.TOGETHER:
        return base / TOGETHER_PARTICIPANTS
    return base


def is_together(post: Any) -> bool:
    return post.fetch_type == FetchType.TOGETHER and bool(post.partner_user_id)


def awarded_points(post: Any) -> float:
    """Per-user points the post currently awards; zero until verified."""
    if post.verification_status == VerificationStatus.VERIFIED:
        return post.points
    return 0.0


def post_total(post: Any) -> float:
    """Value of a post summed over everyone it credits."""
    if is_together(post):
        return post.points * TOGETHER_PARTICIPANTS
    return post.points


def is_participant(post: Any, firebase_uid: Optional[str], display_name: Optional[str]) -> bool:
    if firebase_uid and post.firebase_uid == firebase_uid:
        return True
    if display_name and getattr(post, "owner_name", None) == display_name:
        return True
    return bool(display_name) and is_together(post) and post.partner_user_id == display_name


def _toggle(add_to: List[str], remove_from: List[str], name: str) -> Tuple[List[str], List[str]]:
    added = list(dict.fromkeys(add_to))
    removed = [n for n in dict.fromkeys(remove_from) if n != name]
    if name not in added:
        added.append(name)
    return added, removed


def apply_verification(
    verified_by: Optional[Iterable[str]],
    rejected_by: Optional[Iterable[str]],
    name: str,
) -> Tuple[VerificationStatus, List[str], List[str]]:
    """Move ``name`` into the verifier list. Returns (status, verified_by, rejected_by)."""
    verified, rejected = _toggle(list(verified_by or []), list(rejected_by or []), name)
    return VerificationStatus.VERIFIED, verified, rejected


def apply_rejection(
    verified_by: Optional[Iterable[str]],
    rejected_by: Optional[Iterable[str]],
    name: str,
) -> Tuple[VerificationStatus, List[str], List[str]]:
    """Move ``name`` into the rejecter list. Returns (status, verified_by, rejected_by)."""
    rejected, verified = _toggle(list(rejected_by or []), list(verified_by or []), name)
    return VerificationStatus.REJECTED, verified, rejected


def user_points(posts: Iterable[Any], display_name: str) -> float:
    total = 0.0
    for post in posts:
        if post.verification_status != VerificationStatus.VERIFIED:
            continue
        if post.owner_name == display_name:
            total += post.points
        elif is_together(post) and post.partner_user_id == display_name:
            total += post.points
    return round(total, 2)


def daily_totals(posts: Iterable[Any]) -> List[Dict[str, Any]]:
    """Group posts by calendar day, newest day first."""
    grouped: "OrderedDict[str, List[Any]]" = OrderedDict()
    for post in sorted(posts, key=lambda p: p.created_at, reverse=True):
        grouped.setdefault(post.created_at.date().isoformat(), []).append(post)

    days = []
    for day, day_posts in grouped.items():
        verified = [p for p in day_posts if p.verification_status == VerificationStatus.VERIFIED]
        days.append({
            "date": day,
            "posts": day_posts,
            "total_points": round(sum(post_total(p) for p in day_posts), 2),
            "verified_points": round(sum(post_total(p) for p in verified), 2),
        })
    return days


def rank_users(
    profiles: Iterable[Dict[str, Any]],
    posts: Iterable[Dict[str, Any]],
) -> List[Dict[str, Any]]:
    """
    Aggregate verified points per profile from raw table rows.

    A user is credited for verified posts they own (matched on firebase_uid)
    and for verified Together posts naming them as partner (matched on
    display name, which is how partners are stored). Profiles are expected in
    display name order; the sort is stable so ties keep that order.
    """
    verified = [
        p for p in posts
        if parse_status(p.get("verification_status")) == VerificationStatus.VERIFIED
    ]
    standings = []
    for profile in profiles:
        uid = profile.get("firebase_uid")
        name = profile.get("display_name")
        total = 0.0
        count = 0
        for post in verified:
            if post.get("firebase_uid") == uid:
                total += float(post.get("points") or 0.0)
                count += 1
            elif (
                post.get("fetch_type") == FetchType.TOGETHER.value
                and name
                and post.get("partner_user_id") == name
            ):
                total += float(post.get("points") or 0.0)
                count += 1
        standings.append({
            "firebase_uid": uid,
            "display_name": name or "Unknown User",
            "photo_url": profile.get("photo_url"),
            "total_points": round(total, 2),
            "verified_posts": count,
        })

    standings.sort(key=lambda s: s["total_points"], reverse=True)
    for position, standing in enumerate(standings, start=1):
        standing["rank"] = position
    return standings
