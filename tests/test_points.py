from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from app.core import points
from app.core.points import FetchType, VerificationStatus


def make_post(owner="Alice", points_value=0.5, fetch_type="Single", partner=None,
              status="pending", created_at=None, uid="uid-alice"):
    return SimpleNamespace(
        owner_name=owner,
        firebase_uid=uid,
        points=points_value,
        fetch_type=fetch_type,
        partner_user_id=partner,
        verification_status=status,
        created_at=created_at or datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc),
    )


@pytest.mark.parametrize("bottles,fetch_type,expected", [
    (1, FetchType.SINGLE, 0.5),
    (2, FetchType.SINGLE, 1.0),
    (1, FetchType.TOGETHER, 0.25),
    (2, FetchType.TOGETHER, 0.5),
])
def test_points_per_user(bottles, fetch_type, expected):
    assert points.points_per_user(bottles, fetch_type) == expected


def test_points_per_user_accepts_raw_strings():
    assert points.points_per_user(2, "Together") == 0.5


@pytest.mark.parametrize("bottles", [0, 3, -1])
def test_base_points_rejects_unsupported_bottle_counts(bottles):
    with pytest.raises(ValueError):
        points.base_points(bottles)


def test_parse_status_defaults_to_pending():
    assert points.parse_status("verified") == VerificationStatus.VERIFIED
    assert points.parse_status("rejected") == VerificationStatus.REJECTED
    assert points.parse_status(None) == VerificationStatus.PENDING
    assert points.parse_status("bogus") == VerificationStatus.PENDING


def test_verification_moves_name_out_of_rejected():
    status, verified, rejected = points.apply_verification(["Bob"], ["Carol", "Dan"], "Carol")
    assert status == VerificationStatus.VERIFIED
    assert verified == ["Bob", "Carol"]
    assert rejected == ["Dan"]


def test_rejection_moves_name_out_of_verified():
    status, verified, rejected = points.apply_rejection(["Bob", "Carol"], [], "Bob")
    assert status == VerificationStatus.REJECTED
    assert verified == ["Carol"]
    assert rejected == ["Bob"]


def test_repeated_verification_does_not_duplicate():
    _, verified, rejected = points.apply_verification(["Bob"], None, "Bob")
    assert verified == ["Bob"]
    assert rejected == []


def test_toggle_does_not_mutate_inputs():
    verified_in, rejected_in = ["Bob"], ["Carol"]
    points.apply_rejection(verified_in, rejected_in, "Bob")
    assert verified_in == ["Bob"]
    assert rejected_in == ["Carol"]


def test_latest_action_sets_status_regardless_of_counts():
    status, verified, rejected = points.apply_rejection(["Bob", "Carol", "Dan"], [], "Eve")
    assert status == VerificationStatus.REJECTED
    assert len(verified) == 3
    assert rejected == ["Eve"]


def test_awarded_points_only_for_verified():
    assert points.awarded_points(make_post(status="verified", points_value=1.0)) == 1.0
    assert points.awarded_points(make_post(status="pending", points_value=1.0)) == 0.0
    assert points.awarded_points(make_post(status="rejected", points_value=1.0)) == 0.0


def test_post_total_doubles_together_posts_with_partner():
    assert points.post_total(make_post(fetch_type="Together", partner="Bob", points_value=0.25)) == 0.5
    assert points.post_total(make_post(fetch_type="Together", partner=None, points_value=0.25)) == 0.25
    assert points.post_total(make_post(points_value=1.0)) == 1.0


def test_is_participant_covers_owner_and_partner():
    post = make_post(fetch_type="Together", partner="Bob")
    assert points.is_participant(post, "uid-alice", "Someone")
    assert points.is_participant(post, "uid-x", "Alice")
    assert points.is_participant(post, "uid-bob", "Bob")
    assert not points.is_participant(post, "uid-carol", "Carol")


def test_user_points_counts_poster_and_partner_on_verified_posts():
    posts = [
        make_post(owner="Alice", points_value=1.0, status="verified"),
        make_post(owner="Bob", points_value=0.25, fetch_type="Together", partner="Alice", status="verified"),
        make_post(owner="Alice", points_value=0.5, status="pending"),
        make_post(owner="Carol", points_value=0.5, fetch_type="Together", partner="Alice", status="rejected"),
    ]
    assert points.user_points(posts, "Alice") == 1.25
    assert points.user_points(posts, "Bob") == 0.25
    assert points.user_points(posts, "Carol") == 0.0


def test_daily_totals_groups_by_day_newest_first():
    day1 = datetime(2026, 3, 1, 8, 0, tzinfo=timezone.utc)
    day2 = datetime(2026, 3, 2, 8, 0, tzinfo=timezone.utc)
    posts = [
        make_post(points_value=0.5, status="verified", created_at=day1),
        make_post(points_value=0.25, fetch_type="Together", partner="Bob", created_at=day1),
        make_post(points_value=1.0, status="verified", created_at=day2),
    ]
    days = points.daily_totals(posts)
    assert [d["date"] for d in days] == ["2026-03-02", "2026-03-01"]
    assert days[0]["total_points"] == 1.0
    assert days[1]["total_points"] == 1.0
    assert days[1]["verified_points"] == 0.5
    assert len(days[1]["posts"]) == 2


def test_rank_users_credits_partners_and_sorts():
    profiles = [
        {"firebase_uid": "uid-alice", "display_name": "Alice"},
        {"firebase_uid": "uid-bob", "display_name": "Bob"},
        {"firebase_uid": "uid-carol", "display_name": "Carol"},
        {"firebase_uid": "uid-dan", "display_name": "Dan"},
    ]
    posts = [
        {"firebase_uid": "uid-carol", "points": 1.0, "fetch_type": "Single", "verification_status": "verified"},
        {"firebase_uid": "uid-alice", "points": 0.5, "fetch_type": "Together",
         "partner_user_id": "Bob", "verification_status": "verified"},
        {"firebase_uid": "uid-alice", "points": 1.0, "fetch_type": "Single", "verification_status": "pending"},
        {"firebase_uid": "uid-dan", "points": 0.5, "fetch_type": "Single", "verification_status": "rejected"},
    ]
    standings = points.rank_users(profiles, posts)
    assert [s["display_name"] for s in standings] == ["Carol", "Alice", "Bob", "Dan"]
    assert [s["rank"] for s in standings] == [1, 2, 3, 4]
    assert standings[1]["total_points"] == 0.5
    assert standings[2]["total_points"] == 0.5
    assert standings[2]["verified_posts"] == 1
    assert standings[3]["total_points"] == 0.0


def test_rank_users_ignores_partner_name_on_single_posts():
    profiles = [{"firebase_uid": "uid-bob", "display_name": "Bob"}]
    posts = [{"firebase_uid": "uid-alice", "points": 1.0, "fetch_type": "Single",
              "partner_user_id": "Bob", "verification_status": "verified"}]
    assert points.rank_users(profiles, posts)[0]["total_points"] == 0.0
