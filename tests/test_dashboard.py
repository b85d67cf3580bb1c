from datetime import datetime, timedelta

import pytest

from gameplane.domain.dashboard.analytics import (
    calculate_growth,
    monthly_buckets,
    range_windows,
    trend_buckets,
)
from gameplane.domain.dashboard.service import DashboardService

NOW = datetime(2026, 10, 19, 12, 0)


def test_growth_without_previous_period_is_100():
    assert calculate_growth(5, 0) == 100
    assert calculate_growth(0, 0) == 100


def test_growth_is_rounded_percentage():
    assert calculate_growth(3, 2) == 50.0
    assert calculate_growth(1, 3) == -66.67


def test_range_windows():
    start, previous_start = range_windows("month", NOW)

    assert start == NOW - timedelta(days=30)
    assert previous_start == NOW - timedelta(days=60)


@pytest.mark.parametrize("range_name, count", [("week", 7), ("month", 30), ("year", 12)])
def test_trend_bucket_counts(range_name, count):
    buckets = trend_buckets(range_name, NOW)

    assert len(buckets) == count
    assert buckets[-1].contains(NOW)


def test_monthly_buckets_cross_year_boundary():
    labels = [b.label for b in monthly_buckets(12, NOW)]

    assert labels[0] == "Nov 2025"
    assert labels[-1] == "Oct 2026"


def test_admin_stats_compare_windows(db, seed):
    court_id = seed.court()
    for days in (1, 2, 4):
        seed.booking(court_id, booking_at=NOW - timedelta(days=days))
    for days in (9, 11):
        seed.booking(court_id, booking_at=NOW - timedelta(days=days), court_type="squash")
    seed.payment(amount=30, pay_at=NOW - timedelta(days=1))
    seed.user("alice@example.com", role="member", member_since=NOW - timedelta(days=3))
    seed.user("bob@example.com", role="member", member_since=NOW - timedelta(days=10))

    stats = DashboardService(db).get_admin_stats("week", now=NOW)

    assert stats["current"] == {"newMembers": 1, "bookings": 3, "revenue": 30}
    assert stats["previous"] == {"newMembers": 1, "bookings": 2, "revenue": 0}
    assert stats["growth"] == {"members": 0.0, "bookings": 50.0, "revenue": 100}
    assert stats["totals"]["bookings"] == 5
    assert stats["totals"]["members"] == 2
    assert stats["totals"]["courts"] == 1
    assert stats["bookingStatus"]["pending"] == 5
    assert stats["courtTypes"] == [{"type": "tennis", "count": 3}, {"type": "squash", "count": 2}]
    assert len(stats["trend"]) == 7
    assert sum(point["bookings"] for point in stats["trend"]) == 3
    assert stats["trend"][-2]["revenue"] == 30


def test_admin_stats_rejects_unknown_range(client, alice_headers):
    response = client.get("/dashboard/stats", params={"range": "decade"}, headers=alice_headers)

    assert response.status_code == 400


def test_admin_stats_requires_token(client):
    response = client.get("/dashboard/stats")

    assert response.status_code == 401


def test_admin_stats_are_cached_until_bookings_change(client, seed, redis_client, alice_headers):
    court_id = seed.court()

    first = client.get("/dashboard/stats", headers=alice_headers).json()
    assert first["range"] == "week"
    assert first["totals"]["bookings"] == 0
    assert "dashboard:stats:week" in redis_client.store

    seed.booking(court_id)
    cached = client.get("/dashboard/stats", headers=alice_headers).json()
    assert cached["totals"]["bookings"] == 0

    client.post(
        "/bookings",
        json={
            "user": "alice@example.com",
            "courtId": court_id,
            "slots": [{"startTime": "10:00", "endTime": "11:00"}],
        },
        headers=alice_headers,
    )
    assert "dashboard:stats:week" not in redis_client.store

    refreshed = client.get("/dashboard/stats", headers=alice_headers).json()
    assert refreshed["totals"]["bookings"] == 2


def test_member_stats(db, seed):
    court_id = seed.court()
    seed.user("alice@example.com", role="member", member_since=datetime(2026, 3, 1))
    seed.booking(court_id, status="confirmed")
    seed.booking(court_id, status="pending")
    seed.booking(court_id, user="bob@example.com", status="confirmed")
    seed.payment(amount=20, pay_at=datetime(2026, 9, 10))
    seed.payment(amount=15, pay_at=datetime(2026, 10, 1))
    seed.payment(amount=99, pay_at=datetime(2026, 10, 2), email="bob@example.com")

    stats = DashboardService(db).get_member_stats("alice@example.com", now=NOW)

    assert stats["role"] == "member"
    assert stats["memberSince"] == "2026-03-01T00:00:00"
    assert stats["bookings"]["total"] == 2
    assert stats["bookings"]["confirmed"] == 1
    assert stats["bookings"]["pending"] == 1
    assert stats["payments"] == {"count": 2, "totalSpent": 35}
    assert [p.amount for p in stats["recentPayments"]] == [15, 20]
    assert [m["label"] for m in stats["monthlySpending"]] == [
        "May 2026",
        "Jun 2026",
        "Jul 2026",
        "Aug 2026",
        "Sep 2026",
        "Oct 2026",
    ]
    assert stats["monthlySpending"][-2]["amount"] == 20
    assert stats["monthlySpending"][-1]["amount"] == 15


def test_member_dashboard_uses_token_email(client, seed, alice_headers):
    seed.user("alice@example.com")
    seed.payment(amount=20)

    response = client.get("/member/dashboard", headers=alice_headers)

    body = response.json()
    assert body["email"] == "alice@example.com"
    assert body["payments"]["count"] == 1
    assert body["recentPayments"][0]["amount"] == 20
