"""Time windows, growth and trend buckets for the analytics dashboards"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable

RANGE_DAYS = {"week": 7, "month": 30, "year": 365}


@dataclass
class Bucket:
    label: str
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end


def calculate_growth(current: float, previous: float) -> float:
    """Percentage change between two windows; 100 when there is nothing to compare against"""
    if not previous:
        return 100
    return round((current - previous) / previous * 100, 2)


def range_windows(range_name: str, now: datetime) -> tuple[datetime, datetime]:
    """Return (start of the current window, start of the previous window)"""
    span = timedelta(days=RANGE_DAYS[range_name])
    start = now - span
    return start, start - span


def _month_start(moment: datetime) -> datetime:
    return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def _shift_months(month_start: datetime, delta: int) -> datetime:
    index = month_start.year * 12 + (month_start.month - 1) + delta
    return month_start.replace(year=index // 12, month=index % 12 + 1)


def daily_buckets(days: int, now: datetime, label_format: str) -> list[Bucket]:
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    buckets = []
    for offset in range(days - 1, -1, -1):
        start = today - timedelta(days=offset)
        buckets.append(Bucket(start.strftime(label_format), start, start + timedelta(days=1)))
    return buckets


def monthly_buckets(months: int, now: datetime) -> list[Bucket]:
    current = _month_start(now)
    buckets = []
    for offset in range(months - 1, -1, -1):
        start = _shift_months(current, -offset)
        buckets.append(Bucket(start.strftime("%b %Y"), start, _shift_months(start, 1)))
    return buckets


def trend_buckets(range_name: str, now: datetime) -> list[Bucket]:
    """7 days for a week, 30 days for a month, 12 months for a year"""
    if range_name == "week":
        return daily_buckets(7, now, "%a")
    if range_name == "month":
        return daily_buckets(30, now, "%d %b")
    return monthly_buckets(12, now)


def fill_trend(
    buckets: list[Bucket],
    booking_times: Iterable[datetime],
    payments: Iterable[tuple[datetime, float]],
) -> list[dict]:
    series = [{"label": b.label, "bookings": 0, "revenue": 0.0} for b in buckets]

    for moment in booking_times:
        for index, bucket in enumerate(buckets):
            if bucket.contains(moment):
                series[index]["bookings"] += 1
                break

    for moment, amount in payments:
        for index, bucket in enumerate(buckets):
            if bucket.contains(moment):
                series[index]["revenue"] += amount
                break

    for point in series:
        point["revenue"] = round(point["revenue"], 2)
    return series
