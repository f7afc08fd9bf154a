"""Dashboard statistics computed from a visitor snapshot."""
from __future__ import annotations

from datetime import datetime
from typing import Iterable, TypedDict

from visitdesk.records import VisitorRecord


class TodayStats(TypedDict):
    currentVisitors: int
    todaySignins: int
    avgDuration: str


def start_of_day(now: datetime) -> datetime:
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def format_hours(seconds: float) -> str:
    return f"{seconds / 3600:.1f}h"


def compute_today_stats(visitors: Iterable[VisitorRecord], now: datetime) -> TodayStats:
    """Single pass over all visitors.

    todaySignins counts sign-ins since local midnight of `now`; avgDuration is the
    mean length of every completed visit on record, not only today's.
    """
    midnight = start_of_day(now)
    current = 0
    today = 0
    completed = 0
    total_seconds = 0.0
    for v in visitors:
        if not v.is_signed_out:
            current += 1
        if v.sign_in_time >= midnight:
            today += 1
        if v.is_signed_out and v.sign_out_time is not None:
            completed += 1
            total_seconds += (v.sign_out_time - v.sign_in_time).total_seconds()
    avg = total_seconds / completed if completed else 0.0
    return {"currentVisitors": current, "todaySignins": today, "avgDuration": format_hours(avg)}
