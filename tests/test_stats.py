from datetime import datetime, timedelta

from visitdesk.records import VisitorRecord
from visitdesk.services.stats import compute_today_stats, format_hours, start_of_day

NOW = datetime(2026, 10, 17, 15, 30)


def visitor(sign_in, sign_out=None, name="Visitor"):
    return VisitorRecord(
        id=name,
        name=name,
        host_name="Host",
        visit_reason="meeting",
        sign_in_time=sign_in,
        sign_out_time=sign_out,
        is_signed_out=sign_out is not None,
    )


def test_no_visitors():
    assert compute_today_stats([], NOW) == {"currentVisitors": 0, "todaySignins": 0, "avgDuration": "0.0h"}


def test_one_hour_visit():
    v = visitor(NOW - timedelta(hours=2), NOW - timedelta(hours=1))
    stats = compute_today_stats([v], NOW)
    assert stats == {"currentVisitors": 0, "todaySignins": 1, "avgDuration": "1.0h"}


def test_today_counts_from_local_midnight():
    visitors = [
        visitor(datetime(2026, 10, 17, 0, 0), name="midnight"),
        visitor(datetime(2026, 10, 16, 23, 59, 59), name="yesterday"),
        visitor(datetime(2026, 10, 17, 9, 0), datetime(2026, 10, 17, 9, 30), name="done"),
    ]
    stats = compute_today_stats(visitors, NOW)
    assert stats["todaySignins"] == 2
    # A visitor still on site from yesterday is still current
    assert stats["currentVisitors"] == 2


def test_average_covers_all_completed_visits_not_just_today():
    visitors = [
        visitor(datetime(2026, 10, 1, 9, 0), datetime(2026, 10, 1, 13, 0), name="old"),
        visitor(datetime(2026, 10, 17, 9, 0), datetime(2026, 10, 17, 10, 0), name="today"),
        visitor(datetime(2026, 10, 17, 11, 0), name="on-site"),
    ]
    assert compute_today_stats(visitors, NOW)["avgDuration"] == "2.5h"


def test_signed_out_flag_without_time_is_not_averaged():
    odd = visitor(NOW - timedelta(hours=3))
    odd.is_signed_out = True
    stats = compute_today_stats([odd], NOW)
    assert stats["currentVisitors"] == 0
    assert stats["avgDuration"] == "0.0h"


def test_format_hours():
    assert format_hours(0) == "0.0h"
    assert format_hours(90 * 60) == "1.5h"
    assert format_hours(20 * 60) == "0.3h"


def test_start_of_day():
    assert start_of_day(NOW) == datetime(2026, 10, 17)
