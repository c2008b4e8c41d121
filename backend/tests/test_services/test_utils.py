"""Тесты календарных границ и работы со временем."""
from datetime import datetime, timedelta, timezone

from crewnotify.core.config import settings
from crewnotify.core.utils import day_boundaries, sanitize_text, to_naive_utc


def test_to_naive_utc():
    aware = datetime(2025, 6, 10, 11, 0, tzinfo=timezone(timedelta(hours=3)))
    assert to_naive_utc(aware) == datetime(2025, 6, 10, 8, 0)
    assert to_naive_utc(datetime(2025, 6, 10, 8, 0)) == datetime(2025, 6, 10, 8, 0)
    assert to_naive_utc(None) is None


def test_boundaries_in_utc():
    bounds = day_boundaries(datetime(2025, 6, 11, 12, 0))
    assert bounds == {
        "today": datetime(2025, 6, 11),
        "yesterday": datetime(2025, 6, 10),
        "week": datetime(2025, 6, 8),
        "month": datetime(2025, 6, 1),
    }


def test_week_starts_today_on_sunday():
    assert day_boundaries(datetime(2025, 6, 8, 12, 0))["week"] == datetime(2025, 6, 8)


def test_boundaries_in_local_timezone(monkeypatch):
    monkeypatch.setattr(settings, "TIMEZONE", "Europe/Moscow")
    # 22:30 UTC 10 июня = 01:30 11 июня по Москве
    bounds = day_boundaries(datetime(2025, 6, 10, 22, 30))
    assert bounds["today"] == datetime(2025, 6, 10, 21, 0)
    assert bounds["yesterday"] == datetime(2025, 6, 9, 21, 0)
    assert bounds["month"] == datetime(2025, 5, 31, 21, 0)


def test_sanitize_text():
    assert sanitize_text("  a\x00b  ") == "ab"
    assert sanitize_text("x" * 10, max_length=4) == "xxxx"
    assert sanitize_text(None) is None
