"""
Утилиты приложения.
"""
import re
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from crewnotify.core.config import settings


def local_tz() -> ZoneInfo:
    """Часовой пояс для календарных границ."""
    return ZoneInfo(settings.TIMEZONE)


def utcnow() -> datetime:
    """Текущее время в UTC без tzinfo: в таком виде время хранится в БД."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(dt: datetime | None) -> datetime | None:
    """Приводит datetime к naive UTC. Naive значения считаются уже UTC."""
    if dt is None or dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def day_boundaries(now: datetime | None = None) -> dict[str, datetime]:
    """
    Начало сегодняшнего дня, вчерашнего, текущей недели (с воскресенья)
    и месяца в локальном часовом поясе, в naive UTC.
    """
    tz = local_tz()
    now = to_naive_utc(now) if now is not None else utcnow()
    local_now = now.replace(tzinfo=timezone.utc).astimezone(tz)
    today = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    # isoweekday: пн=1 .. вс=7, неделя начинается с воскресенья
    week_start = today - timedelta(days=today.isoweekday() % 7)
    yesterday = today - timedelta(days=1)
    month_start = today.replace(day=1)

    return {
        "today": to_naive_utc(today),
        "yesterday": to_naive_utc(yesterday),
        "week": to_naive_utc(week_start),
        "month": to_naive_utc(month_start),
    }


def sanitize_text(text: str | None, max_length: int = 1000) -> str | None:
    """Очистить текст от управляющих символов и ограничить длину."""
    if text is None:
        return None
    text = re.sub(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]', '', text)
    return text[:max_length].strip()
