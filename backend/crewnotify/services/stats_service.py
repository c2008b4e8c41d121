"""
Счётчики уведомлений пользователя. Всегда пересчитываются из БД.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from crewnotify.core.utils import to_naive_utc, utcnow
from crewnotify.models.notice import Notice
from crewnotify.services.notice_service import visible_at


class StatsService:
    """Сервис статистики уведомлений."""

    def __init__(self, db: Session):
        self.db = db

    def stats(self, user_id: str, now: Optional[datetime] = None) -> dict:
        """
        total / unread / high_priority / urgent и разбивка по категориям.
        Истёкшие уведомления не учитываются. Категорий без уведомлений в by_category нет.
        """
        now = to_naive_utc(now) if now is not None else utcnow()
        unread = case((Notice.read_at.is_(None), 1), else_=0)
        rows = (
            self.db.query(
                Notice.category,
                Notice.priority,
                func.count(Notice.id).label("total"),
                func.sum(unread).label("unread"),
            )
            .filter(Notice.user_id == user_id, visible_at(now))
            .group_by(Notice.category, Notice.priority)
            .all()
        )

        result = {"total": 0, "unread": 0, "high_priority": 0, "urgent": 0, "by_category": {}}
        for row in rows:
            result["total"] += row.total
            result["unread"] += row.unread or 0
            if row.priority == "high":
                result["high_priority"] += row.total
            elif row.priority == "urgent":
                result["urgent"] += row.total
            by_category = result["by_category"]
            by_category[row.category] = by_category.get(row.category, 0) + row.total
        return result

    def unread_count(self, user_id: str, now: Optional[datetime] = None) -> int:
        """Количество непрочитанных (для значка в интерфейсе)."""
        return self.stats(user_id, now)["unread"]
