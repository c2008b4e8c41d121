"""
Сервис для чтения уведомлений пользователя: фильтры, группы по давности,
отметки о прочтении и удаление.
"""
import logging
from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import desc, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from crewnotify.core.exceptions import StoreFailureError
from crewnotify.core.utils import day_boundaries, to_naive_utc, utcnow
from crewnotify.models.notice import Notice
from crewnotify.schemas.notice import NoticeFilter

logger = logging.getLogger(__name__)

RECENCY_LABELS = ("Today", "Yesterday", "This Week", "Older")


def visible_at(now: datetime):
    """Условие видимости: срок жизни не задан или ещё не наступил."""
    return or_(Notice.expires_at.is_(None), Notice.expires_at > now)


class NoticeService:
    """Сервис для управления уведомлениями пользователя."""

    def __init__(self, db: Session):
        self.db = db

    def _visible(self, user_id: str, now: Optional[datetime] = None) -> Query:
        now = to_naive_utc(now) if now is not None else utcnow()
        return self.db.query(Notice).filter(Notice.user_id == user_id, visible_at(now))

    def get_by_id(self, notice_id: int, user_id: Optional[str] = None) -> Optional[Notice]:
        """Получить уведомление по ID (с проверкой владельца, если он указан)."""
        query = self.db.query(Notice).filter(Notice.id == notice_id)
        if user_id is not None:
            query = query.filter(Notice.user_id == user_id)
        return query.first()

    def _filtered(self, user_id: str, filters: NoticeFilter, now: Optional[datetime]) -> Query:
        query = self._visible(user_id, now)

        if filters.category:
            query = query.filter(Notice.category == filters.category)
        if filters.priority:
            query = query.filter(Notice.priority == filters.priority)
        if filters.is_read is True:
            query = query.filter(Notice.read_at.is_not(None))
        elif filters.is_read is False:
            query = query.filter(Notice.read_at.is_(None))
        if filters.search:
            term = filters.search.strip()
            query = query.filter(or_(
                Notice.title.icontains(term, autoescape=True),
                Notice.message.icontains(term, autoescape=True),
            ))

        if filters.date_range != "all":
            bounds = day_boundaries(now)
            if filters.date_range == "today":
                query = query.filter(Notice.created_at >= bounds["today"])
            elif filters.date_range == "yesterday":
                query = query.filter(
                    Notice.created_at >= bounds["yesterday"],
                    Notice.created_at < bounds["today"],
                )
            elif filters.date_range == "this_week":
                query = query.filter(Notice.created_at >= bounds["week"])
            elif filters.date_range == "this_month":
                query = query.filter(Notice.created_at >= bounds["month"])
        return query

    def list_notices(
        self,
        user_id: str,
        filters: Optional[NoticeFilter] = None,
        skip: int = 0,
        limit: int = 50,
        now: Optional[datetime] = None,
    ) -> list[Notice]:
        """Уведомления пользователя, новые первыми. Истёкшие не возвращаются никогда."""
        query = self._filtered(user_id, filters or NoticeFilter(), now)
        return (
            query.order_by(desc(Notice.created_at), desc(Notice.id))
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count(self, user_id: str, filters: Optional[NoticeFilter] = None, now: Optional[datetime] = None) -> int:
        """Сколько уведомлений подходит под фильтры (без пагинации)."""
        return self._filtered(user_id, filters or NoticeFilter(), now).count()

    def group_by_recency(self, user_id: str, now: Optional[datetime] = None) -> list[dict]:
        """
        Разбивает видимые уведомления на группы Today / Yesterday / This Week / Older.
        Каждое уведомление попадает ровно в одну группу, пустые группы не возвращаются.
        """
        bounds = day_boundaries(now)
        notices = (
            self._visible(user_id, now)
            .order_by(desc(Notice.created_at), desc(Notice.id))
            .all()
        )

        buckets: dict[str, list[Notice]] = {label: [] for label in RECENCY_LABELS}
        for notice in notices:
            if notice.created_at >= bounds["today"]:
                buckets["Today"].append(notice)
            elif notice.created_at >= bounds["yesterday"]:
                buckets["Yesterday"].append(notice)
            elif notice.created_at >= bounds["week"]:
                buckets["This Week"].append(notice)
            else:
                buckets["Older"].append(notice)

        return [
            {"label": label, "notices": items, "count": len(items)}
            for label, items in buckets.items()
            if items
        ]

    # ---- отметки о прочтении ----

    def mark_read(self, notice_id: int, user_id: Optional[str] = None) -> int:
        """Отмечает уведомление прочитанным. Повторный вызов ничего не меняет."""
        return self.mark_many_read([notice_id], user_id=user_id)

    def mark_many_read(self, notice_ids: Iterable[int], user_id: Optional[str] = None) -> int:
        """Отмечает прочитанными непрочитанные уведомления из списка."""
        notice_ids = list(notice_ids)
        if not notice_ids:
            return 0
        query = self.db.query(Notice).filter(Notice.id.in_(notice_ids), Notice.read_at.is_(None))
        if user_id is not None:
            query = query.filter(Notice.user_id == user_id)
        try:
            count = query.update({Notice.read_at: utcnow()}, synchronize_session="fetch")
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreFailureError("mark notices read", e) from e
        return count

    def mark_all_read(self, user_id: str) -> int:
        """Отмечает прочитанными все непрочитанные уведомления пользователя."""
        try:
            count = (
                self.db.query(Notice)
                .filter(Notice.user_id == user_id, Notice.read_at.is_(None))
                .update({Notice.read_at: utcnow()}, synchronize_session="fetch")
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreFailureError("mark all notices read", e) from e
        if count:
            logger.info(f"Marked {count} notices read for user {user_id}")
        return count

    # ---- удаление ----

    def delete(self, notice_id: int, user_id: str) -> int:
        """Удалить уведомление пользователя."""
        return self.delete_many([notice_id], user_id)

    def delete_many(self, notice_ids: Iterable[int], user_id: str) -> int:
        """Удалить несколько уведомлений пользователя."""
        notice_ids = list(notice_ids)
        if not notice_ids:
            return 0
        try:
            count = (
                self.db.query(Notice)
                .filter(Notice.id.in_(notice_ids), Notice.user_id == user_id)
                .delete(synchronize_session="fetch")
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreFailureError("delete notices", e) from e
        return count

    def clear_all(self, user_id: str) -> int:
        """Удалить все уведомления пользователя."""
        try:
            count = (
                self.db.query(Notice)
                .filter(Notice.user_id == user_id)
                .delete(synchronize_session="fetch")
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreFailureError("clear notices", e) from e
        logger.info(f"Cleared {count} notices for user {user_id}")
        return count
