"""
Рассылка уведомлений одному пользователю, списку пользователей и всем активным.
"""
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import timedelta
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from crewnotify.core.config import settings
from crewnotify.core.exceptions import StoreFailureError, ValidationException
from crewnotify.core.utils import utcnow
from crewnotify.schemas.notice import NoticeSpec
from crewnotify.services import notice_factory
from crewnotify.services.preference_service import PreferenceService
from crewnotify.services.template_registry import get_template
from crewnotify.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)


class FanoutService:
    """
    Каждый получатель обрабатывается в собственной сессии, поэтому
    ошибка одного не откатывает уведомления остальных.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        user_directory: Optional[UserDirectory] = None,
        max_workers: Optional[int] = None,
    ):
        self.session_factory = session_factory
        self.user_directory = user_directory
        self.max_workers = max(1, max_workers or settings.FANOUT_MAX_WORKERS)

    def _persist(self, db: Session, user_id: str, spec: NoticeSpec) -> bool:
        try:
            if not PreferenceService(db).is_category_enabled(user_id, spec.category):
                logger.info(f"Category {spec.category} disabled for user {user_id}, notice skipped")
                return False
            notice = notice_factory.build(user_id, spec)
            db.add(notice)
            db.flush()
            # после commit атрибуты просрочены, id читаем до него
            notice_id = notice.id
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreFailureError("create notice", e) from e
        logger.info(f"Notice created: id={notice_id}, user={user_id}, category={spec.category}")
        return True

    def notify(self, user_id: str, spec: NoticeSpec) -> bool:
        """
        Создаёт уведомление, если категория разрешена пользователю.
        False: категория отключена (не ошибка). Ошибки хранилища пробрасываются.
        """
        with self.session_factory() as db:
            return self._persist(db, user_id, spec)

    def _notify_recipient(self, user_id: str, spec: NoticeSpec) -> bool:
        try:
            return self.notify(user_id, spec)
        except (StoreFailureError, ValidationException) as e:
            logger.error(f"Failed to notify user {user_id}: {e.detail}")
            return False

    def notify_many(self, user_ids: Iterable[str], spec: NoticeSpec) -> int:
        """Рассылка списку пользователей. Возвращает число сохранённых уведомлений."""
        # неизвестная категория: ошибка вызывающего, а не отдельного получателя
        get_template(spec.category)
        recipients = list(user_ids)
        if not recipients:
            return 0

        persisted = 0
        workers = min(self.max_workers, len(recipients))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="fanout") as pool:
            futures = [pool.submit(self._notify_recipient, user_id, spec) for user_id in recipients]
            for future in as_completed(futures):
                if future.result():
                    persisted += 1

        if persisted < len(recipients):
            logger.warning(
                f"Fan-out {spec.category}: {persisted} of {len(recipients)} notices persisted"
            )
        else:
            logger.info(f"Fan-out {spec.category}: {persisted} notices persisted")
        return persisted

    def announce(
        self,
        message: str,
        priority: str = "medium",
        ttl: Optional[timedelta] = None,
    ) -> int:
        """Системное объявление всем активным пользователям, истекает через ttl."""
        if self.user_directory is None:
            raise ValidationException("User directory is not configured")
        if ttl is None:
            ttl = timedelta(days=settings.ANNOUNCEMENT_TTL_DAYS)
        spec = NoticeSpec(
            category="system_announcement",
            title="System Announcement",
            message=message,
            priority=priority,
            expires_at=utcnow() + ttl,
        )
        user_ids = self.user_directory.all_user_ids()
        logger.info(f"Announcing to {len(user_ids)} users, expires at {spec.expires_at}")
        return self.notify_many(user_ids, spec)
