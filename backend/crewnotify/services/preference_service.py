"""
Сервис настроек уведомлений и проверка разрешённых категорий.
"""
import logging
from datetime import datetime, time, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from crewnotify.core.exceptions import StoreFailureError
from crewnotify.core.utils import local_tz, to_naive_utc, utcnow
from crewnotify.models.preference import NotificationPreference
from crewnotify.schemas.notice import NOTICE_CATEGORIES
from crewnotify.schemas.preference import PreferenceUpdate

logger = logging.getLogger(__name__)

# поля, которые можно сбросить в null
_CLEARABLE_FIELDS = ("quiet_hours_start", "quiet_hours_end")


class PreferenceService:
    """Сервис для управления настройками уведомлений."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> Optional[NotificationPreference]:
        """Настройки пользователя или None, если он их не сохранял."""
        return (
            self.db.query(NotificationPreference)
            .filter(NotificationPreference.user_id == user_id)
            .first()
        )

    def is_category_enabled(self, user_id: str, category: str) -> bool:
        """Разрешена ли категория. Нет записи настроек: разрешено всё."""
        pref = self.get(user_id)
        if pref is None:
            return True
        return category in (pref.enabled_categories or [])

    def update(self, user_id: str, data: PreferenceUpdate) -> NotificationPreference:
        """Создаёт запись при первом сохранении, дальше обновляет переданные поля."""
        pref = self.get(user_id)
        if pref is None:
            logger.info(f"Creating notification preferences for user {user_id}")
            pref = NotificationPreference(
                user_id=user_id,
                enabled_categories=list(NOTICE_CATEGORIES),
            )
            self.db.add(pref)

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field not in _CLEARABLE_FIELDS:
                continue
            if field == "enabled_categories":
                value = list(dict.fromkeys(value))
            setattr(pref, field, value)

        try:
            self.db.flush()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreFailureError("update preferences", e) from e
        self.db.refresh(pref)
        return pref

    def is_quiet_time(self, user_id: str, at: Optional[datetime] = None) -> bool:
        """
        Попадает ли момент в тихие часы пользователя (по локальному времени).
        Окно может переходить через полночь, например 22:00–07:00.
        На создание уведомлений не влияет: это подсказка для доставки.
        """
        pref = self.get(user_id)
        if pref is None or pref.quiet_hours_start is None or pref.quiet_hours_end is None:
            return False
        at = to_naive_utc(at) if at is not None else utcnow()
        local: time = at.replace(tzinfo=timezone.utc).astimezone(local_tz()).time()
        start, end = pref.quiet_hours_start, pref.quiet_hours_end
        if start == end:
            return False
        if start < end:
            return start <= local < end
        return local >= start or local < end
