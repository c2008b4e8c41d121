"""
Модель настроек уведомлений пользователя.
"""
from datetime import datetime, time
from sqlalchemy import Integer, String, Boolean, DateTime, Time, JSON
from sqlalchemy.orm import Mapped, mapped_column

from crewnotify.core.database import Base
from crewnotify.core.utils import utcnow


class NotificationPreference(Base):
    """Настройки уведомлений. Создаются только при первом явном сохранении."""
    __tablename__ = "notification_preferences"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    enabled_categories: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    email_notifications: Mapped[bool] = mapped_column(Boolean, default=True)
    push_notifications: Mapped[bool] = mapped_column(Boolean, default=True)
    sound_enabled: Mapped[bool] = mapped_column(Boolean, default=True)
    vibration_enabled: Mapped[bool] = mapped_column(Boolean, default=True)
    digest_frequency: Mapped[str] = mapped_column(String(16), default="daily")
    quiet_hours_start: Mapped[time] = mapped_column(Time, nullable=True)
    quiet_hours_end: Mapped[time] = mapped_column(Time, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
