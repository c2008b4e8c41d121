"""
Модель напоминаний о предстоящих событиях.
"""
from datetime import datetime
from sqlalchemy import Integer, String, Text, DateTime, Boolean
from sqlalchemy.orm import Mapped, mapped_column

from crewnotify.core.database import Base
from crewnotify.core.utils import utcnow


class Reminder(Base):
    """Запланированное напоминание: pending -> sent, без обратного перехода."""
    __tablename__ = "reminders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    reference_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)  # например, id билета
    user_id: Mapped[str] = mapped_column(String(64), nullable=True, index=True)
    offset_label: Mapped[str] = mapped_column(String(32), nullable=False)  # 72_hours, 24_hours, 3_hours
    event_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    trigger_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    is_sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    sent_at: Mapped[datetime] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
