"""
Модель уведомления пользователя.
"""
from datetime import datetime
from sqlalchemy import Integer, String, Text, DateTime, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column

from crewnotify.core.database import Base
from crewnotify.core.utils import utcnow


class Notice(Base):
    """Уведомление, принадлежащее ровно одному пользователю."""
    __tablename__ = "notices"
    __table_args__ = (
        Index("ix_notices_user_created", "user_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(32), nullable=False)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    priority: Mapped[str] = mapped_column(String(16), nullable=False, default="medium")
    action_url: Mapped[str] = mapped_column(String(500), nullable=True)
    action_text: Mapped[str] = mapped_column(String(100), nullable=True)
    # свободные метаданные (переменные шаблона и т.п.); имя metadata занято DeclarativeBase
    payload: Mapped[dict] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    read_at: Mapped[datetime] = mapped_column(DateTime, nullable=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=True, index=True)

    @property
    def is_read(self) -> bool:
        return self.read_at is not None
