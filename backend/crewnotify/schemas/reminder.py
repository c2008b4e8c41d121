"""
Pydantic схемы для напоминаний.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ReminderSchedule(BaseModel):
    """Схема регистрации события с известным временем."""
    reference_id: str
    event_time: datetime
    user_id: Optional[str] = None


class ReminderResponse(BaseModel):
    """Схема ответа с данными напоминания."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    reference_id: str
    user_id: Optional[str] = None
    offset_label: str
    event_at: datetime
    trigger_at: datetime
    message: str
    is_sent: bool = False
    sent_at: Optional[datetime] = None
    created_at: datetime


class ReminderListResponse(BaseModel):
    """Схема списка напоминаний."""
    items: list[ReminderResponse]
    total: int
