"""
Pydantic схемы для настроек уведомлений.
"""
from datetime import datetime, time
from typing import Optional, Literal

from pydantic import BaseModel, ConfigDict, field_validator

from crewnotify.schemas.notice import NoticeCategory

DigestFrequency = Literal["daily", "weekly", "never"]


class PreferenceUpdate(BaseModel):
    """Схема обновления настроек (частичная)."""
    enabled_categories: Optional[list[NoticeCategory]] = None
    email_notifications: Optional[bool] = None
    push_notifications: Optional[bool] = None
    sound_enabled: Optional[bool] = None
    vibration_enabled: Optional[bool] = None
    digest_frequency: Optional[DigestFrequency] = None
    quiet_hours_start: Optional[time] = None
    quiet_hours_end: Optional[time] = None

    @field_validator(
        "enabled_categories",
        "email_notifications",
        "push_notifications",
        "sound_enabled",
        "vibration_enabled",
        "digest_frequency",
        mode="before",
    )
    @classmethod
    def _not_null(cls, value):
        # null допустим только для тихих часов: он очищает окно
        if value is None:
            raise ValueError("must not be null")
        return value


class PreferenceResponse(BaseModel):
    """Схема ответа с настройками."""
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    enabled_categories: list[str]
    email_notifications: bool
    push_notifications: bool
    sound_enabled: bool
    vibration_enabled: bool
    digest_frequency: str
    quiet_hours_start: Optional[time] = None
    quiet_hours_end: Optional[time] = None
    updated_at: Optional[datetime] = None
