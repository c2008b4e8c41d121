"""
Сервисный слой для бизнес-логики.
"""
from crewnotify.services.fanout_service import FanoutService
from crewnotify.services.notice_service import NoticeService
from crewnotify.services.preference_service import PreferenceService
from crewnotify.services.reminder_service import ReminderService
from crewnotify.services.retention_service import RetentionService
from crewnotify.services.stats_service import StatsService

__all__ = [
    "FanoutService",
    "NoticeService",
    "PreferenceService",
    "ReminderService",
    "RetentionService",
    "StatsService",
]
