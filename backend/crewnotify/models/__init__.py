"""
Модели SQLAlchemy: импортируем все, чтобы Base.metadata знал о таблицах.
"""
from crewnotify.models.notice import Notice  # noqa: F401
from crewnotify.models.preference import NotificationPreference  # noqa: F401
from crewnotify.models.reminder import Reminder  # noqa: F401
