"""
API endpoints.
"""
from fastapi import APIRouter

from crewnotify.api import notifications, preferences, reminders

# Главный роутер API
api_router = APIRouter(prefix="/api/v1")

# Подключаем все модули
api_router.include_router(notifications.router)
api_router.include_router(preferences.router)
api_router.include_router(reminders.router)

__all__ = ["api_router"]
