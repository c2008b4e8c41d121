"""
Конфигурация приложения.
"""
import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Настройки приложения."""

    # Database: без дефолта, приложение не запустится без БД
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")

    # FastAPI
    APP_TITLE: str = "Crew Notification Engine"
    DEBUG: bool = False

    # API Security: без дефолтов
    API_KEY: str = os.getenv("API_KEY", "")

    # CORS: по умолчанию пустой (ничего не разрешено)
    ALLOWED_ORIGINS: str = os.getenv("ALLOWED_ORIGINS", "")

    # Часовой пояс для границ "сегодня / вчера / неделя"
    TIMEZONE: str = os.getenv("TIMEZONE", "UTC")

    # Fan-out: сколько получателей обрабатываем параллельно
    FANOUT_MAX_WORKERS: int = int(os.getenv("FANOUT_MAX_WORKERS", 8))

    # Системные объявления живут 30 дней, если не указано иное
    ANNOUNCEMENT_TTL_DAYS: int = int(os.getenv("ANNOUNCEMENT_TTL_DAYS", 30))

    # Внешний справочник активных пользователей
    USER_DIRECTORY_URL: str = os.getenv("USER_DIRECTORY_URL", "")
    USER_DIRECTORY_TIMEOUT: float = float(os.getenv("USER_DIRECTORY_TIMEOUT", 10))

    # Фоновый цикл обслуживания (очистка + напоминания)
    SCHEDULER_ENABLED: bool = _env_bool("SCHEDULER_ENABLED")
    SCHEDULER_INTERVAL: int = int(os.getenv("SCHEDULER_INTERVAL", 60))


settings = Settings()
