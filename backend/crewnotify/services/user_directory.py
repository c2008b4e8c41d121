"""
Источники списка активных пользователей для системных объявлений.
"""
import logging
from typing import Iterable, Protocol

import httpx
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from crewnotify.core.config import settings
from crewnotify.core.exceptions import UserDirectoryError

logger = logging.getLogger(__name__)


class UserDirectory(Protocol):
    def all_user_ids(self) -> list[str]:
        ...


class StaticUserDirectory:
    """Фиксированный список пользователей (тесты, локальный запуск)."""

    def __init__(self, user_ids: Iterable[str] = ()):
        self._user_ids = [str(u) for u in user_ids]

    def all_user_ids(self) -> list[str]:
        return list(self._user_ids)


class HttpUserDirectory:
    """
    Справочник профилей по HTTP. Ожидается ответ вида
    ``["id1", "id2"]`` или ``{"items": [{"id": "id1"}, ...]}``.
    """

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.url = url or settings.USER_DIRECTORY_URL
        self.timeout = timeout or settings.USER_DIRECTORY_TIMEOUT
        self.transport = transport

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, max=5),
        retry=retry_if_exception_type((httpx.ConnectError, httpx.TimeoutException)),
        reraise=True,
    )
    def _fetch(self) -> object:
        with httpx.Client(timeout=self.timeout, follow_redirects=True, transport=self.transport) as client:
            response = client.get(self.url, params={"status": "active"})
            response.raise_for_status()
            return response.json()

    def all_user_ids(self) -> list[str]:
        if not self.url:
            raise UserDirectoryError("USER_DIRECTORY_URL is not configured")
        try:
            data = self._fetch()
        except httpx.HTTPStatusError as e:
            logger.error(f"User directory returned {e.response.status_code}")
            raise UserDirectoryError(f"User directory returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"User directory request failed: {e}")
            raise UserDirectoryError("User directory is unreachable") from e

        items = data.get("items", []) if isinstance(data, dict) else data
        user_ids = []
        for item in items or []:
            user_id = item.get("id") if isinstance(item, dict) else item
            if user_id:
                user_ids.append(str(user_id))
        logger.info(f"User directory returned {len(user_ids)} active users")
        return user_ids


def get_user_directory() -> UserDirectory:
    """Зависимость FastAPI: справочник пользователей из настроек."""
    return HttpUserDirectory()
