"""
Реестр шаблонов уведомлений: категория -> заголовок, текст, приоритет по умолчанию.
"""
import re
from dataclasses import dataclass
from typing import Any, Mapping

from crewnotify.core.exceptions import UnknownCategoryError

_TOKEN_RE = re.compile(r"\{([^{}]+)\}")


@dataclass(frozen=True)
class NoticeTemplate:
    title: str
    message: str
    priority: str


TEMPLATES: Mapping[str, NoticeTemplate] = {
    "certificate_expiry": NoticeTemplate(
        title="Certificate Expiring Soon",
        message=(
            "Your {certificate_type} certificate expires on {expiry_date}. "
            "Please renew it soon to avoid any complications."
        ),
        priority="high",
    ),
    "travel_reminder": NoticeTemplate(
        title="Travel Reminder",
        message=(
            "You have {travel_type} scheduled for {departure_date} at {departure_time} "
            "from {departure_location}."
        ),
        priority="medium",
    ),
    "new_circular": NoticeTemplate(
        title="New Circular Available",
        message=(
            'A new circular "{circular_title}" has been published. '
            "Please review and acknowledge if required."
        ),
        priority="medium",
    ),
    "signoff_reminder": NoticeTemplate(
        title="Sign-off Checklist Reminder",
        message="Don't forget to complete your sign-off checklist before leaving {vessel_name}.",
        priority="medium",
    ),
    "system_announcement": NoticeTemplate(
        title="System Announcement",
        message="{announcement_message}",
        priority="medium",
    ),
    "document_update": NoticeTemplate(
        title="Document Updated",
        message='Your document "{document_name}" has been updated.',
        priority="low",
    ),
    "crew_message": NoticeTemplate(
        title="Message from Crew Management",
        message="{message_content}",
        priority="medium",
    ),
    "general": NoticeTemplate(
        title="Notification",
        message="{message_content}",
        priority="low",
    ),
}


def get_template(category: str) -> NoticeTemplate:
    """Шаблон категории. Неизвестная категория: UnknownCategoryError."""
    try:
        return TEMPLATES[category]
    except KeyError:
        raise UnknownCategoryError(category) from None


def render(pattern: str, variables: Mapping[str, Any]) -> str:
    """
    Подставляет {key} из variables за один проход.
    Токены без значения остаются как есть, подставленные значения повторно не разбираются.
    """
    def _replace(match: re.Match) -> str:
        key = match.group(1)
        if key in variables:
            return str(variables[key])
        return match.group(0)

    return _TOKEN_RE.sub(_replace, pattern)
