"""
Сборка уведомлений: из шаблона категории или из готовых заголовка и текста.
Фабрика ничего не пишет в БД: сохранением занимается FanoutService.
"""
from datetime import datetime, date
from typing import Any, Mapping, Optional

from crewnotify.core.exceptions import ValidationException
from crewnotify.core.utils import sanitize_text, to_naive_utc, utcnow
from crewnotify.models.notice import Notice
from crewnotify.schemas.notice import NoticeSpec, PRIORITIES
from crewnotify.services.template_registry import get_template, render

DEFAULT_PRIORITY = "medium"

# ключи переменных шаблона, которые управляют самим уведомлением, а не текстом
_CONTROL_KEYS = ("priority", "action_url", "action_text")


# ---- правила приоритета (общие для всех мест вызова) ----

def certificate_priority(days_remaining: int) -> str:
    if days_remaining <= 14:
        return "urgent"
    if days_remaining <= 30:
        return "high"
    if days_remaining <= 90:
        return "medium"
    return "low"


def travel_priority(hours_to_event: float) -> str:
    if hours_to_event <= 3:
        return "urgent"
    if hours_to_event <= 24:
        return "high"
    if hours_to_event <= 72:
        return "medium"
    return "low"


def circular_followup_priority(days_overdue: int) -> str:
    return "urgent" if days_overdue > 7 else "high"


# ---- сборка ----

def _check_priority(priority: str) -> str:
    if priority not in PRIORITIES:
        raise ValidationException(f"Unknown priority {priority!r}")
    return priority


def _jsonable(variables: Mapping[str, Any]) -> dict[str, Any]:
    result = {}
    for key, value in variables.items():
        if value is None or isinstance(value, (str, int, float, bool)):
            result[key] = value
        elif isinstance(value, (datetime, date)):
            result[key] = value.isoformat()
        else:
            result[key] = str(value)
    return result


def build_freeform(
    user_id: str,
    category: str,
    title: str,
    message: str,
    priority: Optional[str] = None,
    action: Optional[tuple[str, str]] = None,
    metadata: Optional[dict[str, Any]] = None,
    expires_at: Optional[datetime] = None,
) -> Notice:
    """Уведомление с готовыми заголовком и текстом."""
    get_template(category)  # та же проверка категории, что и для шаблонов
    if not user_id:
        raise ValidationException("Notice must have an owner")
    title = sanitize_text(title, max_length=300)
    message = sanitize_text(message, max_length=5000)
    if not title or not message:
        raise ValidationException("Notice title and message must not be empty")

    action_url, action_text = action if action else (None, None)
    return Notice(
        user_id=user_id,
        category=category,
        title=title,
        message=message,
        priority=_check_priority(priority or DEFAULT_PRIORITY),
        action_url=sanitize_text(action_url, max_length=500),
        action_text=sanitize_text(action_text, max_length=100),
        payload=_jsonable(metadata) if metadata else None,
        created_at=utcnow(),
        expires_at=to_naive_utc(expires_at),
    )


def build_from_template(
    user_id: str,
    category: str,
    variables: Optional[Mapping[str, Any]] = None,
    expires_at: Optional[datetime] = None,
) -> Notice:
    """
    Рендерит шаблон категории. Приоритет берётся из variables["priority"],
    иначе из шаблона. action_url / action_text из variables становятся ссылкой действия.
    """
    variables = dict(variables or {})
    template = get_template(category)
    action = None
    if variables.get("action_url"):
        action = (variables["action_url"], variables.get("action_text") or "View")

    return build_freeform(
        user_id=user_id,
        category=category,
        title=render(template.title, variables),
        message=render(template.message, variables),
        priority=variables.get("priority") or template.priority,
        action=action,
        metadata={k: v for k, v in variables.items() if k not in _CONTROL_KEYS} or None,
        expires_at=expires_at,
    )


def build(user_id: str, spec: NoticeSpec) -> Notice:
    """Собирает уведомление по NoticeSpec для конкретного получателя."""
    if spec.uses_template:
        variables = dict(spec.variables)
        if spec.priority:
            variables["priority"] = spec.priority
        if spec.action_url:
            variables["action_url"] = spec.action_url
            variables["action_text"] = spec.action_text
        notice = build_from_template(user_id, spec.category, variables, spec.expires_at)
        if spec.metadata:
            notice.payload = {**(notice.payload or {}), **_jsonable(spec.metadata)}
        return notice

    action = (spec.action_url, spec.action_text or "View") if spec.action_url else None
    return build_freeform(
        user_id=user_id,
        category=spec.category,
        title=spec.title,
        message=spec.message,
        priority=spec.priority,
        action=action,
        metadata=spec.metadata,
        expires_at=spec.expires_at,
    )


# ---- спецификации для конкретных событий ----

def certificate_expiry_spec(certificate_type: str, expiry_date: date, days_remaining: int) -> NoticeSpec:
    return NoticeSpec(
        category="certificate_expiry",
        variables={
            "certificate_type": certificate_type,
            "expiry_date": expiry_date.isoformat(),
            "days_remaining": days_remaining,
        },
        priority=certificate_priority(days_remaining),
        action_url="/certificates",
        action_text="View Certificates",
    )


def travel_reminder_spec(
    travel_type: str,
    departure: datetime,
    departure_location: str,
    now: Optional[datetime] = None,
) -> NoticeSpec:
    departure = to_naive_utc(departure)
    now = to_naive_utc(now) if now is not None else utcnow()
    hours_until = int((departure - now).total_seconds() // 3600)
    return NoticeSpec(
        category="travel_reminder",
        variables={
            "travel_type": travel_type,
            "departure_date": departure.strftime("%Y-%m-%d"),
            "departure_time": departure.strftime("%H:%M"),
            "departure_location": departure_location,
            "hours_until": max(0, hours_until),
        },
        priority=travel_priority(hours_until),
        action_url="/dashboard",
        action_text="View Schedule",
    )


def new_circular_spec(circular_id: str, circular_title: str, requires_acknowledgment: bool) -> NoticeSpec:
    review = " and acknowledge" if requires_acknowledgment else ""
    return NoticeSpec(
        category="new_circular",
        title="New Circular Available",
        message=f'A new circular "{circular_title}" has been published. Please review{review} if required.',
        priority="high" if requires_acknowledgment else "medium",
        action_url=f"/circulars/{circular_id}",
        action_text="Review & Acknowledge" if requires_acknowledgment else "View Circular",
        metadata={"circular_id": circular_id, "requires_acknowledgment": requires_acknowledgment},
    )


def unacknowledged_circular_spec(circular_id: str, circular_title: str, days_overdue: int) -> NoticeSpec:
    return NoticeSpec(
        category="new_circular",
        title="Unread Circular Reminder",
        message=(
            f'You have an unacknowledged circular "{circular_title}" that requires attention. '
            "Please review and acknowledge."
        ),
        priority=circular_followup_priority(days_overdue),
        action_url=f"/circulars/{circular_id}",
        action_text="Review Circular",
        metadata={"circular_id": circular_id, "circular_title": circular_title, "days_overdue": days_overdue},
    )


def signoff_reminder_spec(vessel_name: Optional[str] = None) -> NoticeSpec:
    return NoticeSpec(
        category="signoff_reminder",
        variables={"vessel_name": vessel_name or "the vessel"},
        priority="medium",
        action_url="/signoff",
        action_text="Complete Sign-off",
    )


_DOCUMENT_MESSAGES = {
    "updated": 'Your document "{name}" has been updated.',
    "deleted": 'Your document "{name}" has been deleted.',
    "shared": 'Your document "{name}" has been shared with you.',
}


def document_update_spec(document_name: str, action: str) -> NoticeSpec:
    if action not in _DOCUMENT_MESSAGES:
        raise ValidationException(f"Unknown document action {action!r}")
    return NoticeSpec(
        category="document_update",
        title="Document Update",
        message=_DOCUMENT_MESSAGES[action].format(name=document_name),
        priority="low",
        action_url="/documents",
        action_text="View Documents",
        metadata={"document_name": document_name, "action": action},
    )


def reminder_notice_spec(reminder, now: Optional[datetime] = None) -> NoticeSpec:
    """Уведомление для наступившего напоминания; исчезает после самого события."""
    now = to_naive_utc(now) if now is not None else utcnow()
    hours_to_event = (reminder.event_at - now).total_seconds() / 3600
    return NoticeSpec(
        category="travel_reminder",
        title="Travel Reminder",
        message=reminder.message,
        priority=travel_priority(hours_to_event),
        action_url="/dashboard",
        action_text="View Schedule",
        metadata={
            "reference_id": reminder.reference_id,
            "reminder_id": reminder.id,
            "offset": reminder.offset_label,
        },
        expires_at=reminder.event_at,
    )
