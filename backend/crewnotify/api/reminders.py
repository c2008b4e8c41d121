"""
API endpoints для напоминаний о событиях.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from crewnotify.core.database import get_db
from crewnotify.core.exceptions import NotFoundException
from crewnotify.core.security import verify_api_key, get_current_user_id
from crewnotify.schemas.notice import CountResponse
from crewnotify.schemas.reminder import ReminderListResponse, ReminderResponse, ReminderSchedule
from crewnotify.services.reminder_service import ReminderService

router = APIRouter(
    prefix="/reminders",
    tags=["reminders"],
    dependencies=[Depends(verify_api_key)],
)


def _list_response(reminders) -> ReminderListResponse:
    return ReminderListResponse(
        items=[ReminderResponse.model_validate(r) for r in reminders],
        total=len(reminders),
    )


@router.post("", response_model=ReminderListResponse, status_code=status.HTTP_201_CREATED)
def schedule_reminders(data: ReminderSchedule, db: Session = Depends(get_db)):
    """Создать напоминания за 72, 24 и 3 часа до события."""
    reminders = ReminderService(db).schedule_reminders(
        data.reference_id, data.event_time, user_id=data.user_id
    )
    return _list_response(reminders)


@router.put("/{reference_id}", response_model=ReminderListResponse)
def reschedule_reminders(reference_id: str, data: ReminderSchedule, db: Session = Depends(get_db)):
    """Пересоздать неотправленные напоминания после изменения времени события."""
    reminders = ReminderService(db).reschedule(reference_id, data.event_time, user_id=data.user_id)
    return _list_response(reminders)


@router.delete("/{reference_id}", response_model=CountResponse)
def delete_pending_reminders(reference_id: str, db: Session = Depends(get_db)):
    """Удалить неотправленные напоминания по событию."""
    return CountResponse(count=ReminderService(db).delete_pending(reference_id))


@router.get("/due", response_model=ReminderListResponse)
def get_due_reminders(db: Session = Depends(get_db)):
    """Неотправленные напоминания, время которых наступило."""
    return _list_response(ReminderService(db).due_reminders())


@router.get("/upcoming", response_model=ReminderListResponse)
def get_upcoming_reminders(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Будущие напоминания текущего пользователя."""
    return _list_response(ReminderService(db).upcoming_reminders(user_id))


@router.post("/{reminder_id}/mark-sent", response_model=ReminderResponse)
def mark_reminder_sent(reminder_id: int, db: Session = Depends(get_db)):
    """Отметить напоминание отправленным."""
    service = ReminderService(db)
    reminder = service.get_by_id(reminder_id)
    if not reminder:
        raise NotFoundException("Reminder", reminder_id)
    service.mark_sent(reminder_id)
    db.refresh(reminder)
    return ReminderResponse.model_validate(reminder)
