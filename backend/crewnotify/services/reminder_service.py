"""
Сервис напоминаний о событиях с известным временем (например, вылет по билету).
"""
import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import and_, asc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from crewnotify.core.exceptions import StoreFailureError
from crewnotify.core.utils import to_naive_utc, utcnow
from crewnotify.models.reminder import Reminder

logger = logging.getLogger(__name__)

# (метка, за сколько часов до события, текст)
REMINDER_OFFSETS = (
    ("72_hours", 72, "Your flight departs in 72 hours. Please ensure all travel documents are ready."),
    ("24_hours", 24, "Your flight departs tomorrow. Check in online if possible."),
    ("3_hours", 3, "Your flight departs in 3 hours. Head to the airport soon."),
)


class ReminderService:
    """Сервис для управления напоминаниями."""

    def __init__(self, db: Session):
        self.db = db

    def _flush(self, operation: str) -> None:
        try:
            self.db.flush()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreFailureError(operation, e) from e

    def schedule_reminders(
        self,
        reference_id: str,
        event_time: datetime,
        user_id: Optional[str] = None,
    ) -> list[Reminder]:
        """
        Создаёт 3 напоминания: за 72, 24 и 3 часа до события.
        Время события в прошлом не проверяется: такие напоминания сразу считаются наступившими.
        """
        event_at = to_naive_utc(event_time)
        reminders = []
        for label, hours, message in REMINDER_OFFSETS:
            reminder = Reminder(
                reference_id=reference_id,
                user_id=user_id,
                offset_label=label,
                event_at=event_at,
                trigger_at=event_at - timedelta(hours=hours),
                message=message,
                is_sent=False,
            )
            self.db.add(reminder)
            reminders.append(reminder)

        self._flush("schedule reminders")
        logger.info(f"Scheduled {len(reminders)} reminders for {reference_id}, event at {event_at}")
        return reminders

    def delete_pending(self, reference_id: str) -> int:
        """Удаляет неотправленные напоминания по событию (при его изменении)."""
        try:
            count = (
                self.db.query(Reminder)
                .filter(Reminder.reference_id == reference_id, Reminder.is_sent == False)
                .delete(synchronize_session="fetch")
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreFailureError("delete reminders", e) from e
        if count:
            logger.info(f"Deleted {count} pending reminders for {reference_id}")
        return count

    def reschedule(
        self,
        reference_id: str,
        event_time: datetime,
        user_id: Optional[str] = None,
    ) -> list[Reminder]:
        """Пересоздаёт напоминания после изменения времени события."""
        self.delete_pending(reference_id)
        return self.schedule_reminders(reference_id, event_time, user_id=user_id)

    def due_reminders(self, now: Optional[datetime] = None) -> list[Reminder]:
        """Неотправленные напоминания, время которых наступило, по возрастанию времени."""
        now = to_naive_utc(now) if now is not None else utcnow()
        return (
            self.db.query(Reminder)
            .filter(
                and_(
                    Reminder.trigger_at <= now,
                    Reminder.is_sent == False,
                )
            )
            .order_by(asc(Reminder.trigger_at), asc(Reminder.id))
            .all()
        )

    def upcoming_reminders(self, user_id: str, now: Optional[datetime] = None) -> list[Reminder]:
        """Будущие неотправленные напоминания пользователя."""
        now = to_naive_utc(now) if now is not None else utcnow()
        return (
            self.db.query(Reminder)
            .filter(
                Reminder.user_id == user_id,
                Reminder.is_sent == False,
                Reminder.trigger_at >= now,
            )
            .order_by(asc(Reminder.trigger_at))
            .all()
        )

    def get_by_id(self, reminder_id: int) -> Optional[Reminder]:
        return self.db.query(Reminder).filter(Reminder.id == reminder_id).first()

    def mark_sent(self, reminder_id: int) -> int:
        """Отмечает напоминание отправленным. Повторный вызов ничего не меняет."""
        try:
            count = (
                self.db.query(Reminder)
                .filter(Reminder.id == reminder_id, Reminder.is_sent == False)
                .update({Reminder.is_sent: True, Reminder.sent_at: utcnow()}, synchronize_session="fetch")
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreFailureError("mark reminder sent", e) from e
        return count
