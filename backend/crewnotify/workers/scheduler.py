"""
Фоновое обслуживание: очистка истёкших уведомлений и обработка наступивших напоминаний.
Запускается из main при SCHEDULER_ENABLED, либо внешним cron через run_maintenance_cycle.
"""
import asyncio
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import sessionmaker

from crewnotify.core.config import settings
from crewnotify.core.database import SessionLocal
from crewnotify.core.exceptions import StoreFailureError
from crewnotify.core.utils import to_naive_utc, utcnow
from crewnotify.services.fanout_service import FanoutService
from crewnotify.services.notice_factory import reminder_notice_spec
from crewnotify.services.reminder_service import ReminderService
from crewnotify.services.retention_service import RetentionService

logger = logging.getLogger(__name__)


def run_maintenance_cycle(session_factory: sessionmaker, now: Optional[datetime] = None) -> dict:
    """
    Одна итерация: sweep, затем наступившие напоминания с владельцем превращаются
    в уведомления travel_reminder и помечаются отправленными.
    Напоминания без владельца остаются внешнему процессу доставки.
    """
    now = to_naive_utc(now) if now is not None else utcnow()

    with session_factory() as db:
        swept = RetentionService(db).sweep(now)
        due = [r for r in ReminderService(db).due_reminders(now) if r.user_id]
        specs = [(r.id, r.user_id, reminder_notice_spec(r, now)) for r in due]

    fanout = FanoutService(session_factory)
    dispatched = 0
    for reminder_id, user_id, spec in specs:
        try:
            fanout.notify(user_id, spec)
        except StoreFailureError as e:
            # напоминание не помечаем: попробуем на следующей итерации
            logger.error(f"Failed to create notice for reminder {reminder_id}: {e.detail}")
            continue

        with session_factory() as db:
            ReminderService(db).mark_sent(reminder_id)
            db.commit()
        dispatched += 1

    if swept or dispatched:
        logger.info(f"Maintenance cycle: swept {swept} notices, dispatched {dispatched} reminders")
    return {"swept": swept, "reminders": dispatched}


async def run_scheduler(
    session_factory: Optional[sessionmaker] = None,
    interval: Optional[int] = None,
) -> None:
    """Запускает бесконечный цикл обслуживания."""
    session_factory = session_factory or SessionLocal
    interval = interval or settings.SCHEDULER_INTERVAL
    logger.info(f"Maintenance scheduler started, interval {interval}s")
    while True:
        try:
            await asyncio.to_thread(run_maintenance_cycle, session_factory)
        except Exception as e:
            logger.error(f"Error in maintenance cycle: {e}")
        await asyncio.sleep(interval)
