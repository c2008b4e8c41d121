"""Тесты цикла обслуживания: очистка и обработка наступивших напоминаний."""
import asyncio
from datetime import datetime, timedelta

import pytest

from crewnotify.models.notice import Notice
from crewnotify.models.preference import NotificationPreference
from crewnotify.models.reminder import Reminder
from crewnotify.services.reminder_service import ReminderService
from crewnotify.workers import scheduler
from crewnotify.workers.scheduler import run_maintenance_cycle

NOW = datetime(2025, 6, 9, 9, 0)


def test_cycle_turns_due_reminders_into_notices(db_session, session_factory):
    ReminderService(db_session).schedule_reminders("TKT-1", datetime(2025, 6, 10, 8, 0), user_id="crew-1")
    db_session.commit()

    result = run_maintenance_cycle(session_factory, now=NOW)

    # 72h и 24h уже наступили, 3h ещё нет
    assert result == {"swept": 0, "reminders": 2}
    notices = db_session.query(Notice).order_by(Notice.id).all()
    assert [n.category for n in notices] == ["travel_reminder", "travel_reminder"]
    assert {n.payload["offset"] for n in notices} == {"72_hours", "24_hours"}
    # до вылета 23 часа
    assert all(n.priority == "high" for n in notices)
    assert all(n.expires_at == datetime(2025, 6, 10, 8, 0) for n in notices)

    sent = db_session.query(Reminder).filter(Reminder.is_sent == True).count()
    assert sent == 2
    assert run_maintenance_cycle(session_factory, now=NOW) == {"swept": 0, "reminders": 0}


def test_cycle_sweeps_expired(db_session, session_factory, make_notice):
    make_notice(expires_at=NOW - timedelta(minutes=1))
    make_notice()
    assert run_maintenance_cycle(session_factory, now=NOW)["swept"] == 1
    assert db_session.query(Notice).count() == 1


def test_reminders_without_owner_stay_due(db_session, session_factory):
    ReminderService(db_session).schedule_reminders("TKT-2", datetime(2025, 6, 10, 8, 0))
    db_session.commit()

    assert run_maintenance_cycle(session_factory, now=NOW)["reminders"] == 0
    assert len(ReminderService(db_session).due_reminders(NOW)) == 2


def test_disabled_category_still_consumes_reminder(db_session, session_factory):
    db_session.add(NotificationPreference(user_id="crew-1", enabled_categories=["general"]))
    ReminderService(db_session).schedule_reminders("TKT-3", datetime(2025, 6, 10, 8, 0), user_id="crew-1")
    db_session.commit()

    assert run_maintenance_cycle(session_factory, now=NOW)["reminders"] == 2
    assert db_session.query(Notice).count() == 0


def test_run_scheduler_survives_failing_cycle(monkeypatch):
    calls = []

    def failing_cycle(session_factory):
        calls.append(session_factory)
        raise RuntimeError("store is down")

    monkeypatch.setattr(scheduler, "run_maintenance_cycle", failing_cycle)

    async def run_briefly():
        task = asyncio.create_task(scheduler.run_scheduler(session_factory="factory", interval=0.01))
        await asyncio.sleep(0.1)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(run_briefly())
    assert len(calls) >= 2
    assert set(calls) == {"factory"}
