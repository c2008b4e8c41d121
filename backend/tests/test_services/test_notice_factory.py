"""Тесты сборки уведомлений и правил приоритета."""
from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from crewnotify.core.exceptions import UnknownCategoryError, ValidationException
from crewnotify.schemas.notice import NoticeSpec
from crewnotify.services import notice_factory
from crewnotify.services.notice_factory import (
    build,
    build_freeform,
    build_from_template,
    certificate_priority,
    circular_followup_priority,
    travel_priority,
)


class TestPriorityRules:
    """Пороговые правила приоритета."""

    @pytest.mark.parametrize("days, expected", [
        (0, "urgent"), (14, "urgent"), (15, "high"), (30, "high"),
        (31, "medium"), (90, "medium"), (91, "low"),
    ])
    def test_certificate_priority(self, days, expected):
        assert certificate_priority(days) == expected

    @pytest.mark.parametrize("hours, expected", [
        (1, "urgent"), (3, "urgent"), (3.5, "high"), (24, "high"),
        (25, "medium"), (72, "medium"), (100, "low"),
    ])
    def test_travel_priority(self, hours, expected):
        assert travel_priority(hours) == expected

    def test_circular_followup_priority(self):
        assert circular_followup_priority(3) == "high"
        assert circular_followup_priority(7) == "high"
        assert circular_followup_priority(8) == "urgent"


class TestBuildFromTemplate:

    def test_renders_title_and_message(self):
        notice = build_from_template(
            "crew-1",
            "certificate_expiry",
            {"certificate_type": "GMDSS", "expiry_date": "2025-08-01"},
        )
        assert notice.user_id == "crew-1"
        assert notice.title == "Certificate Expiring Soon"
        assert notice.message.startswith("Your GMDSS certificate expires on 2025-08-01.")
        assert notice.priority == "high"
        assert notice.read_at is None
        assert notice.payload == {"certificate_type": "GMDSS", "expiry_date": "2025-08-01"}

    def test_priority_and_action_from_variables(self):
        notice = build_from_template(
            "crew-1",
            "crew_message",
            {
                "message_content": "Muster at 10:00",
                "priority": "urgent",
                "action_url": "/messages/5",
                "action_text": "Open",
            },
        )
        assert notice.message == "Muster at 10:00"
        assert notice.priority == "urgent"
        assert notice.action_url == "/messages/5"
        assert notice.action_text == "Open"
        assert notice.payload == {"message_content": "Muster at 10:00"}

    def test_missing_variable_left_verbatim(self):
        notice = build_from_template("crew-1", "signoff_reminder", {})
        assert "{vessel_name}" in notice.message

    def test_unknown_category(self):
        with pytest.raises(UnknownCategoryError):
            build_from_template("crew-1", "unknown", {})

    def test_aware_expiry_is_stored_as_utc(self):
        expires = datetime(2025, 6, 10, 12, 0, tzinfo=timezone(timedelta(hours=3)))
        notice = build_from_template("crew-1", "general", {"message_content": "x"}, expires_at=expires)
        assert notice.expires_at == datetime(2025, 6, 10, 9, 0)


class TestBuildFreeform:

    def test_defaults_to_medium(self):
        notice = build_freeform("crew-1", "general", "Title", "Body")
        assert notice.priority == "medium"
        assert notice.action_url is None
        assert notice.payload is None

    def test_action_pair(self):
        notice = build_freeform(
            "crew-1", "document_update", "Doc", "Body", "low", action=("/documents", "View Documents")
        )
        assert (notice.action_url, notice.action_text) == ("/documents", "View Documents")

    def test_rejects_unknown_priority(self):
        with pytest.raises(ValidationException):
            build_freeform("crew-1", "general", "Title", "Body", priority="critical")

    def test_rejects_empty_text(self):
        with pytest.raises(ValidationException):
            build_freeform("crew-1", "general", "   ", "Body")

    def test_requires_owner(self):
        with pytest.raises(ValidationException):
            build_freeform("", "general", "Title", "Body")

    def test_strips_control_characters(self):
        notice = build_freeform("crew-1", "general", "Ti\x00tle", "Bo\x07dy")
        assert notice.title == "Title"
        assert notice.message == "Body"


class TestBuildFromSpec:

    def test_template_spec(self):
        spec = NoticeSpec(category="signoff_reminder", variables={"vessel_name": "MV Aurora"})
        notice = build("crew-1", spec)
        assert notice.title == "Sign-off Checklist Reminder"
        assert "MV Aurora" in notice.message

    def test_freeform_spec(self):
        spec = NoticeSpec(category="general", title="Hello", message="World", metadata={"k": 1})
        notice = build("crew-1", spec)
        assert (notice.title, notice.message) == ("Hello", "World")
        assert notice.payload == {"k": 1}

    def test_title_without_message_is_invalid(self):
        with pytest.raises(ValidationError):
            NoticeSpec(category="general", title="Only title")


class TestDomainSpecs:

    def test_certificate_expiry_spec(self):
        spec = notice_factory.certificate_expiry_spec("STCW", date(2025, 7, 1), 10)
        notice = build("crew-1", spec)
        assert notice.priority == "urgent"
        assert "STCW" in notice.message
        assert notice.action_url == "/certificates"

    def test_travel_reminder_spec(self):
        now = datetime(2025, 6, 9, 8, 0)
        spec = notice_factory.travel_reminder_spec("flight", datetime(2025, 6, 10, 8, 0), "Oslo", now=now)
        notice = build("crew-1", spec)
        assert notice.priority == "high"
        assert "2025-06-10 at 08:00 from Oslo" in notice.message

    def test_new_circular_spec(self):
        assert notice_factory.new_circular_spec("c1", "Safety", True).priority == "high"
        spec = notice_factory.new_circular_spec("c1", "Safety", False)
        assert spec.priority == "medium"
        assert spec.action_url == "/circulars/c1"

    def test_unacknowledged_circular_spec(self):
        spec = notice_factory.unacknowledged_circular_spec("c1", "Safety", 10)
        assert spec.priority == "urgent"

    def test_signoff_default_vessel(self):
        notice = build("crew-1", notice_factory.signoff_reminder_spec())
        assert "the vessel" in notice.message

    def test_document_update_spec(self):
        spec = notice_factory.document_update_spec("Passport", "shared")
        assert spec.message == 'Your document "Passport" has been shared with you.'
        with pytest.raises(ValidationException):
            notice_factory.document_update_spec("Passport", "archived")
