"""Тесты API настроек уведомлений."""


def test_get_without_saved_preferences(client):
    response = client.get("/api/v1/preferences")
    assert response.status_code == 200
    assert response.json() is None


def test_patch_creates_and_updates(client):
    response = client.patch("/api/v1/preferences", json={
        "enabled_categories": ["general", "crew_message"],
        "quiet_hours_start": "22:00:00",
        "quiet_hours_end": "07:00:00",
    })
    assert response.status_code == 200
    data = response.json()
    assert data["user_id"] == "crew-1"
    assert data["enabled_categories"] == ["general", "crew_message"]
    assert data["quiet_hours_start"] == "22:00:00"
    assert data["digest_frequency"] == "daily"

    response = client.patch("/api/v1/preferences", json={"digest_frequency": "never"})
    data = response.json()
    assert data["digest_frequency"] == "never"
    assert data["enabled_categories"] == ["general", "crew_message"]

    assert client.get("/api/v1/preferences").json()["digest_frequency"] == "never"


def test_patch_rejects_unknown_category(client):
    response = client.patch("/api/v1/preferences", json={"enabled_categories": ["weather"]})
    assert response.status_code == 422


def test_preferences_are_per_user(client):
    client.patch("/api/v1/preferences", json={"sound_enabled": False})
    response = client.get("/api/v1/preferences", headers={"X-User-Id": "crew-2"})
    assert response.json() is None


def test_patch_rejects_null_enabled_categories(client, session_factory):
    """null вместо списка категорий не должен отключать все уведомления."""
    from crewnotify.schemas.notice import NoticeSpec
    from crewnotify.services.fanout_service import FanoutService

    client.patch("/api/v1/preferences", json={"enabled_categories": ["general"]})

    response = client.patch("/api/v1/preferences", json={"enabled_categories": None})
    assert response.status_code == 422
    assert client.get("/api/v1/preferences").json()["enabled_categories"] == ["general"]

    spec = NoticeSpec(category="general", title="Hello", message="Still delivered")
    assert FanoutService(session_factory).notify("crew-1", spec) is True


def test_patch_rejects_null_flags(client):
    for field in ("email_notifications", "push_notifications", "sound_enabled",
                  "vibration_enabled", "digest_frequency"):
        response = client.patch("/api/v1/preferences", json={field: None})
        assert response.status_code == 422, field
    assert client.get("/api/v1/preferences").json() is None


def test_null_clears_quiet_hours(client):
    client.patch("/api/v1/preferences", json={
        "quiet_hours_start": "22:00:00", "quiet_hours_end": "07:00:00",
    })
    response = client.patch("/api/v1/preferences", json={
        "quiet_hours_start": None, "quiet_hours_end": None,
    })
    assert response.status_code == 200
    assert response.json()["quiet_hours_start"] is None
    assert response.json()["quiet_hours_end"] is None
