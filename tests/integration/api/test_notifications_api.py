from uuid import UUID

import pytest
from httpx import AsyncClient
from sqlmodel import select

from config import ApplicationConfig
from conpanion.domain.entities import EmailQueueEntry

ADMIN_HEADERS = {"X-Admin-API-Key": ApplicationConfig.ADMIN_API_KEY}


async def _broadcast(client: AsyncClient, user_ids, message: str):
    response = await client.post(
        "/api/admin/notifications/system",
        json={"user_ids": user_ids, "message": message},
        headers=ADMIN_HEADERS,
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_list_read_and_count(client: AsyncClient, signup_user):
    """
    Given a user with three system notifications
    When they read one and then mark all read
    Then unread counts follow
    """
    # Arrange
    user = await signup_user("reader@example.com")
    for message in ("first", "second", "third"):
        await _broadcast(client, [user["id"]], message)

    # Act
    page = await client.get("/api/notifications?limit=2", headers=user["headers"])
    newest = page.json()["notifications"][0]
    read = await client.post(
        f"/api/notifications/{newest['id']}/read", headers=user["headers"]
    )
    after_read = await client.get("/api/notifications/unread-count", headers=user["headers"])
    unread_only = await client.get(
        "/api/notifications?unread_only=true", headers=user["headers"]
    )
    read_all = await client.post("/api/notifications/read-all", headers=user["headers"])
    after_all = await client.get("/api/notifications/unread-count", headers=user["headers"])

    # Assert
    assert page.status_code == 200
    assert len(page.json()["notifications"]) == 2
    assert page.json()["unread_count"] == 3
    assert newest["message"] == "third"
    assert newest["title"] == "System Notification"
    assert newest["type"] == "system"

    assert read.status_code == 200
    assert read.json()["is_read"] is True
    assert read.json()["read_at"] is not None
    assert after_read.json()["unread_count"] == 2
    assert [n["message"] for n in unread_only.json()["notifications"]] == [
        "second",
        "first",
    ]
    assert read_all.json()["updated"] == 2
    assert after_all.json()["unread_count"] == 0


@pytest.mark.asyncio
async def test_cannot_read_someone_elses_notification(client: AsyncClient, signup_user):
    owner = await signup_user("owner@example.com")
    other = await signup_user("other@example.com")
    created = await _broadcast(client, [owner["id"]], "private")

    response = await client.post(
        f"/api/notifications/{created['notification_ids'][0]}/read",
        headers=other["headers"],
    )

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_notifications_require_auth(client: AsyncClient):
    response = await client.get("/api/notifications")

    assert response.status_code in (401, 403)


@pytest.mark.asyncio
async def test_update_preference_keeps_omitted_switches(client: AsyncClient, signup_user):
    # Arrange
    user = await signup_user("switches@example.com")

    # Act
    update = await client.put(
        "/api/notifications/preferences",
        json={"type": "task_assigned", "push_enabled": True},
        headers=user["headers"],
    )
    preferences = await client.get("/api/notifications/preferences", headers=user["headers"])

    # Assert
    assert update.status_code == 200
    assert update.json() == {
        "type": "task_assigned",
        "email_enabled": True,
        "push_enabled": True,
        "in_app_enabled": True,
    }
    stored = {p["type"]: p for p in preferences.json()["preferences"]}
    assert stored["task_assigned"]["push_enabled"] is True


@pytest.mark.asyncio
async def test_preferences_and_settings(client: AsyncClient, signup_user):
    user = await signup_user("prefs@example.com")

    preferences = await client.get("/api/notifications/preferences", headers=user["headers"])
    settings = await client.put(
        "/api/notifications/settings",
        json={
            "quiet_hours_enabled": True,
            "quiet_hours_start": "22:00:00",
            "quiet_hours_end": "07:00:00",
            "timezone": "Europe/Berlin",
        },
        headers=user["headers"],
    )
    bad_timezone = await client.put(
        "/api/notifications/settings",
        json={"timezone": "Mars/Olympus"},
        headers=user["headers"],
    )

    assert preferences.status_code == 200
    assert preferences.json()["settings"]["notifications_enabled"] is True
    assert settings.status_code == 200
    assert settings.json()["quiet_hours_enabled"] is True
    assert settings.json()["timezone"] == "Europe/Berlin"
    assert bad_timezone.status_code == 400
    assert bad_timezone.json()["error"]["code"] == "INVALID_INPUT"


@pytest.mark.asyncio
async def test_push_subscription_lifecycle(client: AsyncClient, signup_user):
    # Arrange
    user = await signup_user("device@example.com")
    body = {
        "endpoint": "https://push.example.com/abc",
        "platform": "web",
        "p256dh": "key",
        "auth": "secret",
        "device_name": "Laptop",
    }

    # Act
    first = await client.post(
        "/api/notifications/push-subscriptions", json=body, headers=user["headers"]
    )
    again = await client.post(
        "/api/notifications/push-subscriptions",
        json={**body, "device_name": "Work laptop"},
        headers=user["headers"],
    )
    listing = await client.get(
        "/api/notifications/push-subscriptions", headers=user["headers"]
    )
    removed = await client.request(
        "DELETE",
        "/api/notifications/push-subscriptions",
        json={"endpoint": body["endpoint"]},
        headers=user["headers"],
    )
    missing_keys = await client.post(
        "/api/notifications/push-subscriptions",
        json={"endpoint": "https://push.example.com/other", "platform": "web"},
        headers=user["headers"],
    )

    # Assert
    assert first.status_code == 201
    assert again.json()["id"] == first.json()["id"]
    assert again.json()["device_name"] == "Work laptop"
    assert len(listing.json()["subscriptions"]) == 1
    assert removed.status_code == 200
    assert removed.json()["is_active"] is False
    assert missing_keys.status_code == 400


@pytest.mark.asyncio
async def test_system_notification_queues_email_and_accepts_status_callback(
    client: AsyncClient, db_session, signup_user
):
    # Arrange
    user = await signup_user("mail@example.com")
    created = await _broadcast(client, [user["id"]], "Maintenance tonight")
    result = await db_session.exec(
        select(EmailQueueEntry).where(
            EmailQueueEntry.notification_id == UUID(created["notification_ids"][0])
        )
    )
    entry = result.one()

    # Act
    response = await client.post(
        f"/api/admin/deliveries/email/{entry.id}",
        json={"status": "failed", "error": "mailbox full"},
        headers=ADMIN_HEADERS,
    )
    unknown = await client.post(
        f"/api/admin/deliveries/email/{user['id']}",
        json={"status": "sent"},
        headers=ADMIN_HEADERS,
    )

    # Assert
    assert entry.to_email == "mail@example.com"
    assert response.status_code == 200, response.text
    assert response.json()["status"] == "failed"
    assert response.json()["retry_count"] == 1
    assert unknown.status_code == 404


@pytest.mark.asyncio
async def test_admin_endpoints_require_api_key(client: AsyncClient):
    missing = await client.post("/api/admin/jobs/expire-invitations")
    wrong = await client.post(
        "/api/admin/jobs/expire-invitations", headers={"X-Admin-API-Key": "nope"}
    )

    assert missing.status_code == 401
    assert wrong.status_code == 401


@pytest.mark.asyncio
async def test_admin_runs_jobs(client: AsyncClient):
    expired = await client.post(
        "/api/admin/jobs/expire-invitations", headers=ADMIN_HEADERS
    )
    unknown = await client.post("/api/admin/jobs/reticulate-splines", headers=ADMIN_HEADERS)

    assert expired.status_code == 200
    assert expired.json() == {"job": "expire-invitations", "result": {"expired": 0}}
    assert unknown.status_code == 404
