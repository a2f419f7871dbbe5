"""User directory, pings, notifications and system endpoints."""

import uuid

import pytest

from safelink.config import settings
from safelink.models.user import User
from safelink.services import notification_service
from safelink.services.notification_service import (
    PROVIDER_EXPO,
    PROVIDER_FCM,
    NotificationWorker,
    PushMessage,
)


def test_get_or_create_is_keyed_by_device(client):
    device_id = f"dev-{uuid.uuid4().hex}"
    r = client.post("/api/users/get-or-create", json={"deviceId": device_id, "deviceName": "Pixel"})
    assert r.status_code == 200
    created = r.json()
    assert created["id"].startswith("usr_")
    assert created["deviceName"] == "Pixel"

    r = client.post(
        "/api/users/get-or-create",
        json={"deviceId": device_id, "deviceName": "Pixel 8", "fullName": "Ada"},
    )
    assert r.status_code == 200
    assert r.json()["id"] == created["id"]

    user = client.get(f"/api/users/{created['id']}").json()
    assert user["deviceName"] == "Pixel 8"
    assert user["fullName"] == "Ada"


def test_get_or_create_missing_fields(client):
    r = client.post("/api/users/get-or-create", json={"deviceId": "abc"})
    assert r.status_code == 400
    assert r.json()["error"] == "Missing required fields: deviceName"


def test_get_unknown_user(client):
    r = client.get("/api/users/usr_unknown")
    assert r.status_code == 404
    assert r.json() == {"error": "User not found"}


def test_update_emergency_contacts(client, make_user):
    user = make_user()
    r = client.post(
        f"/api/users/{user['id']}/update-emergency-contacts",
        json={"emergency_contact1_name": "Mom", "emergency_contact1_phone": "555-0100"},
    )
    assert r.status_code == 200
    data = r.json()
    assert data["message"] == "Emergency contacts updated successfully"
    assert data["user"]["emergencyContact1Name"] == "Mom"
    assert data["user"]["emergencyContact1Phone"] == "555-0100"


def test_update_requires_some_field(client, make_user):
    user = make_user()
    r = client.post(f"/api/users/{user['id']}/update-emergency-contacts", json={})
    assert r.status_code == 400
    assert r.json()["error"] == "No fields to update"


def test_update_profile_merges_present_fields(client, make_user):
    user = make_user("Phone", fullName="Grace")
    r = client.patch(
        f"/api/users/{user['id']}/update-profile",
        json={"address": "1 Main St", "fullName": ""},
    )
    assert r.status_code == 200
    updated = r.json()["user"]
    assert updated["address"] == "1 Main St"
    assert updated["fullName"] == "Grace"

    r = client.patch("/api/users/usr_nope/update-profile", json={"address": "x"})
    assert r.status_code == 404


def test_delete_user_cascades_codes(client, make_user, make_code):
    user = make_user()
    code = make_code(user["id"], lat=1.0, lon=2.0)

    r = client.delete(f"/api/users/{user['id']}")
    assert r.status_code == 200
    assert client.get(f"/api/users/{user['id']}").status_code == 404
    assert client.get(f"/api/pairing/location/{code}").status_code == 400
    assert client.delete(f"/api/users/{user['id']}").status_code == 404


def test_fcm_token_kept_apart_from_expo_token(client, make_user, db_session):
    user = make_user(expoPushToken="ExponentPushToken[expo]")
    r = client.post(
        "/api/users/update-fcm-token",
        json={"deviceId": user["deviceId"], "fcmToken": "fcm:APA91bRawFcmToken"},
    )
    assert r.status_code == 200
    assert r.json() == {"message": "FCM token updated successfully"}

    db_session.expire_all()
    stored = db_session.get(User, user["id"])
    assert stored.expo_push_token == "ExponentPushToken[expo]"
    assert stored.fcm_token == "fcm:APA91bRawFcmToken"

    r = client.post("/api/users/update-fcm-token", json={"deviceId": "nope", "fcmToken": "t"})
    assert r.status_code == 404


def test_send_ping(client, make_user):
    a = make_user()
    b = make_user()
    r = client.post("/api/pings/send", json={"fromUserId": a["id"], "toUserId": b["id"]})
    assert r.status_code == 200
    assert r.json() == {"message": "Ping sent successfully"}

    r = client.post("/api/pings/send", json={"fromUserId": a["id"]})
    assert r.status_code == 400


@pytest.fixture
def sent_messages(monkeypatch):
    """Run a notification worker that records messages instead of sending them."""
    sent = []
    worker = NotificationWorker(sender=lambda message: sent.append(message) or {})
    monkeypatch.setattr(settings, "push_enabled", True)
    monkeypatch.setattr(notification_service, "notification_worker", worker)
    assert worker.start()
    yield sent, worker
    worker.stop()


def test_crash_notification_to_expo_device(client, make_user, sent_messages):
    sent, worker = sent_messages
    user = make_user(expoPushToken="ExponentPushToken[crash]")
    r = client.post(
        "/api/notifications/send-crash",
        json={"toUserId": user["id"], "deviceName": "Rider Phone"},
    )
    assert r.status_code == 202
    assert r.json()["message"] == "Crash notification sent successfully"

    worker.join()
    assert len(sent) == 1
    assert sent[0].provider == PROVIDER_EXPO
    payload = sent[0].to_expo_payload()
    assert payload["to"] == "ExponentPushToken[crash]"
    assert payload["title"] == "CRASH DETECTED!"
    assert payload["body"].startswith("Crash detected on Rider Phone.")
    assert payload["data"]["type"] == "crash"
    assert payload["channelId"] == "crash_detection_channel"


def test_crash_notification_prefers_fcm_token(client, make_user, sent_messages):
    sent, worker = sent_messages
    user = make_user(expoPushToken="ExponentPushToken[expo]")
    client.post(
        "/api/users/update-fcm-token",
        json={"deviceId": user["deviceId"], "fcmToken": "fcm:APA91bRawFcmToken"},
    )

    r = client.post(
        "/api/notifications/send-crash",
        json={"toUserId": user["id"], "deviceName": "Rider Phone", "message": "Call 112"},
    )
    assert r.status_code == 202

    worker.join()
    assert len(sent) == 1
    assert sent[0].provider == PROVIDER_FCM
    fcm_message = sent[0].to_fcm_message()
    assert fcm_message.token == "fcm:APA91bRawFcmToken"
    assert fcm_message.notification.title == "CRASH DETECTED!"
    assert fcm_message.notification.body == "Crash detected on Rider Phone. Call 112"
    assert fcm_message.data["type"] == "crash"
    assert fcm_message.android.priority == "high"
    assert fcm_message.android.notification.channel_id == "crash_detection_channel"


def test_deliver_routes_by_provider(monkeypatch):
    calls = []
    monkeypatch.setattr(notification_service, "_send_fcm", lambda m: calls.append(("fcm", m.token)) or {})
    monkeypatch.setattr(notification_service, "_send_expo", lambda m: calls.append(("expo", m.token)) or {})

    notification_service.deliver(PushMessage(token="fcm-tok", title="t", body="b", provider=PROVIDER_FCM))
    notification_service.deliver(PushMessage(token="ExponentPushToken[x]", title="t", body="b"))
    assert calls == [("fcm", "fcm-tok"), ("expo", "ExponentPushToken[x]")]


def test_worker_survives_delivery_failure(monkeypatch):
    def failing_sender(message):
        raise OSError("push service unreachable")

    worker = NotificationWorker(sender=failing_sender)
    monkeypatch.setattr(settings, "push_enabled", True)
    assert worker.start()
    try:
        assert worker.enqueue(PushMessage(token="t", title="x", body="y"))
        worker.join()
        assert worker.running
    finally:
        worker.stop()


def test_notification_without_push_token(client, make_user):
    user = make_user()
    r = client.post("/api/notifications/send", json={"toUserId": user["id"], "title": "Hi", "body": "There"})
    assert r.status_code == 400
    assert r.json()["error"] == "User does not have a push token registered"


def test_notification_unknown_user(client):
    r = client.post("/api/notifications/send-crash", json={"toUserId": "usr_none", "deviceName": "X"})
    assert r.status_code == 404


def test_notification_with_push_disabled(client, make_user):
    user = make_user(expoPushToken="ExponentPushToken[off]")
    for path, body in (
        ("/api/notifications/send", {"toUserId": user["id"], "title": "Hi", "body": "There"}),
        ("/api/notifications/send-crash", {"toUserId": user["id"], "deviceName": "X"}),
    ):
        r = client.post(path, json=body)
        assert r.status_code == 503
        assert r.json() == {"error": "Push notifications are not configured on backend"}


def test_health_and_db_check(client):
    assert client.get("/api/health").json()["status"] == "ok"
    r = client.get("/api/system/db-check")
    assert r.status_code == 200
    assert r.json()["connected"] is True
    assert r.json()["userCount"] >= 0
