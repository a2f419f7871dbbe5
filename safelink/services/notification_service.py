"""Push notifications for trusted devices.

Delivery is fire-and-forget: requests enqueue a message and return, a
daemon thread hands it to the provider the token belongs to and only logs
the outcome. FCM tokens go through Firebase Admin, Expo tokens through the
Expo push API.
"""

import json
import logging
import queue
import threading
import urllib.request
from dataclasses import dataclass, field
from datetime import datetime, timezone

import firebase_admin
from firebase_admin import credentials, messaging
from sqlmodel import Session

from safelink.config import settings
from safelink.errors import NotFoundError, UnavailableError, ValidationError
from safelink.models.user import User

logger = logging.getLogger(__name__)

CRASH_TITLE = "CRASH DETECTED!"
CRASH_DEFAULT_MESSAGE = "Contact emergency services immediately!"
CRASH_CHANNEL_ID = "crash_detection_channel"

PROVIDER_FCM = "fcm"
PROVIDER_EXPO = "expo"


@dataclass
class PushMessage:
    token: str
    title: str
    body: str
    provider: str = PROVIDER_EXPO
    data: dict = field(default_factory=dict)
    channel_id: str | None = None

    def to_expo_payload(self) -> dict:
        payload = {
            "to": self.token,
            "title": self.title,
            "body": self.body,
            "data": self.data,
            "priority": "high",
            "sound": "default",
        }
        if self.channel_id:
            payload["channelId"] = self.channel_id
        return payload

    def to_fcm_message(self) -> messaging.Message:
        return messaging.Message(
            token=self.token,
            notification=messaging.Notification(title=self.title, body=self.body),
            # FCM data values must be strings
            data={k: str(v) for k, v in self.data.items()},
            android=messaging.AndroidConfig(
                priority="high",
                notification=messaging.AndroidNotification(
                    sound="default", channel_id=self.channel_id
                ),
            ),
        )


def _firebase_app() -> firebase_admin.App:
    """Return the default Firebase app, initializing it from settings once."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass
    if not settings.firebase_credentials_path:
        raise RuntimeError("Firebase not configured on backend")
    cred = credentials.Certificate(str(settings.firebase_credentials_path))
    return firebase_admin.initialize_app(cred)


def _send_fcm(message: PushMessage) -> dict:
    message_id = messaging.send(message.to_fcm_message(), app=_firebase_app())
    return {"data": message_id}


def _send_expo(message: PushMessage) -> dict:
    req = urllib.request.Request(
        settings.push_api_url,
        data=json.dumps(message.to_expo_payload()).encode("utf-8"),
        headers={"Content-Type": "application/json", "Accept": "application/json"},
        method="POST",
    )
    with urllib.request.urlopen(req, timeout=settings.push_timeout_seconds) as resp:
        return json.loads(resp.read().decode("utf-8") or "{}")


def deliver(message: PushMessage) -> dict:
    """Send one message through its token's provider. Raises on failure."""
    if message.provider == PROVIDER_FCM:
        return _send_fcm(message)
    return _send_expo(message)


class NotificationWorker:
    """Background worker that drains the push queue."""

    def __init__(self, sender=deliver):
        self._queue: queue.Queue[PushMessage] = queue.Queue()
        self._thread: threading.Thread | None = None
        self._running = False
        self._sender = sender

    def start(self) -> bool:
        """Start the worker thread. Returns False when push is disabled."""
        if not settings.push_enabled:
            logger.info("Push notifications disabled")
            return False
        if self.running:
            return True

        self._running = True
        self._thread = threading.Thread(target=self._run, daemon=True, name="push-worker")
        self._thread.start()
        logger.info("Notification worker started")
        return True

    def stop(self):
        """Stop the worker thread."""
        self._running = False
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5)
        logger.info("Notification worker stopped")

    @property
    def running(self) -> bool:
        return self._running and self._thread is not None and self._thread.is_alive()

    def enqueue(self, message: PushMessage) -> bool:
        """Queue a message for delivery. Returns False if the worker is not running."""
        if not self.running:
            return False
        self._queue.put(message)
        return True

    def join(self):
        """Block until every queued message has been handled."""
        self._queue.join()

    def _run(self):
        """Main worker loop."""
        while self._running:
            try:
                message = self._queue.get(timeout=1)
            except queue.Empty:
                continue
            try:
                result = self._sender(message)
                logger.info("Notification sent via %s: %s", message.provider, result.get("data", result))
            except Exception as e:
                logger.error("Error sending notification via %s: %s", message.provider, e)
            finally:
                self._queue.task_done()


notification_worker = NotificationWorker()


def _recipient(session: Session, user_id: str) -> tuple[str, str]:
    """Pick the token and provider to reach a user. FCM wins over Expo."""
    user = session.get(User, user_id)
    if not user:
        logger.warning("User not found for notification: %s", user_id)
        raise NotFoundError("User not found")
    if user.fcm_token:
        return user.fcm_token, PROVIDER_FCM
    if user.expo_push_token:
        return user.expo_push_token, PROVIDER_EXPO
    logger.warning("User has no push token: %s", user_id)
    raise ValidationError("User does not have a push token registered")


def _enqueue(push: PushMessage, to_user_id: str) -> None:
    if not notification_worker.enqueue(push):
        logger.warning("Notification worker not running, message for %s dropped", to_user_id)
        raise UnavailableError("Push notifications are not configured on backend")


def send_crash(session: Session, to_user_id: str, device_name: str, message: str | None = None) -> str:
    """Queue a crash alert for ``to_user_id``. Returns a status message."""
    token, provider = _recipient(session, to_user_id)
    push = PushMessage(
        token=token,
        provider=provider,
        title=CRASH_TITLE,
        body=f"Crash detected on {device_name}. {message or CRASH_DEFAULT_MESSAGE}",
        data={
            "type": "crash",
            "device_name": device_name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
        channel_id=CRASH_CHANNEL_ID,
    )
    _enqueue(push, to_user_id)
    return "Crash notification sent successfully"


def send_general(session: Session, to_user_id: str, title: str, body: str) -> str:
    token, provider = _recipient(session, to_user_id)
    push = PushMessage(
        token=token,
        provider=provider,
        title=title,
        body=body,
        data={"type": "general", "timestamp": datetime.now(timezone.utc).isoformat()},
    )
    _enqueue(push, to_user_id)
    return "Notification sent successfully"
