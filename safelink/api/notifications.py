"""Push notification API endpoints.

Both endpoints answer 202 as soon as the message is queued; delivery
happens on the notification worker. Without a running worker they answer 503.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from safelink.database import get_session
from safelink.schemas.common import MessageResponse
from safelink.schemas.notifications import CrashNotificationRequest, NotificationRequest
from safelink.services import notification_service

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.post("/send-crash", response_model=MessageResponse, status_code=status.HTTP_202_ACCEPTED)
def send_crash_notification(request: CrashNotificationRequest, session: Session = Depends(get_session)):
    """Alert a trusted device that a crash was detected."""
    message = notification_service.send_crash(
        session, request.to_user_id, request.device_name, request.message
    )
    return MessageResponse(message=message)


@router.post("/send", response_model=MessageResponse, status_code=status.HTTP_202_ACCEPTED)
def send_notification(request: NotificationRequest, session: Session = Depends(get_session)):
    message = notification_service.send_general(session, request.to_user_id, request.title, request.body)
    return MessageResponse(message=message)
