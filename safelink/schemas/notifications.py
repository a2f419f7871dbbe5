"""Push notification request schemas."""

from typing import Optional

from pydantic import Field

from safelink.schemas.common import CamelModel


class CrashNotificationRequest(CamelModel):
    to_user_id: str = Field(min_length=1)
    device_name: str = Field(min_length=1)
    message: Optional[str] = None


class NotificationRequest(CamelModel):
    to_user_id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    body: str = Field(min_length=1)
