"""User model: identity anchor for a physical device."""

import secrets
from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: str = Field(default_factory=lambda: f"usr_{secrets.token_hex(4)}", primary_key=True)
    device_id: str = Field(unique=True, index=True)
    device_name: str
    full_name: Optional[str] = None
    emergency_contact1_name: Optional[str] = None
    emergency_contact1_phone: Optional[str] = None
    emergency_contact2_name: Optional[str] = None
    emergency_contact2_phone: Optional[str] = None
    birthday: Optional[str] = None
    address: Optional[str] = None
    expo_push_token: Optional[str] = None
    fcm_token: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
