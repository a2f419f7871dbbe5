"""Pairing code model."""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlmodel import Field, SQLModel

from safelink.config import settings


def _default_expiry() -> datetime:
    return datetime.now(timezone.utc) + timedelta(hours=settings.pairing_code_ttl_hours)


class PairingCode(SQLModel, table=True):
    __tablename__ = "pairing_codes"

    id: str = Field(default_factory=lambda: f"pc_{secrets.token_hex(4)}", primary_key=True)
    user_id: str = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    code: str = Field(unique=True, index=True)  # 6 uppercase alphanumerics
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    accuracy: Optional[float] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    expires_at: datetime = Field(default_factory=_default_expiry)
    updated_at: Optional[datetime] = None
