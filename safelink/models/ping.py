"""Ping model."""

import secrets
from datetime import datetime, timezone

from sqlmodel import Field, SQLModel


class Ping(SQLModel, table=True):
    __tablename__ = "pings"

    id: str = Field(default_factory=lambda: f"png_{secrets.token_hex(4)}", primary_key=True)
    from_user_id: str = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    to_user_id: str = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
