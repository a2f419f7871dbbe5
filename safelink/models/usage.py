"""Code usage ledger model."""

import secrets
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class CodeUsage(SQLModel, table=True):
    __tablename__ = "code_usage"
    __table_args__ = (
        UniqueConstraint("pairing_code_id", "user_id", name="uq_usage_code_user"),
    )

    id: str = Field(default_factory=lambda: f"use_{secrets.token_hex(4)}", primary_key=True)
    # SET NULL rather than CASCADE: history outlives the redeemed code
    pairing_code_id: Optional[str] = Field(
        default=None, foreign_key="pairing_codes.id", index=True, ondelete="SET NULL"
    )
    code: str  # denormalized code string
    user_id: str = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    device_id: Optional[str] = None
    code_owner_id: Optional[str] = Field(
        default=None, foreign_key="users.id", index=True, ondelete="SET NULL"
    )
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
