"""Device connection model.

A pairing is symmetric but stored as a directed row (initiator -> paired).
Only the ordered pair is unique; readers union both columns.
"""

import secrets
from datetime import datetime, timezone

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class DeviceConnection(SQLModel, table=True):
    __tablename__ = "device_connections"
    __table_args__ = (
        UniqueConstraint("initiator_user_id", "paired_user_id", name="uq_connection_pair"),
    )

    id: str = Field(default_factory=lambda: f"con_{secrets.token_hex(4)}", primary_key=True)
    initiator_user_id: str = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    paired_user_id: str = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    paired_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
