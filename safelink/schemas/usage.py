"""Code usage ledger schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from safelink.schemas.common import CamelModel


class TrackUsageRequest(CamelModel):
    user_id: str = Field(min_length=1)
    device_id: Optional[str] = None


class RemoveUsageRequest(CamelModel):
    user_id: str = Field(min_length=1)


class PastedCode(CamelModel):
    id: str
    code: str
    used_at: datetime
    owner_device: str


class PastedCodesResponse(CamelModel):
    count: int
    codes: list[PastedCode]


class CodeUser(CamelModel):
    id: str
    device: str
    used_at: datetime


class WhoUsedResponse(CamelModel):
    code: str
    count: int
    users: list[CodeUser]


class UsageEntry(CamelModel):
    id: str
    user_id: str
    device_id: Optional[str]
    timestamp: datetime
    device_name: str


class UsageHistoryResponse(CamelModel):
    code: str
    usage_count: int
    usage: list[UsageEntry]
