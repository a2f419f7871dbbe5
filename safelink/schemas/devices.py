"""Paired device schemas."""

from pydantic import Field

from safelink.schemas.common import CamelModel


class PairedDeviceResponse(CamelModel):
    id: str
    device_name: str
    device_id: str


class DisconnectRequest(CamelModel):
    user_id: str = Field(min_length=1)
    paired_user_id: str = Field(min_length=1)
