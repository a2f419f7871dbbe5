"""User profile request/response schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from safelink.schemas.common import CamelModel


class UserResponse(CamelModel):
    id: str
    device_id: str
    device_name: str
    full_name: Optional[str] = None
    emergency_contact1_name: Optional[str] = None
    emergency_contact1_phone: Optional[str] = None
    emergency_contact2_name: Optional[str] = None
    emergency_contact2_phone: Optional[str] = None
    birthday: Optional[str] = None
    address: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class UserGetOrCreateRequest(CamelModel):
    device_id: str = Field(min_length=1)
    device_name: str = Field(min_length=1)
    expo_push_token: Optional[str] = None
    full_name: Optional[str] = None
    emergency_contact1_name: Optional[str] = None
    emergency_contact1_phone: Optional[str] = None
    emergency_contact2_name: Optional[str] = None
    emergency_contact2_phone: Optional[str] = None
    birthday: Optional[str] = None
    address: Optional[str] = None


class EmergencyContactsUpdateRequest(CamelModel):
    emergency_contact1_name: Optional[str] = None
    emergency_contact1_phone: Optional[str] = None
    emergency_contact2_name: Optional[str] = None
    emergency_contact2_phone: Optional[str] = None


class ProfileUpdateRequest(EmergencyContactsUpdateRequest):
    full_name: Optional[str] = None
    birthday: Optional[str] = None
    address: Optional[str] = None
    device_name: Optional[str] = None


class UserUpdateResponse(CamelModel):
    message: str
    user: UserResponse


class FcmTokenUpdateRequest(CamelModel):
    device_id: str = Field(min_length=1)
    fcm_token: str = Field(min_length=1)


class PingRequest(CamelModel):
    from_user_id: str = Field(min_length=1)
    to_user_id: str = Field(min_length=1)
