"""Pairing code request/response schemas."""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, Field

from safelink.schemas.common import CamelModel


class GenerateCodeRequest(CamelModel):
    owner_id: str = Field(min_length=1, validation_alias=AliasChoices("ownerId", "userId", "owner_id"))
    latitude: Optional[float] = Field(default=None, validation_alias=AliasChoices("lat", "latitude"))
    longitude: Optional[float] = Field(default=None, validation_alias=AliasChoices("lon", "longitude"))
    accuracy: Optional[float] = Field(default=None, gt=0)
    device_name: Optional[str] = None


class GenerateCodeResponse(CamelModel):
    code: str


class ValidateCodeRequest(CamelModel):
    code: str = Field(min_length=1)
    initiator_user_id: str = Field(min_length=1)


class LocationUpdateRequest(CamelModel):
    latitude: float = Field(validation_alias=AliasChoices("lat", "latitude"))
    longitude: float = Field(validation_alias=AliasChoices("lon", "longitude"))
    accuracy: Optional[float] = Field(default=None, gt=0)


class LocationUpdateResponse(CamelModel):
    message: str
    code: str


class LocationResponse(CamelModel):
    code: str
    lat: float
    lon: float
    accuracy: Optional[float]
    device_name: Optional[str]
    created_at: datetime
