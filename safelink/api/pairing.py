"""Pairing code API endpoints."""

from fastapi import APIRouter, Depends
from sqlmodel import Session

from safelink.database import get_session
from safelink.schemas.pairing import (
    GenerateCodeRequest,
    GenerateCodeResponse,
    LocationResponse,
    LocationUpdateRequest,
    LocationUpdateResponse,
    ValidateCodeRequest,
)
from safelink.schemas.user import UserResponse
from safelink.services import pairing_service

router = APIRouter(prefix="/pairing", tags=["pairing"])


@router.post("/generate", response_model=GenerateCodeResponse)
def generate_code(request: GenerateCodeRequest, session: Session = Depends(get_session)):
    """Generate a pairing code, optionally with the station's location."""
    pairing_code = pairing_service.generate(
        session,
        owner_id=request.owner_id,
        latitude=request.latitude,
        longitude=request.longitude,
        accuracy=request.accuracy,
        device_name=request.device_name,
    )
    return GenerateCodeResponse(code=pairing_code.code)


@router.post("/validate", response_model=UserResponse)
def validate_code(request: ValidateCodeRequest, session: Session = Depends(get_session)):
    """Redeem a code and pair with its owner. Returns the owner's profile."""
    owner = pairing_service.validate(session, request.code, request.initiator_user_id)
    return UserResponse.model_validate(owner)


@router.get("/location/{code}", response_model=LocationResponse)
def get_location(code: str, session: Session = Depends(get_session)):
    return LocationResponse(**pairing_service.get_location(session, code))


@router.post("/update-location/{code}", response_model=LocationUpdateResponse)
def update_location(
    code: str,
    request: LocationUpdateRequest,
    session: Session = Depends(get_session),
):
    """Periodic location refresh from the station device."""
    pairing_code = pairing_service.update_location(
        session, code, request.latitude, request.longitude, request.accuracy
    )
    return LocationUpdateResponse(message="Location updated successfully", code=pairing_code.code)
