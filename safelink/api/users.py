"""User profile API endpoints."""

from fastapi import APIRouter, Depends
from sqlmodel import Session

from safelink.database import get_session
from safelink.schemas.common import MessageResponse
from safelink.schemas.user import (
    EmergencyContactsUpdateRequest,
    PingRequest,
    ProfileUpdateRequest,
    FcmTokenUpdateRequest,
    UserGetOrCreateRequest,
    UserResponse,
    UserUpdateResponse,
)
from safelink.services import user_service

router = APIRouter(tags=["users"])


@router.post("/users/get-or-create", response_model=UserResponse)
def get_or_create_user(request: UserGetOrCreateRequest, session: Session = Depends(get_session)):
    """Register a device on first contact, or merge updated fields into its user."""
    profile = request.model_dump(exclude={"device_id", "device_name", "expo_push_token"})
    user = user_service.get_or_create(
        session,
        device_id=request.device_id,
        device_name=request.device_name,
        expo_push_token=request.expo_push_token,
        **profile,
    )
    return UserResponse.model_validate(user)


@router.post("/users/update-fcm-token", response_model=MessageResponse)
def update_fcm_token(request: FcmTokenUpdateRequest, session: Session = Depends(get_session)):
    user_service.update_fcm_token(session, request.device_id, request.fcm_token)
    return MessageResponse(message="FCM token updated successfully")


@router.get("/users/{user_id}", response_model=UserResponse)
def get_user(user_id: str, session: Session = Depends(get_session)):
    return UserResponse.model_validate(user_service.get_user(session, user_id))


@router.post("/users/{user_id}/update-emergency-contacts", response_model=UserUpdateResponse)
def update_emergency_contacts(
    user_id: str,
    request: EmergencyContactsUpdateRequest,
    session: Session = Depends(get_session),
):
    user = user_service.update_user(session, user_id, request.model_dump())
    return UserUpdateResponse(
        message="Emergency contacts updated successfully",
        user=UserResponse.model_validate(user),
    )


@router.patch("/users/{user_id}/update-profile", response_model=UserUpdateResponse)
def update_profile(
    user_id: str,
    request: ProfileUpdateRequest,
    session: Session = Depends(get_session),
):
    user = user_service.update_user(session, user_id, request.model_dump())
    return UserUpdateResponse(
        message="Profile updated successfully",
        user=UserResponse.model_validate(user),
    )


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(user_id: str, session: Session = Depends(get_session)):
    """Delete a user along with their codes and connections."""
    user_service.delete_user(session, user_id)
    return MessageResponse(message="User profile deleted successfully")


@router.post("/pings/send", response_model=MessageResponse)
def send_ping(request: PingRequest, session: Session = Depends(get_session)):
    user_service.send_ping(session, request.from_user_id, request.to_user_id)
    return MessageResponse(message="Ping sent successfully")
