"""Paired device API endpoints."""

from fastapi import APIRouter, Depends
from sqlmodel import Session

from safelink.database import get_session
from safelink.schemas.common import MessageResponse
from safelink.schemas.devices import DisconnectRequest, PairedDeviceResponse
from safelink.services import device_service

router = APIRouter(prefix="/devices", tags=["devices"])


@router.get("/paired/{user_id}", response_model=list[PairedDeviceResponse])
def list_paired_devices(user_id: str, session: Session = Depends(get_session)):
    """List every device paired with the user, whichever side initiated."""
    return [PairedDeviceResponse(**peer) for peer in device_service.list_paired(session, user_id)]


@router.delete("/disconnect", response_model=MessageResponse)
def disconnect_device(request: DisconnectRequest, session: Session = Depends(get_session)):
    device_service.disconnect(session, request.user_id, request.paired_user_id)
    return MessageResponse(message="Device disconnected successfully")
