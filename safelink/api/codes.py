"""Code usage tracking API endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from safelink.database import get_session
from safelink.schemas.common import MessageResponse
from safelink.schemas.usage import (
    PastedCodesResponse,
    RemoveUsageRequest,
    TrackUsageRequest,
    UsageHistoryResponse,
    WhoUsedResponse,
)
from safelink.services import usage_service

router = APIRouter(tags=["codes"])


@router.post("/codes/{code}/track-usage", response_model=MessageResponse)
def track_usage(code: str, request: TrackUsageRequest, session: Session = Depends(get_session)):
    """Record that a user pasted a code."""
    message = usage_service.track_usage(session, code, request.user_id, request.device_id)
    return MessageResponse(message=message)


@router.get("/users/{user_id}/pasted-codes", response_model=PastedCodesResponse)
def pasted_codes(user_id: str, session: Session = Depends(get_session)):
    codes = usage_service.list_pasted(session, user_id)
    return PastedCodesResponse(count=len(codes), codes=codes)


@router.get("/codes/{code}/who-used", response_model=WhoUsedResponse)
def who_used(code: str, session: Session = Depends(get_session)):
    return WhoUsedResponse(**usage_service.list_used_by(session, code))


@router.get("/codes/{code}/usage-history", response_model=UsageHistoryResponse)
def usage_history(
    code: str,
    user_id: str = Query(alias="userId", min_length=1),
    session: Session = Depends(get_session),
):
    """Usage history for the code owner."""
    return UsageHistoryResponse(**usage_service.list_usage_history(session, code, user_id))


@router.delete("/codes/{code}/usage/{usage_id}", response_model=MessageResponse)
def remove_usage(
    code: str,
    usage_id: str,
    request: RemoveUsageRequest,
    session: Session = Depends(get_session),
):
    """Remove a user from a code's ledger (owner only)."""
    usage_service.remove_usage_entry(session, code, usage_id, request.user_id)
    return MessageResponse(message="User removed successfully")
