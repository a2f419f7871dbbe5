"""System status API endpoints."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, func, select

from safelink.config import settings
from safelink.database import get_session
from safelink.models.user import User
from safelink.services.notification_service import notification_worker

router = APIRouter(tags=["system"])


@router.get("/health")
def health():
    """Lightweight health check."""
    return {"status": "ok", "message": "Backend is running"}


@router.get("/system/db-check")
def db_check(session: Session = Depends(get_session)):
    """Check that the database answers queries."""
    try:
        user_count = session.exec(select(func.count()).select_from(User)).one()
    except SQLAlchemyError as e:
        return JSONResponse(status_code=500, content={"connected": False, "error": str(e)})

    return {
        "connected": True,
        "message": "Successfully connected to the database",
        "userCount": user_count,
        "database": str(settings.db_path),
        "pushWorker": "running" if notification_worker.running else "stopped",
    }
