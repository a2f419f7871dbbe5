"""Code usage ledger: who pasted which pairing code, and when.

Rows keep the code string and the code owner denormalized, so a user's
pasted-code history stays readable after the code itself is redeemed.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from safelink.config import settings
from safelink.errors import ForbiddenError, NotFoundError
from safelink.models.usage import CodeUsage
from safelink.models.user import User
from safelink.services.pairing_service import find_code
from safelink.utils.codes import ensure_utc

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"
UNKNOWN_DEVICE = "Unknown Device"


def _device_name(session: Session, user_id: str | None) -> str | None:
    if not user_id:
        return None
    user = session.get(User, user_id)
    return user.device_name if user else None


def _existing_usage(session: Session, pairing_code_id: str, user_id: str) -> CodeUsage | None:
    return session.exec(
        select(CodeUsage).where(
            CodeUsage.pairing_code_id == pairing_code_id,
            CodeUsage.user_id == user_id,
        )
    ).first()


def _refresh(session: Session, usage: CodeUsage, device_id: str | None) -> None:
    usage.timestamp = datetime.now(timezone.utc)
    usage.device_id = device_id
    session.add(usage)
    session.commit()


def track_usage(session: Session, raw_code: str, user_id: str, device_id: str | None = None) -> str:
    """Record that ``user_id`` pasted ``raw_code``. Returns a status message.

    Re-pasting the same code refreshes the existing row instead of adding one.
    """
    pairing_code = find_code(session, raw_code, "Invalid code")
    if not session.get(User, user_id):
        raise NotFoundError("User not found")

    existing = _existing_usage(session, pairing_code.id, user_id)
    if existing:
        _refresh(session, existing, device_id)
        return "Code usage updated successfully"

    session.add(
        CodeUsage(
            pairing_code_id=pairing_code.id,
            code=pairing_code.code,
            user_id=user_id,
            device_id=device_id,
            code_owner_id=pairing_code.user_id,
        )
    )
    try:
        session.commit()
    except IntegrityError:
        # Lost a race with a concurrent first paste
        session.rollback()
        existing = _existing_usage(session, pairing_code.id, user_id)
        if not existing:
            raise
        _refresh(session, existing, device_id)
        return "Code usage updated successfully"

    logger.info("Tracked usage of code %s by %s", pairing_code.code, user_id)
    return "Code usage tracked successfully"


def list_pasted(session: Session, user_id: str, limit: int | None = None) -> list[dict]:
    """Codes pasted by ``user_id``, newest first."""
    rows = session.exec(
        select(CodeUsage)
        .where(CodeUsage.user_id == user_id)
        .order_by(col(CodeUsage.timestamp).desc())
        .limit(limit or settings.pasted_codes_limit)
    ).all()
    return [
        {
            "id": u.id,
            "code": u.code or UNKNOWN,
            "used_at": ensure_utc(u.timestamp),
            "owner_device": _device_name(session, u.code_owner_id) or UNKNOWN_DEVICE,
        }
        for u in rows
    ]


def _usage_for_code(session: Session, pairing_code_id: str) -> list[CodeUsage]:
    return list(
        session.exec(
            select(CodeUsage)
            .where(CodeUsage.pairing_code_id == pairing_code_id)
            .order_by(col(CodeUsage.timestamp).desc())
        ).all()
    )


def list_used_by(session: Session, raw_code: str) -> dict:
    """Everyone who pasted a live code. Open to anyone who knows the code."""
    pairing_code = find_code(session, raw_code, "Invalid code")
    users = [
        {
            "id": u.id,
            "device": _device_name(session, u.user_id) or UNKNOWN_DEVICE,
            "used_at": ensure_utc(u.timestamp),
        }
        for u in _usage_for_code(session, pairing_code.id)
    ]
    return {"code": pairing_code.code, "count": len(users), "users": users}


def list_usage_history(session: Session, raw_code: str, requester_id: str) -> dict:
    """Usage history of a code, visible to the code owner only."""
    pairing_code = find_code(session, raw_code, "Invalid code")
    if pairing_code.user_id != requester_id:
        raise ForbiddenError("Not authorized to view this code's usage")

    usage = [
        {
            "id": u.id,
            "user_id": u.user_id,
            "device_id": u.device_id,
            "timestamp": ensure_utc(u.timestamp),
            "device_name": _device_name(session, u.user_id) or UNKNOWN_DEVICE,
        }
        for u in _usage_for_code(session, pairing_code.id)
    ]
    return {"code": pairing_code.code, "usage_count": len(usage), "usage": usage}


def remove_usage_entry(session: Session, raw_code: str, usage_id: str, requester_id: str) -> None:
    """Delete one ledger row of a code. Owner only.

    A ``usage_id`` belonging to another code matches nothing and is a no-op.
    """
    pairing_code = find_code(session, raw_code, "Invalid code")
    if pairing_code.user_id != requester_id:
        raise ForbiddenError("Not authorized to remove users from this code")

    usage = session.exec(
        select(CodeUsage).where(
            CodeUsage.id == usage_id,
            CodeUsage.pairing_code_id == pairing_code.id,
        )
    ).first()
    if usage:
        session.delete(usage)
        session.commit()
        logger.info("Removed usage %s from code %s", usage_id, pairing_code.code)
