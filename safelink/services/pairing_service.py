"""Pairing code lifecycle: generate -> validate (redeem) | expire.

Expiry is evaluated lazily. An expired code stays in the table until a
validate attempt rejects it or ``purge_expired`` removes it; either way it
is never redeemable.
"""

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from safelink.config import settings
from safelink.errors import (
    ConflictError,
    ExpiredCodeError,
    InvalidCodeError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from safelink.models.connection import DeviceConnection
from safelink.models.pairing import PairingCode
from safelink.models.user import User
from safelink.utils.codes import ensure_utc, generate_code, is_expired, normalize_code

logger = logging.getLogger(__name__)


def find_code(session: Session, raw_code: str, message: str = "Invalid pairing code") -> PairingCode:
    """Look up a live code row by user input, raising InvalidCodeError if absent."""
    code = normalize_code(raw_code)
    pairing_code = session.exec(select(PairingCode).where(PairingCode.code == code)).first()
    if not pairing_code:
        raise InvalidCodeError(message)
    return pairing_code


def generate(
    session: Session,
    owner_id: str,
    latitude: float | None = None,
    longitude: float | None = None,
    accuracy: float | None = None,
    device_name: str | None = None,
) -> PairingCode:
    """Create a new pairing code for ``owner_id``.

    Earlier codes of the same owner stay live. A collision with an existing
    code is retried with a fresh one up to ``pairing_code_max_attempts`` times.
    """
    owner = session.get(User, owner_id)
    if not owner:
        raise NotFoundError("User not found")

    if device_name:
        owner.device_name = device_name
        session.add(owner)
        session.commit()

    for attempt in range(1, settings.pairing_code_max_attempts + 1):
        now = datetime.now(timezone.utc)
        pairing_code = PairingCode(
            user_id=owner_id,
            created_at=now,
            expires_at=now + timedelta(hours=settings.pairing_code_ttl_hours),
            code=generate_code(settings.pairing_code_length),
            latitude=latitude,
            longitude=longitude,
            accuracy=accuracy,
        )
        session.add(pairing_code)
        try:
            session.commit()
        except IntegrityError:
            session.rollback()
            logger.warning("Pairing code collision on attempt %d, retrying", attempt)
            continue
        session.refresh(pairing_code)
        logger.info("Generated pairing code %s for user %s", pairing_code.code, owner_id)
        return pairing_code

    raise ConflictError("Could not generate a unique pairing code")


def validate(session: Session, raw_code: str, initiator_user_id: str) -> User:
    """Redeem a code: connect initiator -> owner, delete the code, return the owner.

    The connection is written before the code is deleted; if the connection
    insert fails the code stays redeemable.

    A device cannot redeem its own code: that is rejected with a
    ValidationError and the code stays live, so no self edge is ever stored.
    """
    pairing_code = find_code(session, raw_code, "Invalid or expired pairing code")

    if is_expired(pairing_code.expires_at):
        logger.warning("Rejected expired pairing code %s", pairing_code.code)
        raise ExpiredCodeError("Pairing code has expired")

    owner = session.get(User, pairing_code.user_id)
    if not owner:
        raise NotFoundError("User not found")

    if owner.id == initiator_user_id:
        raise ValidationError("Cannot pair a device with itself")

    if not session.get(User, initiator_user_id):
        raise NotFoundError("Initiator user not found")

    code = pairing_code.code
    _connect(session, initiator_user_id, owner.id)

    session.delete(pairing_code)
    session.commit()
    session.refresh(owner)
    logger.info("Pairing code %s redeemed: %s -> %s", code, initiator_user_id, owner.id)
    return owner


def _connect(session: Session, initiator_user_id: str, paired_user_id: str) -> None:
    """Insert the directed connection row; an identical existing row counts as success."""
    session.add(DeviceConnection(initiator_user_id=initiator_user_id, paired_user_id=paired_user_id))
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        existing = session.exec(
            select(DeviceConnection).where(
                DeviceConnection.initiator_user_id == initiator_user_id,
                DeviceConnection.paired_user_id == paired_user_id,
            )
        ).first()
        if not existing:
            raise UpstreamError(str(e.orig)) from e
        logger.info("Devices %s and %s already connected", initiator_user_id, paired_user_id)


def update_location(
    session: Session,
    raw_code: str,
    latitude: float,
    longitude: float,
    accuracy: float | None = None,
) -> PairingCode:
    """Refresh the location snapshot attached to a code. Expiry is not checked."""
    pairing_code = find_code(session, raw_code)
    pairing_code.latitude = latitude
    pairing_code.longitude = longitude
    pairing_code.accuracy = accuracy
    pairing_code.updated_at = datetime.now(timezone.utc)
    session.add(pairing_code)
    session.commit()
    session.refresh(pairing_code)
    return pairing_code


def get_location(session: Session, raw_code: str) -> dict:
    pairing_code = find_code(session, raw_code)
    if pairing_code.latitude is None or pairing_code.longitude is None:
        raise ValidationError("Location data not available for this code")

    owner = session.get(User, pairing_code.user_id)
    return {
        "code": pairing_code.code,
        "lat": pairing_code.latitude,
        "lon": pairing_code.longitude,
        "accuracy": pairing_code.accuracy,
        "device_name": owner.device_name if owner else None,
        "created_at": ensure_utc(pairing_code.created_at),
    }


def purge_expired(session: Session, now: datetime | None = None) -> int:
    """Delete codes past their expiry. Returns the number of rows removed."""
    now = now or datetime.now(timezone.utc)
    expired = session.exec(
        select(PairingCode).where(col(PairingCode.expires_at) < now)
    ).all()
    for pairing_code in expired:
        session.delete(pairing_code)
    session.commit()
    if expired:
        logger.info("Purged %d expired pairing codes", len(expired))
    return len(expired)
