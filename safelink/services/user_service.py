"""User directory: device registration and profile updates."""

import logging

from sqlmodel import Session, select

from safelink.errors import NotFoundError, ValidationError
from safelink.models.ping import Ping
from safelink.models.user import User

logger = logging.getLogger(__name__)

PROFILE_FIELDS = (
    "device_name",
    "full_name",
    "emergency_contact1_name",
    "emergency_contact1_phone",
    "emergency_contact2_name",
    "emergency_contact2_phone",
    "birthday",
    "address",
)


def get_user(session: Session, user_id: str) -> User:
    user = session.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def _apply(user: User, fields: dict) -> bool:
    """Copy non-empty values onto the user. Returns True if anything changed."""
    changed = False
    for name, value in fields.items():
        if value and getattr(user, name) != value:
            setattr(user, name, value)
            changed = True
    return changed


def get_or_create(
    session: Session,
    device_id: str,
    device_name: str,
    expo_push_token: str | None = None,
    **profile,
) -> User:
    """Find the user for a device, merging any supplied fields, or register it."""
    fields = {"device_name": device_name, "expo_push_token": expo_push_token}
    fields.update({k: v for k, v in profile.items() if k in PROFILE_FIELDS})

    user = session.exec(select(User).where(User.device_id == device_id)).first()
    if user:
        if _apply(user, fields):
            session.add(user)
            session.commit()
            session.refresh(user)
        return user

    user = User(device_id=device_id, **{k: v or None for k, v in fields.items()})
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info("Registered user %s for device %s", user.id, device_id)
    return user


def update_user(session: Session, user_id: str, fields: dict) -> User:
    """Merge-if-present update. At least one non-empty field is required."""
    fields = {k: v for k, v in fields.items() if k in PROFILE_FIELDS and v}
    if not fields:
        raise ValidationError("No fields to update")

    user = get_user(session, user_id)
    _apply(user, fields)
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info("Profile updated for user %s", user_id)
    return user


def delete_user(session: Session, user_id: str) -> None:
    """Delete a user. Codes, connections, pings and pasted-code rows cascade."""
    user = get_user(session, user_id)
    session.delete(user)
    session.commit()
    logger.info("User deleted: %s", user_id)


def update_fcm_token(session: Session, device_id: str, token: str) -> User:
    """Store the device's FCM registration token. The Expo token is left untouched."""
    user = session.exec(select(User).where(User.device_id == device_id)).first()
    if not user:
        raise NotFoundError("User not found")
    user.fcm_token = token
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def send_ping(session: Session, from_user_id: str, to_user_id: str) -> Ping:
    for user_id in (from_user_id, to_user_id):
        get_user(session, user_id)
    ping = Ping(from_user_id=from_user_id, to_user_id=to_user_id)
    session.add(ping)
    session.commit()
    session.refresh(ping)
    return ping
