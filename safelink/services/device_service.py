"""Paired-device graph.

Connections are stored as directed rows, but pairing is symmetric: a user
is paired with everyone appearing on the other end of a row in either
column.
"""

import logging

from sqlmodel import Session, col, or_, and_, select

from safelink.models.connection import DeviceConnection
from safelink.models.user import User

logger = logging.getLogger(__name__)


def _connections_of(session: Session, user_id: str) -> list[DeviceConnection]:
    return list(
        session.exec(
            select(DeviceConnection)
            .where(
                or_(
                    DeviceConnection.initiator_user_id == user_id,
                    DeviceConnection.paired_user_id == user_id,
                )
            )
            .order_by(col(DeviceConnection.paired_at).desc())
        ).all()
    )


def list_paired(session: Session, user_id: str) -> list[dict]:
    """Distinct peers of ``user_id``, most recently paired first."""
    peers: list[dict] = []
    seen: set[str] = set()
    for conn in _connections_of(session, user_id):
        peer_id = conn.paired_user_id if conn.initiator_user_id == user_id else conn.initiator_user_id
        if peer_id in seen:
            continue
        seen.add(peer_id)
        peer = session.get(User, peer_id)
        if not peer:
            continue
        peers.append({"id": peer.id, "device_name": peer.device_name, "device_id": peer.device_id})
    return peers


def disconnect(session: Session, user_id: str, peer_id: str) -> int:
    """Remove the pairing in both directions. Returns the number of rows deleted."""
    rows = session.exec(
        select(DeviceConnection).where(
            or_(
                and_(
                    DeviceConnection.initiator_user_id == user_id,
                    DeviceConnection.paired_user_id == peer_id,
                ),
                and_(
                    DeviceConnection.initiator_user_id == peer_id,
                    DeviceConnection.paired_user_id == user_id,
                ),
            )
        )
    ).all()
    for row in rows:
        session.delete(row)
    session.commit()
    logger.info("Disconnected %s and %s (%d rows)", user_id, peer_id, len(rows))
    return len(rows)
