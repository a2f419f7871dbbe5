"""SafeLink Database Models."""

from safelink.models.user import User
from safelink.models.pairing import PairingCode
from safelink.models.connection import DeviceConnection
from safelink.models.usage import CodeUsage
from safelink.models.ping import Ping

__all__ = [
    "User",
    "PairingCode",
    "DeviceConnection",
    "CodeUsage",
    "Ping",
]
