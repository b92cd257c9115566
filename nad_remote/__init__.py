"""Remote control client for NAD amplifiers."""

from .codec import decode, encode
from .models import Command, ErrorRecord, ExchangeRecord
from .session import DeviceSession

__all__ = [
    "Command",
    "DeviceSession",
    "ErrorRecord",
    "ExchangeRecord",
    "decode",
    "encode",
]
