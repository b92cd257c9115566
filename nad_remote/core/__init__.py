"""Core primitives for nad-remote."""

from .protocols import AmplifierTransport, ListenerType

__all__ = [
    "AmplifierTransport",
    "ListenerType",
]
