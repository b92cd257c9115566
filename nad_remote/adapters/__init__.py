"""Adapter modules for external integrations."""

from .amplifier import AmplifierClient, AmplifierRequestError

__all__ = [
    "AmplifierClient",
    "AmplifierRequestError",
]
