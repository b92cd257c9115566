"""Protocol definitions for amplifier transports and session listeners."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Awaitable, Callable, Mapping, Protocol

if TYPE_CHECKING:
    from ..session import DeviceSession


ListenerType = Callable[["DeviceSession"], Awaitable[None] | None]


class AmplifierTransport(Protocol):
    """Minimal contract for components that talk to the amplifier endpoint."""

    async def fetch_state(self, variable: str) -> Mapping[str, Any]:
        """Read the current value of ``variable``.

        Returns:
            The reply body, ``{"Variable": ..., "Value": ...}``.

        Raises:
            AmplifierRequestError: If the request fails.
        """
        ...

    async def send_command(self, payload: Mapping[str, str]) -> Mapping[str, Any]:
        """Submit a command body and return the reply body.

        Raises:
            AmplifierRequestError: If the request fails.
        """
        ...

    async def aclose(self) -> None:
        """Close any underlying resources."""
        ...
