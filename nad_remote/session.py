"""Device session: the client-side view of the amplifier's state.

The session never changes its state ahead of the amplifier. Every mutation
happens after a reply has been received, using the variable named in the
reply. Exchanges are not sequenced, so when several commands are in flight
the reply that arrives last wins.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

import aiohttp

from . import codec, constants
from .adapters import AmplifierClient, AmplifierRequestError
from .codec import SemanticValue
from .config import RemoteConfig
from .core import AmplifierTransport, ListenerType
from .models import (
    Command,
    CommandValidationError,
    ErrorRecord,
    ExchangeRecord,
    Operator,
)

LOGGER = logging.getLogger(__name__)

__all__ = ["DeviceSession"]


class DeviceSession:
    """Holds amplifier state and mediates every exchange with the device."""

    def __init__(
        self,
        transport: AmplifierTransport,
        *,
        bootstrap_variables: Optional[Iterable[str]] = None,
    ) -> None:
        self._transport = transport
        self._bootstrap_variables = list(
            bootstrap_variables
            if bootstrap_variables is not None
            else constants.DEFAULT_BOOTSTRAP_VARIABLES
        )

        self._state: Dict[str, SemanticValue] = dict(constants.DEFAULT_STATE)
        self._error: Optional[ErrorRecord] = None
        self._exchange: Optional[ExchangeRecord] = None
        self._listeners: List[ListenerType] = []
        self._pending = 0

    @classmethod
    def from_config(
        cls,
        config: RemoteConfig,
        *,
        http_session: Optional[aiohttp.ClientSession] = None,
    ) -> "DeviceSession":
        client = AmplifierClient(config.amplifier, session=http_session)
        return cls(client, bootstrap_variables=config.session.bootstrap_variables)

    async def __aenter__(self) -> "DeviceSession":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------
    @property
    def state(self) -> Dict[str, SemanticValue]:
        """A copy of the confirmed device state."""
        return dict(self._state)

    @property
    def error(self) -> Optional[ErrorRecord]:
        return self._error

    @property
    def exchange(self) -> Optional[ExchangeRecord]:
        return self._exchange

    @property
    def pending(self) -> int:
        """Number of exchanges awaiting a reply."""
        return self._pending

    def get(self, variable: str, default: Optional[SemanticValue] = None) -> Optional[SemanticValue]:
        return self._state.get(variable, default)

    def add_listener(self, callback: ListenerType) -> None:
        """Register a callback invoked after every settled exchange."""

        if callback in self._listeners:
            raise ValueError("Listener already registered")
        self._listeners.append(callback)

    def remove_listener(self, callback: ListenerType) -> None:
        with contextlib.suppress(ValueError):
            self._listeners.remove(callback)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    async def bootstrap(self) -> None:
        """Read every tracked variable once, concurrently."""

        await asyncio.gather(
            *(self.fetch_variable(variable) for variable in self._bootstrap_variables)
        )

    async def fetch_variable(self, name: str) -> None:
        """Read ``name`` from the amplifier and store the reported value.

        A successful read does not clear a pending error. Failures are
        recorded on :attr:`error` and never raised.
        """

        self._pending += 1
        try:
            try:
                reply = _parse_reply(await self._transport.fetch_state(name))
            except AmplifierRequestError as exc:
                self._record_failure(f"read {name}", exc)
            else:
                self._apply(reply)
        finally:
            self._pending -= 1

        await self._notify()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    async def send_command(self, command: Command) -> Optional[ExchangeRecord]:
        """Send ``command`` and reconcile the reply into the session.

        Returns the new exchange record on success, ``None`` on failure. The
        failure itself is available on :attr:`error`.
        """

        request = command.encoded()
        LOGGER.debug("Sending %s", request)

        self._pending += 1
        try:
            try:
                reply = _parse_reply(await self._transport.send_command(request.to_payload()))
            except AmplifierRequestError as exc:
                self._record_failure(f"send {request}", exc)
                exchange = None
            else:
                self._apply(reply)
                self._error = None
                exchange = self._exchange = ExchangeRecord(request=request, reply=reply)
                LOGGER.info("sent %s, received %s", request, reply)
        finally:
            self._pending -= 1

        await self._notify()
        return exchange

    async def toggle_power(self) -> Optional[ExchangeRecord]:
        return await self._toggle("Power")

    async def toggle_mute(self) -> Optional[ExchangeRecord]:
        return await self._toggle("Mute")

    async def toggle_speaker_a(self) -> Optional[ExchangeRecord]:
        return await self._toggle("SpeakerA")

    async def set_source(self, name: str) -> Optional[ExchangeRecord]:
        return await self.send_command(Command("Source", Operator.SET, name))

    async def volume_step(self, direction: int) -> Optional[ExchangeRecord]:
        """Nudge the volume up for a positive ``direction``, down otherwise."""

        operator = Operator.INCREMENT if direction > 0 else Operator.DECREMENT
        return await self.send_command(Command("Volume", operator))

    async def query_model(self) -> Optional[ExchangeRecord]:
        return await self.send_command(Command("Model", Operator.QUERY))

    async def aclose(self) -> None:
        await self._transport.aclose()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    async def _toggle(self, variable: str) -> Optional[ExchangeRecord]:
        current = self._state.get(variable, False)
        return await self.send_command(Command(variable, Operator.SET, not current))

    def _apply(self, reply: Command) -> None:
        if reply.value is None:
            return
        self._state[reply.variable] = codec.decode(str(reply.value))

    def _record_failure(self, action: str, exc: AmplifierRequestError) -> None:
        LOGGER.warning("Failed to %s: %s", action, exc)
        self._error = ErrorRecord(status=exc.status, message=exc.message)

    async def _notify(self) -> None:
        for callback in list(self._listeners):
            try:
                result = callback(self)
                if asyncio.iscoroutine(result):
                    await result
            except Exception:
                LOGGER.exception("Session listener failed")


def _parse_reply(payload: Mapping[str, Any]) -> Command:
    try:
        return Command.from_reply(payload)
    except CommandValidationError as exc:
        raise AmplifierRequestError(0, f"Malformed reply from amplifier API: {exc}") from exc
