"""Plain-text rendering of the session's audit console and error banner."""

from __future__ import annotations

from typing import List, Optional

from .constants import CONSOLE_GREETING
from .models import ErrorRecord, ExchangeRecord
from .session import DeviceSession


def render_exchange(exchange: Optional[ExchangeRecord]) -> str:
    if exchange is None:
        return CONSOLE_GREETING
    return "\n".join(
        [
            f"sent:     {exchange.request.format()}",
            f"received: {exchange.reply.format()}",
        ]
    )


def render_error(error: Optional[ErrorRecord]) -> str:
    """Return the error banner text, or an empty string when no error is pending."""

    if error is None:
        return ""
    return f"Error! {error.message} ({error.status})"


def render_state(session: DeviceSession) -> str:
    lines: List[str] = []
    for variable, value in sorted(session.state.items()):
        lines.append(f"{variable} = {value}")
    return "\n".join(lines)


def render_session(session: DeviceSession) -> str:
    """Error banner (if any) followed by the audit console."""

    parts = [render_error(session.error), render_exchange(session.exchange)]
    return "\n".join(part for part in parts if part)
