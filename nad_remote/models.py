"""Domain models for amplifier commands and exchanges."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from . import codec
from .codec import SemanticValue
from .constants import COMMAND_PREFIX

__all__ = [
    "Command",
    "CommandValidationError",
    "ErrorRecord",
    "ExchangeRecord",
    "Operator",
]


class CommandValidationError(ValueError):
    """Raised when a command cannot be constructed or parsed."""


class Operator:
    """Operators understood by the amplifier control protocol."""

    SET = "="
    INCREMENT = "+"
    DECREMENT = "-"
    QUERY = "?"

    ALL = (SET, INCREMENT, DECREMENT, QUERY)


@dataclass(slots=True, frozen=True)
class Command:
    """A single request to, or reply from, the amplifier.

    ``value`` is present exactly when ``operator`` is ``=``. It holds a
    semantic value (``bool`` or ``str``) until :meth:`encoded` converts it
    to the wire form.
    """

    variable: str
    operator: str
    value: Optional[SemanticValue] = None

    def __post_init__(self) -> None:
        if not self.variable:
            raise CommandValidationError("Command variable must not be empty")
        if self.operator not in Operator.ALL:
            raise CommandValidationError(f"Unknown operator: {self.operator!r}")
        if (self.value is not None) != (self.operator == Operator.SET):
            raise CommandValidationError(
                f"Operator {self.operator!r} "
                + ("requires a value" if self.operator == Operator.SET else "takes no value")
            )
        if self.value is not None and not isinstance(self.value, (bool, str)):
            raise CommandValidationError(
                f"Unsupported value type: {type(self.value).__name__}"
            )

    @classmethod
    def parse(cls, text: str) -> "Command":
        """Parse a command string such as ``Main.Power=On`` or ``Volume+``."""

        body = text.strip()
        if body.startswith(COMMAND_PREFIX):
            body = body[len(COMMAND_PREFIX) :]

        position = next(
            (index for index, char in enumerate(body) if char in Operator.ALL), -1
        )
        if position <= 0:
            raise CommandValidationError(f"Invalid command: {text!r}")

        variable = body[:position]
        operator = body[position]
        remainder = body[position + 1 :]

        if operator == Operator.SET:
            if not remainder:
                raise CommandValidationError(f"Invalid command: {text!r}")
            return cls(variable, operator, remainder)
        if remainder:
            raise CommandValidationError(f"Invalid command: {text!r}")
        return cls(variable, operator)

    @classmethod
    def from_reply(cls, payload: Mapping[str, Any]) -> "Command":
        """Build a command from a ``{"Variable", "Value"}`` reply body."""

        variable = payload.get("Variable")
        if not isinstance(variable, str) or not variable:
            raise CommandValidationError("Reply is missing 'Variable'")

        value = payload.get("Value")
        if value is None:
            return cls(variable, Operator.QUERY)
        if isinstance(value, bool):
            value = codec.encode(value)
        return cls(variable, Operator.SET, str(value))

    def encoded(self) -> "Command":
        """Return a copy whose value is in wire form."""

        if self.value is None:
            return self
        return Command(self.variable, self.operator, codec.encode(self.value))

    def to_payload(self) -> Dict[str, str]:
        payload = {"Variable": self.variable, "Operator": self.operator}
        if self.value is not None:
            payload["Value"] = codec.encode(self.value)
        return payload

    def format(self) -> str:
        """Render the command the way the amplifier's serial protocol spells it."""

        text = f"{COMMAND_PREFIX}{self.variable}{self.operator}"
        if self.value is not None:
            text += codec.encode(self.value)
        return text

    def __str__(self) -> str:
        return self.format()


@dataclass(slots=True, frozen=True)
class ExchangeRecord:
    """The last request sent and the reply it produced."""

    request: Command
    reply: Command


@dataclass(slots=True, frozen=True)
class ErrorRecord:
    """The most recent failure reported by the amplifier endpoint."""

    status: int
    message: str
