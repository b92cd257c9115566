"""Translation between amplifier wire values and in-memory values.

The amplifier reports toggles as the literal strings ``"On"`` and ``"Off"``.
Detection is by value rather than by variable name, so a string-valued
variable that happens to read ``"On"`` is surfaced as a boolean as well.
"""

from __future__ import annotations

from typing import Union

SemanticValue = Union[bool, str]

WIRE_ON = "On"
WIRE_OFF = "Off"


def decode(wire_value: str) -> SemanticValue:
    """Convert a wire value into its semantic form."""

    if wire_value == WIRE_ON:
        return True
    if wire_value == WIRE_OFF:
        return False
    return wire_value


def encode(value: SemanticValue) -> str:
    """Convert a semantic value into the string sent to the amplifier."""

    if isinstance(value, bool):
        return WIRE_ON if value else WIRE_OFF
    return value
