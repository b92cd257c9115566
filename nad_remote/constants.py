"""Constants used across the nad-remote package."""

from __future__ import annotations

from pathlib import Path

APP_NAME = "nad-remote"
DEFAULT_CONFIG_FILENAME = f"{APP_NAME}.cfg"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / APP_NAME / DEFAULT_CONFIG_FILENAME

DEFAULT_AMPLIFIER_URL = "http://localhost:8080"
DEFAULT_API_PATH = "/api/v1/nad"

COMMAND_PREFIX = "Main."

DEFAULT_STATE = {"Power": False, "Mute": False, "SpeakerA": True}
DEFAULT_BOOTSTRAP_VARIABLES = ["Power", "Mute", "Source", "SpeakerA"]

KNOWN_SOURCES = ["CD", "TUNER", "VIDEO", "DISC/MDC", "TAPE2", "AUX"]

CONSOLE_GREETING = "These go to eleven!"
