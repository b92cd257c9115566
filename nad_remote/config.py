"""Configuration loader for nad-remote."""

from __future__ import annotations

from configparser import ConfigParser
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from . import constants


@dataclass(slots=True)
class AmplifierConfig:
    url: str = constants.DEFAULT_AMPLIFIER_URL
    api_path: str = constants.DEFAULT_API_PATH


@dataclass(slots=True)
class SessionConfig:
    bootstrap_variables: List[str] = field(
        default_factory=lambda: list(constants.DEFAULT_BOOTSTRAP_VARIABLES)
    )


@dataclass(slots=True)
class LoggingConfig:
    level: str = "INFO"
    path: Optional[Path] = None
    log_network: bool = False


@dataclass(slots=True)
class RemoteConfig:
    amplifier: AmplifierConfig
    session: SessionConfig
    logging: LoggingConfig
    raw: ConfigParser
    path: Path


def _parse_list(value: str, *, default: Iterable[str]) -> List[str]:
    if not value:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


def load_config(path: Optional[Path] = None) -> RemoteConfig:
    """Load configuration from disk, applying defaults where necessary."""

    config_path = path or constants.DEFAULT_CONFIG_PATH
    parser = ConfigParser()
    parser.read_dict(
        {
            "amplifier": {
                "url": constants.DEFAULT_AMPLIFIER_URL,
                "api_path": constants.DEFAULT_API_PATH,
            },
            "session": {
                "bootstrap_variables": ",".join(constants.DEFAULT_BOOTSTRAP_VARIABLES),
            },
            "logging": {
                "level": "INFO",
                "path": "",
                "log_network": "false",
            },
        }
    )

    if config_path.exists():
        parser.read(config_path)

    amplifier = AmplifierConfig(
        url=parser.get("amplifier", "url"),
        api_path=parser.get("amplifier", "api_path", fallback=constants.DEFAULT_API_PATH)
        or constants.DEFAULT_API_PATH,
    )

    session = SessionConfig(
        bootstrap_variables=_parse_list(
            parser.get("session", "bootstrap_variables", fallback=""),
            default=constants.DEFAULT_BOOTSTRAP_VARIABLES,
        ),
    )

    log_path_value = parser.get("logging", "path", fallback="").strip()
    logging_config = LoggingConfig(
        level=parser.get("logging", "level", fallback="INFO"),
        path=Path(log_path_value).expanduser() if log_path_value else None,
        log_network=parser.getboolean("logging", "log_network", fallback=False),
    )

    return RemoteConfig(
        amplifier=amplifier,
        session=session,
        logging=logging_config,
        raw=parser,
        path=config_path,
    )


def save_config(config: RemoteConfig) -> None:
    """Persist the current configuration to disk."""

    config_path = config.path
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with config_path.open("w", encoding="utf-8") as stream:
        config.raw.write(stream)
