"""Command-line interface for nad-remote."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from . import constants
from .config import RemoteConfig, load_config, save_config
from .console import render_error, render_session, render_state
from .logging import configure_logging
from .models import Command, CommandValidationError
from .session import DeviceSession

LOGGER = logging.getLogger(__name__)

_TOGGLES = {
    "power": DeviceSession.toggle_power,
    "mute": DeviceSession.toggle_mute,
    "speaker-a": DeviceSession.toggle_speaker_a,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=constants.APP_NAME, description="Remote control for NAD amplifiers"
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=constants.DEFAULT_CONFIG_PATH,
        help=f"Path to configuration file (default: {constants.DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--url", help="Amplifier API base URL, overriding the configuration file"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("state", help="Read and print the amplifier state")

    send_parser = subparsers.add_parser(
        "send", help="Send a raw command, e.g. Main.Power=On or Volume+"
    )
    send_parser.add_argument("raw", metavar="COMMAND")

    subparsers.add_parser("power", help="Toggle power")
    subparsers.add_parser("mute", help="Toggle mute")
    subparsers.add_parser("speaker-a", help="Toggle speaker A (headphones)")

    source_parser = subparsers.add_parser("source", help="Select the input source")
    source_parser.add_argument(
        "name",
        help=f"Source name, one of {', '.join(constants.KNOWN_SOURCES)}",
    )

    volume_parser = subparsers.add_parser("volume", help="Step the volume")
    volume_parser.add_argument("direction", choices=["up", "down"])

    subparsers.add_parser("model", help="Query the amplifier model")

    subparsers.add_parser(
        "show-config", help="Print the resolved configuration and exit"
    )
    subparsers.add_parser(
        "save-config",
        help="Write the resolved configuration, including --url, to the config file",
    )

    return parser


async def run_command(args: argparse.Namespace, session: DeviceSession) -> int:
    """Execute a parsed subcommand against ``session`` and print the outcome."""

    if args.command == "state":
        await session.bootstrap()
        print(render_state(session))
        if session.error is not None:
            print(render_error(session.error))
            return 1
        return 0

    if args.command in _TOGGLES:
        await session.bootstrap()
        await _TOGGLES[args.command](session)
    elif args.command == "send":
        await session.send_command(Command.parse(args.raw))
    elif args.command == "source":
        name = args.name.upper()
        if name not in constants.KNOWN_SOURCES:
            LOGGER.warning("Unknown source %r, sending anyway", args.name)
        await session.set_source(name)
    elif args.command == "volume":
        await session.volume_step(1 if args.direction == "up" else -1)
    elif args.command == "model":
        await session.query_model()
    else:
        LOGGER.error("Unknown command: %s", args.command)
        return 1

    print(render_session(session))
    return 1 if session.error is not None else 0


async def _run(args: argparse.Namespace, config: RemoteConfig) -> int:
    async with DeviceSession.from_config(config) as session:
        return await run_command(args, session)


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)
    if args.url:
        config.amplifier.url = args.url
        config.raw.set("amplifier", "url", args.url)

    configure_logging(
        config.logging.level,
        log_path=config.logging.path,
        log_network=config.logging.log_network,
    )

    if args.command == "show-config":
        print(f"Configuration loaded from {config.path!s}\n")
        for section in config.raw.sections():
            print(f"[{section}]")
            for key, value in config.raw[section].items():
                print(f"{key} = {value}")
            print()
        return 0

    if args.command == "save-config":
        save_config(config)
        LOGGER.info("Configuration written to %s", config.path)
        return 0

    if args.command == "send":
        try:
            Command.parse(args.raw)
        except CommandValidationError as exc:
            LOGGER.error("%s", exc)
            return 2

    return asyncio.run(_run(args, config))


if __name__ == "__main__":
    sys.exit(main())
