"""Demo entrypoint. Loads config, registers printing listeners, emits once."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from event_listener import __version__
from event_listener.config import Config, cfg, load_config_with_env
from event_listener.core.constants import DEFAULT_SETTINGS
from event_listener.core.errors import (
    EventListenerConfigurationError,
    InvalidListenerError,
    MaxListenersExceeded,
)
from event_listener.emitter import EventListener

DEFAULT_CONFIG = Path("config.yaml")


def setup_logging(verbose: bool = False) -> None:
    """Configure loguru. Replace default logging."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "INFO",
        format=(
            "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
            "<cyan>{name}</cyan> | {message}"
        ),
    )


def reload_config(config_path: Path) -> Config:
    """Load config from path and update global cfg."""
    data = load_config_with_env(config_path, DEFAULT_SETTINGS)
    cfg.reload(data)
    return cfg


def print_event(event_name: str, payload: Any) -> None:
    print(f"Emitted: {event_name} {payload!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="event_listener",
        description="Register listeners for an event and emit it once",
    )
    parser.add_argument("event", help="Event name to emit")
    parser.add_argument("payload", nargs="?", default=None, help="Payload passed to listeners")
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help=f"Path to config file (default: {DEFAULT_CONFIG} if present)",
    )
    parser.add_argument(
        "--repeat",
        "-n",
        type=int,
        default=1,
        help="Number of listeners to register (default: 1)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entrypoint. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    setup_logging(args.verbose)

    config_path = args.config
    if config_path is not None and not config_path.exists():
        logger.error("Config file not found: {}", config_path)
        return 1

    try:
        config = reload_config(config_path or DEFAULT_CONFIG)
    except (EventListenerConfigurationError, yaml.YAMLError) as exc:
        logger.error("Invalid config: {}", exc)
        return 1
    emitter = EventListener.from_config(config)
    logger.debug("Created {}", emitter)

    try:
        for _ in range(max(args.repeat, 0)):
            emitter.on(args.event, print_event)
    except (InvalidListenerError, MaxListenersExceeded) as exc:
        logger.error("Registration rejected: {}", exc)
        return 1

    count = emitter.emit(args.event, args.payload)
    logger.info("'{}' delivered to {} listeners", args.event, count)
    return 0


if __name__ == "__main__":
    sys.exit(main())
