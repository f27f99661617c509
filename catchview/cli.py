"""Command line entry point for catchview"""

import argparse
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console

from catchview import __version__
from catchview.utils.config import ConfigManager
from catchview.utils.errors import CatchViewError
from catchview.utils.logging import get_logger, init_logging

logger = get_logger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"not a number: {value}") from e
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return number


def setup_argument_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""

    parser = argparse.ArgumentParser(
        prog="catchview",
        description="Terminal viewer for a captured-email inbox",
    )
    parser.add_argument(
        "--url",
        help="Base URL of the mail backend (default: from config, http://localhost:8025)"
    )
    parser.add_argument(
        "--interval",
        type=_positive_float,
        help="Seconds between inbox refreshes (default: from config, 10)"
    )
    parser.add_argument(
        "--timeout",
        type=_positive_float,
        help="Request timeout in seconds (default: no timeout)"
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Log file verbosity"
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to the configuration file (default: ~/.catchview/config.json)"
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help="Persist the given options to the configuration file"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    return parser


def apply_overrides(manager: ConfigManager, args: argparse.Namespace) -> None:
    """Apply command line options on top of the loaded configuration."""

    overrides = {
        "server.base_url": args.url,
        "server.timeout": args.timeout,
        "viewer.poll_interval": args.interval,
        "logging.log_level": args.log_level,
    }
    for key_path, value in overrides.items():
        if value is not None:
            manager.set_config(key_path, value, persist=False)

    if args.save:
        manager.save()
        logger.info(f"Saved options to {manager.path}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code
    """
    console = Console(stderr=True)
    parser = setup_argument_parser()
    args = parser.parse_args(argv)

    try:
        manager = ConfigManager(args.config)
        apply_overrides(manager, args)
    except CatchViewError as e:
        logger.error(f"Configuration error: {e.message}")
        console.print(f"[red]Configuration error: {e.message}[/red]")
        return 1

    config = manager.config
    init_logging(
        config.logging.log_level,
        console=False,
        max_file_size=config.logging.max_file_size,
        backup_count=config.logging.backup_count,
    )

    from catchview.tui.app import CatchViewApp

    try:
        CatchViewApp(config).run()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        return 130

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
