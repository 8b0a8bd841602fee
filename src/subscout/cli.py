from __future__ import annotations

import argparse
import logging
import os
import sys
import threading
from pathlib import Path
from typing import Sequence

import yaml
from rich.console import Console
from rich.table import Table

from .catalog import ConfiguredCatalog
from .config import AppConfig, ConfigStore, load_config
from .logging_utils import configure_logging
from .models import ScanReport
from .scanner import Scanner
from .utils import env_bool
from .validation import format_issue, validate_config_file
from .version import __version__
from .watcher import LibraryWatcher

LOGGER = logging.getLogger(__name__)
CONSOLE = Console()

DEFAULT_CONFIG_PATH = Path("subscout.yaml")
EXIT_OK = 0
EXIT_INVALID = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="subscout",
        description="Find subtitles near your videos and place them next to the video.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        type=Path,
        default=Path(os.environ.get("SUBSCOUT_CONFIG", DEFAULT_CONFIG_PATH)),
        help="Path to the YAML configuration (default: $SUBSCOUT_CONFIG or ./subscout.yaml)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-level", default=None, help="Console log level (DEBUG, INFO, WARNING, ...)")
    parser.add_argument("--log-file", type=Path, default=None, help="Also write logs to this file")

    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Run one subtitle scan with the current configuration")
    run_parser.add_argument("--dry-run", action="store_true", help="Report matches without touching files")

    subparsers.add_parser("validate-config", help="Validate the configuration file")
    subparsers.add_parser("watch", help="Watch library folders and scan after changes settle")
    return parser


def _setup_logging(args: argparse.Namespace) -> None:
    level = "DEBUG" if getattr(args, "verbose", False) else (getattr(args, "log_level", None) or "INFO")
    configure_logging(level, log_file=getattr(args, "log_file", None))


def _load_config(path: Path) -> AppConfig | None:
    try:
        return load_config(path)
    except FileNotFoundError:
        CONSOLE.print(f"[red]Configuration file not found:[/red] {path}")
    except (OSError, ValueError, yaml.YAMLError) as exc:
        CONSOLE.print(f"[red]Unable to load configuration {path}:[/red] {exc}")
    return None


def render_report(report: ScanReport) -> Table:
    table = Table(title="Subtitle Scan" + (" (cancelled)" if report.cancelled else ""))
    table.add_column("Metric")
    table.add_column("Count", justify="right")
    for key, value in report.as_dict().items():
        table.add_row(key, str(value))
    return table


def run_scan(args: argparse.Namespace) -> int:
    _setup_logging(args)
    config = _load_config(args.config)
    if config is None:
        return EXIT_CONFIG_ERROR

    dry_run = bool(getattr(args, "dry_run", False) or env_bool("SUBSCOUT_DRY_RUN") or config.settings.dry_run)
    store = ConfigStore(args.config)
    scanner = Scanner(ConfiguredCatalog(store), store)
    report = scanner.run(dry_run=dry_run)
    CONSOLE.print(render_report(report))
    return EXIT_OK


def run_validate_config(args: argparse.Namespace) -> int:
    path: Path = args.config
    if not path.exists():
        CONSOLE.print(f"[red]Configuration file not found:[/red] {path}")
        return EXIT_CONFIG_ERROR

    report = validate_config_file(path)
    for issue in report.errors + report.warnings:
        CONSOLE.print(format_issue(issue), markup=False)

    if report.is_valid:
        CONSOLE.print(f"[green]Configuration passed validation[/green] ({len(report.warnings)} warning(s))")
        return EXIT_OK
    CONSOLE.print(f"[red]Validation Errors:[/red] {len(report.errors)}")
    return EXIT_INVALID


def run_watch(args: argparse.Namespace, stop_event: threading.Event | None = None) -> int:
    _setup_logging(args)
    config = _load_config(args.config)
    if config is None:
        return EXIT_CONFIG_ERROR
    if not config.settings.file_watcher.enabled:
        CONSOLE.print("[yellow]File watcher is disabled.[/yellow] Set settings.file_watcher.enabled to true.")
        return EXIT_INVALID

    store = ConfigStore(args.config)
    scanner = Scanner(ConfiguredCatalog(store), store)
    watcher = LibraryWatcher(scanner, config)
    try:
        watcher.run_forever(stop_event)
    except KeyboardInterrupt:
        LOGGER.info("Filesystem watcher interrupted; shutting down.")
    return EXIT_OK


COMMANDS = {
    "run": run_scan,
    "validate-config": run_validate_config,
    "watch": run_watch,
}


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        args.command = "run"
        args.dry_run = False
    return COMMANDS[args.command](args)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
