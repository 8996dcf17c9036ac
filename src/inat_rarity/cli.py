"""
Command-line interface for the application.

This module provides the main entry point for the CLI.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from inat_rarity import __version__
from inat_rarity.config import Settings, get_settings
from inat_rarity.errors import ConfigurationError
from inat_rarity.flows.render import render_report
from inat_rarity.flows.report import rarity_report


def _add_target_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("username", help="iNaturalist login")
    parser.add_argument(
        "output_dir",
        nargs="?",
        type=Path,
        default=None,
        help="Directory for the cache, CSV tables and report (default: output_dir setting)",
    )


def _add_report_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--sleep",
        type=float,
        default=None,
        help="Seconds between API requests; increase if you hit 429s (default: 0.25)",
    )
    parser.add_argument(
        "--max-pages",
        type=int,
        default=None,
        help="Pages of 10 observations scanned per taxon for other observers (default: 8)",
    )
    parser.add_argument(
        "--batch",
        type=int,
        default=None,
        help="Taxon ids per count request; lower it on 414 errors (default: 200)",
    )
    parser.add_argument(
        "--top",
        type=int,
        default=None,
        help="Rows per ranking (default: 20)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="inat-rarity",
        description="Rarity reports for an iNaturalist observer",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    report_parser = subparsers.add_parser("report", help="Build the ranked CSV tables")
    _add_target_arguments(report_parser)
    _add_report_arguments(report_parser)

    render_parser = subparsers.add_parser("render", help="Render the HTML report from the tables")
    _add_target_arguments(render_parser)
    render_parser.add_argument(
        "--sleep",
        type=float,
        default=None,
        help="Seconds between API requests (default: 0.1)",
    )

    run_parser = subparsers.add_parser("run", help="Build the tables, then render the report")
    _add_target_arguments(run_parser)
    _add_report_arguments(run_parser)

    subparsers.add_parser("info", help="Show application info")

    return parser


def _pick(value: float | int | None, default: float | int) -> float | int:
    return default if value is None else value


def _output_dir(args: argparse.Namespace, settings: Settings) -> Path:
    return args.output_dir if args.output_dir is not None else settings.output_dir


def _run_report(args: argparse.Namespace, settings: Settings) -> None:
    result = rarity_report(
        args.username,
        _output_dir(args, settings),
        min_delay=_pick(args.sleep, settings.min_delay),
        max_pages=_pick(args.max_pages, settings.max_pages),
        batch_size=_pick(args.batch, settings.batch_size),
        top_n=_pick(args.top, settings.top_n),
    )
    print(f"Scanned {result['scanned']} taxa ({result['cached']} already cached).")


def cmd_report(args: argparse.Namespace) -> int:
    """Handle the 'report' command."""
    settings = get_settings()
    try:
        _run_report(args, settings)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


def cmd_render(args: argparse.Namespace) -> int:
    """Handle the 'render' command."""
    settings = get_settings()
    try:
        render_report(
            args.username,
            _output_dir(args, settings),
            min_delay=_pick(args.sleep, settings.render_min_delay),
        )
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    """Handle the 'run' command: build tables, then render the report."""
    settings = get_settings()
    try:
        _run_report(args, settings)
        render_report(
            args.username,
            _output_dir(args, settings),
            min_delay=settings.render_min_delay,
        )
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Debug: {settings.debug}")
    print(f"Output dir: {settings.output_dir}")
    print(
        f"Requests: min_delay={settings.min_delay}s "
        f"max_retries={settings.max_retries} backoff={settings.backoff_base}-{settings.backoff_max}s"
    )
    print(
        f"Scan: max_pages={settings.max_pages} batch_size={settings.batch_size} "
        f"top_n={settings.top_n}"
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    debug = args.debug or get_settings().debug
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "report": cmd_report,
        "render": cmd_render,
        "run": cmd_run,
        "info": cmd_info,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
