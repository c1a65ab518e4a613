# src/sofacheck/cli.py

import argparse
import importlib.metadata
import json
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from sofacheck import log_utils
from sofacheck.cache import FeedCache
from sofacheck.config import load_config
from sofacheck.constants import (
    APP_NAME,
    EXIT_ERROR,
    EXIT_NOT_COMPATIBLE,
    EXIT_PASS,
    EXIT_UNKNOWN,
    RESULT_COLUMNS,
)
from sofacheck.evaluator import Compatibility, EvaluationResult
from sofacheck.exceptions import ConfigurationError, HostFactsError
from sofacheck.host import detect_host_facts
from sofacheck.report import generate

console = Console()


def get_version() -> str:
    try:
        return importlib.metadata.version(APP_NAME)
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def exit_code_for(result: EvaluationResult) -> int:
    """
    Map a result row to a process exit code.

    Returns:
        int: 0 when compatible, 2 when incompatible or unsupported, 3 when the
        verdict is unknown because data was missing or malformed.
    """
    if result.is_compatible is Compatibility.COMPATIBLE:
        return EXIT_PASS
    if result.is_compatible is Compatibility.INCOMPATIBLE:
        return EXIT_NOT_COMPATIBLE
    return EXIT_UNKNOWN


def render_table(result: EvaluationResult) -> Table:
    table = Table(title="macOS compatibility")
    table.add_column("column", style="bold")
    table.add_column("value")
    row = result.as_row()
    for column in RESULT_COLUMNS:
        table.add_row(column, Text(str(row[column])))
    return table


def _run_check(args: argparse.Namespace) -> int:
    try:
        config = load_config(args.config)
        host = detect_host_facts(args.system_version, args.model)
    except (ConfigurationError, HostFactsError) as e:
        log_utils.logger.error(str(e))
        return EXIT_ERROR

    result = generate(host, config)

    if args.json:
        console.print_json(json.dumps(result.as_row()))
    else:
        console.print(render_table(result))
    return exit_code_for(result)


def _run_cache_clear(args: argparse.Namespace) -> int:
    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        log_utils.logger.error(str(e))
        return EXIT_ERROR

    cache = FeedCache(config.resolved_cache_dir)
    if cache.clear():
        console.print(f"Cleared SOFA feed cache in {escape(str(cache.cache_dir))}")
        return EXIT_PASS
    log_utils.logger.error(f"Failed to clear SOFA feed cache in {cache.cache_dir}")
    return EXIT_ERROR


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Path to a sofacheck.yaml configuration file",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="sofacheck - compare this Mac against the SOFA macOS feed",
    )
    parser.add_argument(
        "--log-level",
        metavar="LEVEL",
        help="Console log level (DEBUG, INFO, WARNING, ERROR)",
    )
    parser.add_argument(
        "--log-dir",
        metavar="DIR",
        type=Path,
        help="Also write a rotating log file to this directory",
    )
    subparsers = parser.add_subparsers(dest="command")

    check_parser = subparsers.add_parser(
        "check", help="Check whether this Mac runs the latest supported macOS"
    )
    _add_common_arguments(check_parser)
    check_parser.add_argument(
        "--system-version",
        metavar="VERSION",
        help="macOS version to evaluate instead of the running system's",
    )
    check_parser.add_argument(
        "--model",
        metavar="MODEL",
        help="Hardware model identifier to evaluate instead of this Mac's",
    )
    check_parser.add_argument(
        "--json", action="store_true", help="Print the result row as JSON"
    )

    cache_parser = subparsers.add_parser(
        "cache",
        help="Manage cached feed data",
        description="Manage the cached SOFA feed and its ETag.",
    )
    cache_subparsers = cache_parser.add_subparsers(dest="cache_command", required=True)
    clear_parser = cache_subparsers.add_parser(
        "clear", help="Remove the cached feed and ETag"
    )
    _add_common_arguments(clear_parser)

    subparsers.add_parser("version", help="Display sofacheck version")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point for the sofacheck command-line interface.

    Dispatches the check, cache and version subcommands; with no subcommand a
    check of the running system is performed.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.log_level:
        log_utils.set_log_level(args.log_level)
    if args.log_dir:
        log_utils.add_file_logging(args.log_dir, args.log_level or "INFO")

    if args.command is None:
        args = parser.parse_args(["check"])

    if args.command == "check":
        return _run_check(args)
    if args.command == "cache":
        return _run_cache_clear(args)
    if args.command == "version":
        console.print(f"sofacheck v{get_version()}")
        return EXIT_PASS

    parser.print_help()
    return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
