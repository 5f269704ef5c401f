"""
GraphVault CLI entry point.

Usage:
    graphvault import <format> [file] [--db PATH]
    graphvault export <format> <file> [--db PATH]
    graphvault stats [--db PATH]
    graphvault --help
    graphvault --version
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from graphvault_cli.commands import export_command, import_command, stats_command
from graphvault_core.codecs import supported_formats
from graphvault_core.config import GraphVaultSettings, get_config_summary
from graphvault_core.logging_service import LoggingService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="graphvault", description="Import and export labeled graphs via SQLite"
    )

    parser.add_argument("--version", action="version", version="%(prog)s 1.0.0")
    parser.add_argument("--db", type=Path, default=None, help="SQLite store path")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    parser.add_argument("--log-format", default=None, help="Log format: json or console")
    parser.add_argument(
        "--strict-edges",
        action="store_true",
        default=None,
        help="Reject edges that reference unknown node ids",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    formats = ", ".join(supported_formats())

    import_parser = subparsers.add_parser("import", help="Import a graph file into the store")
    import_parser.add_argument("format", help=f"Input format ({formats})")
    import_parser.add_argument(
        "file",
        type=Path,
        nargs="?",
        default=None,
        help="Input file; for csv, the base name of the _nodes/_edges pair",
    )

    export_parser = subparsers.add_parser("export", help="Export the stored graph to a file")
    export_parser.add_argument("format", help=f"Output format ({formats})")
    export_parser.add_argument(
        "file", type=Path, help="Output file; for csv, the base name of the _nodes/_edges pair"
    )

    subparsers.add_parser("stats", help="Show node and edge counts")

    return parser


def load_settings(args: argparse.Namespace) -> GraphVaultSettings:
    """Build settings from the environment with command line overrides."""
    overrides = {
        "database_path": args.db,
        "log_level": args.log_level,
        "log_format": args.log_format,
        "strict_edges": args.strict_edges,
    }
    return GraphVaultSettings(**{k: v for k, v in overrides.items() if v is not None})


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        settings = load_settings(args)
    except ValidationError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    if not LoggingService.is_configured():
        LoggingService.configure_logging(level=settings.log_level, format=settings.log_format)
    LoggingService.get_logger("graphvault.cli").debug(
        "settings_loaded", **get_config_summary(settings)
    )

    if args.command == "import":
        input_path = args.file or settings.default_input_file
        return asyncio.run(import_command(settings, args.format, input_path))
    if args.command == "export":
        return asyncio.run(export_command(settings, args.format, args.file))
    return asyncio.run(stats_command(settings))


if __name__ == "__main__":
    sys.exit(main())
