"""Main entry point for project-clean."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from . import __version__
from .cleaner import Clean, CleanReport
from .config import CONFIG_FILENAME, CleanFileConfig, ConfigError, Mode
from .definitions import discover_definitions

LOGGER_NAME = "project_clean"
COMMANDS = ("run", "scan", "definitions", "init")
_GLOBAL_FLAGS = frozenset({"--verbose", "-v", "--quiet", "-q"})


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Arguments to parse. Uses ``sys.argv`` if None.

    Returns:
        Parsed arguments.

    """
    parser = argparse.ArgumentParser(
        prog="project-clean",
        description="Remove build artifacts from project trees",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", "-v", action="store_true", help="Show debug output")
    verbosity.add_argument("--quiet", "-q", action="store_true", help="Only show warnings and errors")
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write a debug log to this file",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Run command (default)
    run_parser = subparsers.add_parser("run", help="Clean a project tree")
    _add_clean_arguments(run_parser)
    run_parser.add_argument(
        "--readonly",
        "-n",
        action="store_true",
        help="Only report what would be deleted",
    )

    # Scan command
    scan_parser = subparsers.add_parser("scan", help="Report what would be cleaned without deleting")
    _add_clean_arguments(scan_parser)

    # Definitions command
    subparsers.add_parser("definitions", help="List cleaning definitions")

    # Init command
    init_parser = subparsers.add_parser("init", help=f"Create a {CONFIG_FILENAME} file")
    init_parser.add_argument("path", nargs="?", type=Path, default=Path.cwd(), help="Project directory")
    init_parser.add_argument(
        "--delete",
        "-d",
        action="append",
        dest="deletes",
        default=None,
        metavar="GLOB",
        help="Glob pattern to delete (repeatable, default: target)",
    )

    return parser.parse_args(_with_default_command(sys.argv[1:] if argv is None else argv))


def _with_default_command(argv: list[str]) -> list[str]:
    """Insert the ``run`` command when no command is given after the global options."""
    argv = list(argv)
    index = 0
    while index < len(argv):
        arg = argv[index]
        if arg in _GLOBAL_FLAGS or arg.startswith("--log-file="):
            index += 1
        elif arg == "--log-file":
            index += 2
        elif arg in COMMANDS or arg in ("-h", "--help", "--version"):
            return argv
        else:
            break
    argv.insert(min(index, len(argv)), "run")
    return argv


def _add_clean_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("path", nargs="?", type=Path, default=Path.cwd(), help="Directory to clean")
    parser.add_argument(
        "--recursive",
        "-r",
        action="store_true",
        help="Clean every subdirectory too",
    )
    parser.add_argument(
        "--skip",
        action="append",
        default=[],
        metavar="NAME",
        help="Skip a cleaning definition by name (repeatable)",
    )


def setup_logging(level: int, log_file: Path | None = None) -> logging.Logger:
    """Set up logging for the application.

    Args:
        level: Console log level.
        log_file: Optional file receiving a debug log.

    Returns:
        Configured logger instance.

    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if log_file else level)

    # Clear existing handlers to avoid duplicates if called twice
    if logger.handlers:
        logger.handlers.clear()

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
    )
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(message)s"))
        logger.addHandler(file_handler)

    return logger


def _print_report(console: Console, report: CleanReport, mode: Mode) -> None:
    if not report.matches:
        console.print(f"[green]Nothing to clean in {escape(str(report.root))}[/green]")
    else:
        table = Table(title=f"Matched {len(report.matches)} cleaning definitions")
        table.add_column("Definition", style="cyan")
        table.add_column("Directory", style="dim")
        for match in report.matches:
            table.add_row(escape(match.name), escape(str(match.directory)))
        console.print(table)

    stats = report.stats
    if mode.readonly:
        console.print(
            f"Visited {report.directories_visited} directories, "
            f"[yellow]{stats.would_delete} paths could be deleted[/yellow]"
        )
    else:
        console.print(
            f"Visited {report.directories_visited} directories, "
            f"[green]{stats.deleted} deleted[/green], [red]{stats.failed} failed[/red]"
        )


def cmd_clean(args: argparse.Namespace, *, readonly: bool = False) -> int:
    """Execute run and scan commands.

    Args:
        args: Parsed arguments.
        readonly: Force read-only mode.

    Returns:
        Exit code.

    """
    console = Console()

    if not args.path.is_dir():
        console.print(f"[red]Not a directory: {escape(str(args.path))}[/red]")
        return 2

    mode = Mode.from_args(args)
    if readonly and not mode.readonly:
        mode = Mode(readonly=True, recursive=mode.recursive)

    registry = discover_definitions(disabled=args.skip)
    report = Clean(args.path.resolve(), mode, registry).run()

    _print_report(console, report, mode)
    return 0


def cmd_definitions(args: argparse.Namespace) -> int:
    """Execute definitions command."""
    console = Console()
    registry = discover_definitions()

    table = Table(title="Cleaning definitions")
    table.add_column("#", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Deletes", style="green")

    for position, definition in enumerate(registry, start=1):
        deletes = getattr(definition, "deletes", None)
        table.add_row(
            str(position),
            definition.name,
            ", ".join(deletes) if deletes else "from project config",
        )

    console.print(table)
    return 0


def cmd_init(args: argparse.Namespace) -> int:
    """Execute init command.

    Args:
        args: Parsed arguments.

    Returns:
        Exit code.

    """
    console = Console()

    if not args.path.is_dir():
        console.print(f"[red]Not a directory: {escape(str(args.path))}[/red]")
        return 2

    config_path = CleanFileConfig.find(args.path)

    if config_path.exists():
        try:
            existing = CleanFileConfig.load(config_path)
        except ConfigError as e:
            console.print(f"[red]Existing config is invalid: {escape(str(e))}[/red]")
            return 1
        console.print(
            f"[yellow]Config already exists: {escape(str(config_path))} ({len(existing.deletes)} globs)[/yellow]"
        )
        return 1

    config = CleanFileConfig(deletes=tuple(args.deletes or ["target"]))
    try:
        config.save(config_path)
    except OSError as e:
        console.print(f"[red]Unable to write {escape(str(config_path))}: {escape(str(e))}[/red]")
        return 1
    console.print(f"[green]Created config: {escape(str(config_path))}[/green]")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code.

    """
    args = parse_args(argv)

    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    setup_logging(level, args.log_file)

    if args.command == "scan":
        return cmd_clean(args, readonly=True)
    elif args.command == "definitions":
        return cmd_definitions(args)
    elif args.command == "init":
        return cmd_init(args)
    return cmd_clean(args)


if __name__ == "__main__":
    sys.exit(main())
