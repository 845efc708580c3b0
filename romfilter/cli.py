#!/usr/bin/env python3
"""
cli.py - Entry point for romfilter
List a file index, pick one release per title, download the picks.
"""

try:
    import asyncio
    import sys
    import argparse
    import time
    from pathlib import Path
    from rich.console import Console
    from rich.markup import escape
    from rich.table import Table
    from rich.text import Text
    from typing import Optional, Sequence
    from .__version__ import __version__
    from . import logger
    from .config import FilterOptions, RomfilterConfig, load_config
    from .download.downloader import RomDownloader
    from .listing.client import IndexClient
    from .errors import FetchError, ParseError
    from .selection.types import ReleaseRecord
except ImportError as e:
    print(f"Error: Missing required dependency: {e}")
    print("Please install required dependencies: pip install -e .")
    sys.exit(1)

console = Console()
_CLI_SESSION_START_MONOTONIC = time.monotonic()


def _ui_info(message: str) -> None:
    console.print(f"[cyan][INFO][/cyan] {message}")


def _ui_warn(message: str) -> None:
    console.print(f"[yellow][WARNING][/yellow] {message}")


def _ui_error(message: str) -> None:
    console.print(f"[red][ERROR][/red] {message}")


def _reset_cli_session_timer() -> None:
    global _CLI_SESSION_START_MONOTONIC
    _CLI_SESSION_START_MONOTONIC = time.monotonic()


def _format_elapsed_runtime(seconds: float) -> str:
    if seconds < 60:
        return f"{seconds:.1f}s"
    if seconds < 3_600:
        return f"{seconds / 60:.1f}m"
    return f"{seconds / 3_600:.1f}h"


def _ui_goodbye_with_elapsed() -> None:
    elapsed = max(0.0, time.monotonic() - _CLI_SESSION_START_MONOTONIC)
    _ui_info(f"Goodbye! Elapsed {_format_elapsed_runtime(elapsed)}")


def apply_filter_overrides(options: FilterOptions, args: argparse.Namespace) -> FilterOptions:
    """Layer command-line filter flags over the configured filter options."""
    updates: dict = {}
    if args.region:
        updates["region"] = args.region
        updates["region_limit"] = True
    if args.no_region_limit:
        updates["region_limit"] = False
    if args.no_smart_filters:
        updates["smart_filters"] = False
    if args.exclude:
        updates["exclude_patterns"] = [*options.exclude_patterns, *args.exclude]
    if args.all_revisions:
        updates["latest_revision"] = False
    return options.model_copy(update=updates)


def render_roms_table(system: str, records: Sequence[ReleaseRecord]) -> Table:
    table = Table(title=f"{escape(system)} ({len(records):,} selected)")
    table.add_column("#", style="grey50", justify="right")
    table.add_column("Title", style="cyan")
    table.add_column("Rev", style="green", justify="right")
    table.add_column("File", style="yellow")
    for idx, record in enumerate(records, start=1):
        revision = record.revision
        table.add_row(
            str(idx),
            Text(record.canonical_title),
            "-" if revision is None else str(revision),
            Text(record.filename),
        )
    return table


async def run_list_dirs(config: RomfilterConfig, subdir: Optional[str]) -> list[str]:
    async with IndexClient(config.listing, config.filters) as client:
        dirs = await client.list_directories(subdir)
    _ui_info("Available directories:")
    for name in dirs:
        console.print(f"  - {name}", markup=False)
    return dirs


async def run_select(
    config: RomfilterConfig,
    system: str,
    subdir: str,
    *,
    download: bool,
    output_dir: Path,
) -> bool:
    async with IndexClient(config.listing, config.filters) as client:
        records = await client.list_roms(system, subdir)
    console.print(render_roms_table(system, records))
    if not download:
        return True
    if not records:
        _ui_warn("Nothing to download.")
        return True

    async with RomDownloader(config.download, config.listing) as downloader:
        report = await downloader.download_all(records, output_dir)
    for filename, reason in report.failed:
        _ui_error(escape(f"{filename}: {reason}"))
    return report.ok


def resolve_config_path(args_config: Optional[str]) -> Optional[Path]:
    if args_config:
        p = Path(args_config).expanduser()
        if p.is_dir():
            p = p / "config.toml"
        return p

    cwd_candidate = Path.cwd() / "config.toml"
    if cwd_candidate.exists():
        return cwd_candidate
    return None


def show_help(parser: argparse.ArgumentParser) -> None:
    print(f"romfilter v{__version__} - One release per title from a file index")
    print()
    parser.print_help()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="romfilter", add_help=False)
    for args, kwargs in (
        (("-h", "--help"), {"action": "store_true", "help": "Show help"}),
        (("-c", "--config"), {"metavar": "PATH", "help": "Path to config.toml (file or directory)"}),
        (("--list-dirs",), {"nargs": "?", "const": "", "metavar": "SUBDIR", "help": "List directories (index root when SUBDIR is omitted)"}),
        (("--subdir",), {"metavar": "SUBDIR", "help": "Collection directory holding the system (default from config)"}),
        (("--download",), {"action": "store_true", "help": "Download the selected files"}),
        (("-o", "--output"), {"metavar": "DIR", "help": "Download directory (default from config)"}),
        (("--region",), {"metavar": "REGION", "help": "Accepted region tag, e.g. USA or Europe"}),
        (("--no-region-limit",), {"action": "store_true", "help": "Accept every region"}),
        (("--no-smart-filters",), {"action": "store_true", "help": "Keep betas, prototypes, demos and similar"}),
        (("--exclude",), {"action": "append", "metavar": "PATTERN", "help": "Reject tags containing PATTERN (repeatable)"}),
        (("--all-revisions",), {"action": "store_true", "help": "Keep every revision instead of the latest"}),
        (("-d", "--debug"), {"action": "store_true", "help": "Debug output with HTTP requests and skip reasons"}),
        (("--log-file",), {"metavar": "PATH", "help": "Also write plain-text output to PATH"}),
    ):
        parser.add_argument(*args, **kwargs)
    parser.add_argument("system", nargs="?", help="System directory name, e.g. 'Nintendo - Game Boy'")
    return parser


def main(argv: Optional[Sequence[str]] = None):
    """Entry point"""
    _reset_cli_session_timer()
    parser = build_parser()

    try:
        args = parser.parse_args(argv)
        if args.help or (args.list_dirs is None and not args.system):
            show_help(parser)
            sys.exit(0)

        config = load_config(resolve_config_path(args.config))
        config = config.model_copy(update={"filters": apply_filter_overrides(config.filters, args)})
        log_file = Path(args.log_file).expanduser() if args.log_file else None
        logger.set_logger(logger.RomfilterLogger(log_file=log_file, debug=args.debug))

        try:
            if args.list_dirs is not None:
                asyncio.run(run_list_dirs(config, args.list_dirs or None))
            ok = True
            if args.system:
                subdir = args.subdir or config.listing.subdir
                output_dir = Path(args.output).expanduser() if args.output else config.download.output_dir
                ok = asyncio.run(
                    run_select(
                        config,
                        args.system,
                        subdir,
                        download=args.download,
                        output_dir=output_dir,
                    )
                )
        finally:
            logger.get_logger().close()
        sys.exit(0 if ok else 1)
    except KeyboardInterrupt:
        _ui_goodbye_with_elapsed()
        sys.exit(0)
    except (FetchError, ParseError) as e:
        _ui_error(escape(str(e)))
        sys.exit(1)
    except Exception as e:
        _ui_error(escape(f"Fatal error: {e}"))
        sys.exit(1)


if __name__ == "__main__":
    main()
