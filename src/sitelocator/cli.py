from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

import yaml
from rich.console import Console
from rich.markup import escape

from .config import CONFIG_FILENAME, load_config
from .errors import ConfigurationError
from .file_discovery import ContentFinder
from .logging_utils import configure_logging, render_fields_block
from .models import BuildStats
from .summary_table import SummaryTableRenderer
from .utils import load_yaml_file
from .validation import get_fix_suggestion, group_validation_issues, validate_config_data
from .version import __version__
from .writer import SiteWriter

LOGGER = logging.getLogger(__name__)

console = Console()


def _overrides(args: argparse.Namespace) -> dict[str, object]:
    # Command-line paths are relative to the working directory, not the config file.
    source = getattr(args, "source", None)
    return {
        "source": str(Path(source).expanduser().absolute()) if source else None,
        "destination": getattr(args, "destination", None),
    }


def run_scan(args: argparse.Namespace) -> int:
    config = load_config(args.config, _overrides(args))
    finder = ContentFinder(config)
    result = finder.discover_all()
    SummaryTableRenderer(console).render_discovery(result, show_files=not args.counts_only)
    return 0


def run_copy_assets(args: argparse.Namespace) -> int:
    config = load_config(args.config, _overrides(args))
    writer = SiteWriter(config)
    finder = ContentFinder(config)
    stats = BuildStats()
    if args.clean:
        stats.removed = len(writer.cleanup_destination())
    stats.assets = len(writer.copy_assets(finder.find_assets()))
    SummaryTableRenderer(console).render_stats(stats)
    return 0


def run_clean(args: argparse.Namespace) -> int:
    config = load_config(args.config, _overrides(args))
    writer = SiteWriter(config)
    if not args.yes:
        console.print(
            f"[yellow]Refusing to clean {writer.destination_dir} without --yes[/yellow]",
        )
        return 1
    removed = writer.cleanup_destination()
    console.print(f"[green]Removed {len(removed)} entries from {writer.destination_dir}[/green]")
    return 0


def run_validate_config(args: argparse.Namespace) -> int:
    config_path: Path = args.config
    if config_path.is_dir():
        config_path = config_path / CONFIG_FILENAME
    if not config_path.exists():
        console.print(f"[red]Configuration file not found:[/red] {config_path}")
        return 1

    try:
        data = load_yaml_file(config_path)
    except (OSError, yaml.YAMLError) as exc:
        console.print(f"[red]Failed to parse YAML:[/red] {escape(str(exc))}")
        return 1

    report = validate_config_data(data)
    if report.is_valid and not report.warnings:
        console.print(f"[green]Configuration valid:[/green] {config_path}")
        return 0

    for section, issues in group_validation_issues(report).items():
        console.print(f"[bold]{section}[/bold]")
        for issue in issues:
            color = "red" if issue.severity == "error" else "yellow"
            console.print(f"  [{color}]{issue.severity}[/{color}] {escape(issue.path)}: {escape(issue.message)}")
            suggestion = issue.fix_suggestion or get_fix_suggestion(issue)
            if suggestion and not args.no_suggestions:
                console.print(f"    [dim]hint: {escape(suggestion)}[/dim]")

    return 0 if report.is_valid else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sitelocator",
        description="Discover static-site content and manage the build destination.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("config.yml"),
        help="Path to config.yml or the site directory (default: ./config.yml)",
    )
    parser.add_argument("--source", help="Override the source directory")
    parser.add_argument("--destination", help="Override the destination directory")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", type=Path, help="Also write logs to this file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    scan = subparsers.add_parser("scan", help="List posts, pages, layouts and assets")
    scan.add_argument("--counts-only", action="store_true", help="Only print the per-kind counts")
    scan.set_defaults(handler=run_scan)

    copy_assets = subparsers.add_parser("copy-assets", help="Copy passthrough assets to the destination")
    copy_assets.add_argument("--clean", action="store_true", help="Clean the destination first")
    copy_assets.set_defaults(handler=run_copy_assets)

    clean = subparsers.add_parser("clean", help="Remove everything inside the destination directory")
    clean.add_argument("--yes", action="store_true", help="Confirm the destination may be emptied")
    clean.set_defaults(handler=run_clean)

    validate = subparsers.add_parser("validate-config", help="Validate config.yml")
    validate.add_argument("--no-suggestions", action="store_true", help="Hide fix suggestions")
    validate.set_defaults(handler=run_validate_config)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, log_file=args.log_file)

    try:
        return args.handler(args)
    except ConfigurationError as exc:
        LOGGER.error(render_fields_block("Configuration Error", {"Error": exc, "Path": exc.path}))
        return 2
    except OSError as exc:
        LOGGER.error(render_fields_block("Filesystem Error", {"Error": exc, "Path": exc.filename}))
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
