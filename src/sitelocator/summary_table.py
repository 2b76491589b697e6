from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.table import Table

from .models import BuildStats, ContentKind, DiscoveryResult, FileRecord

# Color constants for status indicators
SUCCESS_COLOR = "green"
WARNING_COLOR = "yellow"
ERROR_COLOR = "red"
DIM_COLOR = "dim"

KIND_COLORS = {
    ContentKind.POST: "cyan",
    ContentKind.PAGE: "green",
    ContentKind.LAYOUT: "magenta",
    ContentKind.ASSET: "blue",
}


class SummaryTableRenderer:
    """Renders discovery results and build statistics as Rich tables."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    @staticmethod
    def _colorize_count(value: int, *, is_error: bool = False) -> str:
        if value == 0:
            color = DIM_COLOR
        elif is_error:
            color = ERROR_COLOR
        else:
            color = SUCCESS_COLOR
        return f"[{color}]{value}[/{color}]"

    @staticmethod
    def _kind_label(kind: ContentKind) -> str:
        color = KIND_COLORS[kind]
        return f"[{color}]{kind.value}[/{color}]"

    def build_records_table(self, result: DiscoveryResult, *, title: str = "Discovered Content") -> Table:
        table = Table(title=title, show_lines=False)
        table.add_column("Kind", no_wrap=True)
        table.add_column("Relative Path")
        table.add_column("Source", overflow="fold")

        rows: list[FileRecord] = [*result.posts, *result.pages, *result.layouts.values(), *result.assets]
        for record in rows:
            if record.is_dir:
                continue
            table.add_row(self._kind_label(record.kind), record.relative_pathname, str(record.source_path))
        return table

    def build_counts_table(self, result: DiscoveryResult) -> Table:
        table = Table(title="Content Summary")
        table.add_column("Kind")
        table.add_column("Files", justify="right")
        for kind, count in result.counts().items():
            table.add_row(self._kind_label(kind), self._colorize_count(count))
        return table

    def build_stats_table(self, stats: BuildStats) -> Table:
        table = Table(title="Build Summary")
        table.add_column("Metric")
        table.add_column("Count", justify="right")
        table.add_row("Posts saved", self._colorize_count(stats.posts))
        table.add_row("Pages saved", self._colorize_count(stats.pages))
        table.add_row("Layouts", self._colorize_count(stats.layouts))
        table.add_row("Assets copied", self._colorize_count(stats.assets))
        table.add_row("Removed", self._colorize_count(stats.removed))
        table.add_row("Errors", self._colorize_count(len(stats.errors), is_error=True))
        return table

    def render_discovery(self, result: DiscoveryResult, *, show_files: bool = True) -> None:
        if show_files:
            self.console.print(self.build_records_table(result))
        self.console.print(self.build_counts_table(result))

    def render_stats(self, stats: BuildStats) -> None:
        self.console.print(self.build_stats_table(stats))
