from __future__ import annotations

import io
from pathlib import Path

from rich.console import Console

from sitelocator.models import BuildStats, ContentKind, DiscoveryResult, FileRecord
from sitelocator.summary_table import DIM_COLOR, ERROR_COLOR, SUCCESS_COLOR, SummaryTableRenderer


def _console() -> tuple[Console, io.StringIO]:
    stream = io.StringIO()
    return Console(file=stream, width=160, force_terminal=False, color_system=None), stream


def _result() -> DiscoveryResult:
    layout = FileRecord(ContentKind.LAYOUT, Path("/site/_layouts/default.html"))
    return DiscoveryResult(
        posts=[FileRecord(ContentKind.POST, Path("/site/_posts/2020-01-01-hi.md"))],
        pages=[FileRecord(ContentKind.PAGE, Path("/site/about/index.md"), relative_path="about")],
        layouts={"default.html": layout},
        assets=[
            FileRecord(ContentKind.ASSET, Path("/site/img"), relative_path="img", is_dir=True),
            FileRecord(ContentKind.ASSET, Path("/site/img/logo.png"), relative_path="img"),
        ],
    )


class TestColorHelpers:
    """Test color helper methods."""

    def test_zero_is_dim(self) -> None:
        assert SummaryTableRenderer._colorize_count(0) == f"[{DIM_COLOR}]0[/{DIM_COLOR}]"
        assert SummaryTableRenderer._colorize_count(0, is_error=True) == f"[{DIM_COLOR}]0[/{DIM_COLOR}]"

    def test_errors_are_red(self) -> None:
        assert SummaryTableRenderer._colorize_count(2, is_error=True) == f"[{ERROR_COLOR}]2[/{ERROR_COLOR}]"

    def test_counts_are_green(self) -> None:
        assert SummaryTableRenderer._colorize_count(5) == f"[{SUCCESS_COLOR}]5[/{SUCCESS_COLOR}]"


class TestTables:
    """Test table construction."""

    def test_records_table_skips_directories(self) -> None:
        table = SummaryTableRenderer(Console(file=io.StringIO())).build_records_table(_result())
        assert table.row_count == 4

    def test_counts_table_has_row_per_kind(self) -> None:
        table = SummaryTableRenderer(Console(file=io.StringIO())).build_counts_table(_result())
        assert table.row_count == 4

    def test_render_discovery(self) -> None:
        console, stream = _console()

        SummaryTableRenderer(console).render_discovery(_result())

        output = stream.getvalue()
        assert "Discovered Content" in output
        assert "about/index.md" in output
        assert "img/logo.png" in output
        assert "Content Summary" in output

    def test_render_discovery_counts_only(self) -> None:
        console, stream = _console()

        SummaryTableRenderer(console).render_discovery(_result(), show_files=False)

        output = stream.getvalue()
        assert "Discovered Content" not in output
        assert "Content Summary" in output

    def test_render_stats(self) -> None:
        console, stream = _console()
        stats = BuildStats(posts=1, pages=2, assets=3, removed=4)
        stats.register_error("boom")

        SummaryTableRenderer(console).render_stats(stats)

        output = stream.getvalue()
        assert "Build Summary" in output
        assert "Assets copied" in output
        assert "Errors" in output
