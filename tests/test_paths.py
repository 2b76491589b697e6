from __future__ import annotations

from pathlib import Path

from sitelocator.paths import relative_within, relativize, resolve_path


class TestResolvePath:
    """Test resolve_path function."""

    def test_resolves_existing_absolute_path(self, tmp_path: Path) -> None:
        target = tmp_path / "site"
        target.mkdir()
        assert resolve_path(target) == target.resolve()

    def test_anchors_relative_path_to_base(self, tmp_path: Path) -> None:
        (tmp_path / "_posts").mkdir()
        assert resolve_path("_posts", base=tmp_path) == (tmp_path / "_posts").resolve()

    def test_normalizes_dot_segments(self, tmp_path: Path) -> None:
        (tmp_path / "a" / "b").mkdir(parents=True)
        assert resolve_path("a/b/../b/.", base=tmp_path) == (tmp_path / "a" / "b").resolve()

    def test_returns_none_for_missing_path(self, tmp_path: Path) -> None:
        """A missing directory means the feature is not used, never an error."""
        assert resolve_path("_layouts", base=tmp_path) is None
        assert resolve_path(tmp_path / "missing") is None

    def test_returns_none_for_empty_or_none(self) -> None:
        assert resolve_path(None) is None
        assert resolve_path("") is None

    def test_relative_path_does_not_depend_on_working_directory(self, tmp_path: Path, monkeypatch) -> None:
        (tmp_path / "site" / "_posts").mkdir(parents=True)
        elsewhere = tmp_path / "elsewhere"
        elsewhere.mkdir()
        monkeypatch.chdir(elsewhere)

        assert resolve_path("_posts", base=tmp_path / "site") == (tmp_path / "site" / "_posts").resolve()
        assert resolve_path("_posts", base=tmp_path) is None


class TestRelativize:
    """Test relativize and relative_within."""

    def test_child_path(self) -> None:
        assert relativize(Path("/src"), Path("/src/_posts")) == "_posts"

    def test_nested_path_uses_forward_slashes(self) -> None:
        assert relativize(Path("/src"), Path("/src/blog/_posts")) == "blog/_posts"

    def test_same_path_is_empty(self) -> None:
        assert relativize(Path("/src"), Path("/src")) == ""

    def test_outside_path_keeps_parent_segments(self) -> None:
        assert relativize(Path("/src"), Path("/out/site")) == "../out/site"

    def test_relative_within_collapses_escaping_paths(self) -> None:
        assert relative_within(Path("/src"), Path("/out/site")) == ""
        assert relative_within(Path("/src"), Path("/src/about")) == "about"

    def test_relative_within_keeps_names_containing_dots(self) -> None:
        assert relative_within(Path("/src"), Path("/src/v1..2")) == "v1..2"
