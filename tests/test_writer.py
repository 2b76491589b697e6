from __future__ import annotations

import logging
from pathlib import Path

import pytest

from sitelocator.config import SiteConfig
from sitelocator.errors import ConfigurationError
from sitelocator.models import ContentKind, FileRecord
from sitelocator.writer import SiteWriter, destination_root_for


def _touch(path: Path, content: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def _writer(tmp_path: Path, destination: str | None = None) -> SiteWriter:
    source = tmp_path / "site"
    source.mkdir(exist_ok=True)
    if destination is None:
        return SiteWriter(SiteConfig(source=source))
    return SiteWriter(SiteConfig(source=source, destination=destination))


def _rendered(*destinations: str, content: str = "<p>hi</p>") -> FileRecord:
    record = FileRecord(ContentKind.POST, Path("/src/_posts/2020-01-01-hi.md"))
    for destination in destinations:
        record.add_destination_path(destination)
    record.set_rendered_content(content)
    return record


class TestDestinationRoot:
    """Test destination directory resolution."""

    def test_relative_destination_is_anchored_to_source(self, tmp_path: Path) -> None:
        config = SiteConfig(source=tmp_path)
        assert destination_root_for(config) == tmp_path.resolve() / "_site"

    def test_absolute_destination_is_used_as_is(self, tmp_path: Path) -> None:
        config = SiteConfig(source=tmp_path, destination=str(tmp_path / "public"))
        assert destination_root_for(config) == tmp_path / "public"

    def test_writer_creates_destination(self, tmp_path: Path) -> None:
        writer = _writer(tmp_path)
        assert writer.destination_dir.is_dir()
        assert writer.destination_dir == (tmp_path / "site" / "_site").resolve()

    def test_missing_source_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError):
            SiteWriter(SiteConfig(source=tmp_path / "missing"))


class TestSave:
    """Test SiteWriter.save."""

    def test_writes_content_to_every_destination(self, tmp_path: Path) -> None:
        writer = _writer(tmp_path)

        written = writer.save(_rendered("2020/01/01/hi/index.html", "hi.html"))

        assert written == [
            writer.destination_dir / "2020" / "01" / "01" / "hi" / "index.html",
            writer.destination_dir / "hi.html",
        ]
        for path in written:
            assert path.read_bytes() == b"<p>hi</p>"

    def test_overwrites_existing_file(self, tmp_path: Path) -> None:
        writer = _writer(tmp_path)
        _touch(writer.destination_dir / "hi.html", "old")

        writer.save(_rendered("hi.html", content="new"))

        assert (writer.destination_dir / "hi.html").read_text(encoding="utf-8") == "new"

    def test_record_without_destinations_writes_nothing(self, tmp_path: Path) -> None:
        writer = _writer(tmp_path)
        record = FileRecord(ContentKind.PAGE, Path("/src/index.html"))
        record.set_rendered_content("x")

        with pytest.raises(ConfigurationError):
            writer.save(record)
        assert list(writer.destination_dir.iterdir()) == []

    def test_unrendered_record_raises(self, tmp_path: Path) -> None:
        writer = _writer(tmp_path)
        record = FileRecord(ContentKind.PAGE, Path("/src/index.html"))
        record.add_destination_path("index.html")

        with pytest.raises(ConfigurationError, match="has not been rendered"):
            writer.save(record)

    def test_write_failure_propagates(self, tmp_path: Path) -> None:
        writer = _writer(tmp_path)
        (writer.destination_dir / "blocked.html").mkdir()

        with pytest.raises(OSError):
            writer.save(_rendered("blocked.html"))


class TestCopyAssets:
    """Test SiteWriter.copy_assets."""

    def test_copies_files_byte_for_byte(self, tmp_path: Path) -> None:
        writer = _writer(tmp_path)
        source = tmp_path / "site" / "img" / "logo.png"
        source.parent.mkdir(parents=True)
        source.write_bytes(b"\x89PNG\x00\x01")
        record = FileRecord(ContentKind.ASSET, source, relative_path="img")

        copied = writer.copy_assets([record])

        assert copied == [source]
        assert (writer.destination_dir / "img" / "logo.png").read_bytes() == b"\x89PNG\x00\x01"

    def test_directory_assets_create_directories(self, tmp_path: Path) -> None:
        writer = _writer(tmp_path)
        directory = tmp_path / "site" / "fonts"
        directory.mkdir(parents=True)
        record = FileRecord(ContentKind.ASSET, directory, relative_path="fonts", is_dir=True)

        copied = writer.copy_assets([record])

        assert copied == []
        assert (writer.destination_dir / "fonts").is_dir()

    def test_read_only_asset_is_copied_again(self, tmp_path: Path) -> None:
        writer = _writer(tmp_path)
        source = _touch(tmp_path / "site" / "img" / "logo.png", "v1")
        source.chmod(0o444)
        record = FileRecord(ContentKind.ASSET, source, relative_path="img")
        writer.copy_assets([record])

        source.chmod(0o644)
        source.write_text("v2", encoding="utf-8")
        source.chmod(0o444)
        writer.copy_assets([record])

        assert (writer.destination_dir / "img" / "logo.png").read_text(encoding="utf-8") == "v2"

    def test_rejects_non_assets(self, tmp_path: Path) -> None:
        writer = _writer(tmp_path)
        with pytest.raises(ConfigurationError):
            writer.copy_assets([_rendered("hi.html")])


class TestCleanup:
    """Test SiteWriter.cleanup_destination."""

    def test_removes_children_and_keeps_directory(self, tmp_path: Path, caplog) -> None:
        writer = _writer(tmp_path)
        _touch(writer.destination_dir / "index.html")
        _touch(writer.destination_dir / "blog" / "post.html")

        with caplog.at_level(logging.INFO, logger="sitelocator"):
            removed = writer.cleanup_destination()

        assert sorted(path.name for path in removed) == ["blog", "index.html"]
        assert writer.destination_dir.is_dir()
        assert list(writer.destination_dir.iterdir()) == []
        assert "Destination Cleaned" in caplog.text

    def test_does_not_touch_the_source(self, tmp_path: Path) -> None:
        writer = _writer(tmp_path, destination=str(tmp_path / "public"))
        page = _touch(tmp_path / "site" / "index.html")
        _touch(tmp_path / "public" / "index.html")

        writer.cleanup_destination()

        assert page.exists()
        assert list((tmp_path / "public").iterdir()) == []

    @pytest.mark.parametrize("destination", [".", ".."])
    def test_refuses_destination_containing_the_source(self, tmp_path: Path, destination: str) -> None:
        writer = _writer(tmp_path, destination=destination)
        page = _touch(tmp_path / "site" / "index.html")

        with pytest.raises(ConfigurationError, match="Refusing to clean"):
            writer.cleanup_destination()

        assert page.exists()
