"""
Unit tests for dir_organizer.mover module.

Tests the move primitives and MoveTask against the real file system.
"""

import os
import threading
import pytest
from pathlib import Path

from dir_organizer.errors import (
    ContentReadError,
    DestinationExistsError,
    DirectoryCreationError,
    SourceMissingError,
)
from dir_organizer.mover import MoveTask, ensure_directory, move_file, read_text


class RecordingSink:
    """MoveSink that records every call."""

    def __init__(self):
        self.moved_calls = []
        self.skipped_calls = []
        self.failed_calls = []

    def moved(self, source, destination):
        self.moved_calls.append((source, destination))

    def skipped(self, source, reason):
        self.skipped_calls.append((source, reason))

    def failed(self, source, reason):
        self.failed_calls.append((source, reason))


class TestEnsureDirectory:
    """Tests for ensure_directory function."""

    def test_creates_directory(self, temp_dir: Path):
        ensure_directory(temp_dir / "A")
        assert (temp_dir / "A").is_dir()

    def test_existing_directory_is_noop(self, temp_dir: Path):
        (temp_dir / "A").mkdir()
        (temp_dir / "A" / "keep.txt").write_text("keep")

        ensure_directory(temp_dir / "A")

        assert (temp_dir / "A" / "keep.txt").exists()

    def test_file_in_the_way_raises(self, temp_dir: Path):
        (temp_dir / "A").write_text("not a folder")

        with pytest.raises(DirectoryCreationError):
            ensure_directory(temp_dir / "A")

    def test_missing_parent_raises(self, temp_dir: Path):
        with pytest.raises(DirectoryCreationError):
            ensure_directory(temp_dir / "missing" / "A")


class TestMoveFile:
    """Tests for move_file function."""

    def test_moves_file(self, temp_dir: Path):
        source = temp_dir / "apple.txt"
        source.write_text("apple")
        (temp_dir / "A").mkdir()

        move_file(source, temp_dir / "A" / "apple.txt")

        assert not source.exists()
        assert (temp_dir / "A" / "apple.txt").read_text() == "apple"

    def test_never_overwrites(self, temp_dir: Path):
        source = temp_dir / "apple.txt"
        source.write_text("new")
        (temp_dir / "A").mkdir()
        existing = temp_dir / "A" / "apple.txt"
        existing.write_text("old")

        with pytest.raises(DestinationExistsError):
            move_file(source, existing)

        assert source.read_text() == "new"
        assert existing.read_text() == "old"

    def test_missing_source_raises(self, temp_dir: Path):
        (temp_dir / "A").mkdir()

        with pytest.raises(SourceMissingError):
            move_file(temp_dir / "gone.txt", temp_dir / "A" / "gone.txt")

    def test_destination_created_after_check_is_not_overwritten(self, temp_dir: Path, monkeypatch):
        """Test that a file appearing after the existence check still wins."""
        source = temp_dir / "apple.txt"
        source.write_text("new")
        (temp_dir / "A").mkdir()
        destination = temp_dir / "A" / "apple.txt"
        destination.write_text("old")

        real_lexists = os.path.lexists
        monkeypatch.setattr(os.path, "lexists", lambda p: Path(p) != destination and real_lexists(p))

        with pytest.raises(DestinationExistsError):
            move_file(source, destination)

        assert source.read_text() == "new"
        assert destination.read_text() == "old"

    def test_falls_back_to_rename_without_hard_links(self, temp_dir: Path, monkeypatch):
        source = temp_dir / "apple.txt"
        source.write_text("apple")
        (temp_dir / "A").mkdir()

        def no_links(src, dst):
            raise PermissionError("hard links not supported")

        monkeypatch.setattr(os, "link", no_links)

        move_file(source, temp_dir / "A" / "apple.txt")

        assert not source.exists()
        assert (temp_dir / "A" / "apple.txt").read_text() == "apple"


class TestReadText:
    """Tests for read_text function."""

    def test_reads_utf8(self, temp_dir: Path):
        f = temp_dir / "note.txt"
        f.write_text("café", encoding="utf-8")
        assert read_text(f) == "café"

    def test_undecodable_raises(self, temp_dir: Path):
        f = temp_dir / "blob.bin"
        f.write_bytes(b"\xff\xfe\x00\x80\x81")

        with pytest.raises(ContentReadError):
            read_text(f)

    def test_missing_file_raises(self, temp_dir: Path):
        with pytest.raises(ContentReadError):
            read_text(temp_dir / "gone.txt")


class TestMoveTask:
    """Tests for MoveTask."""

    def test_reports_moved(self, temp_dir: Path):
        source = temp_dir / "apple.txt"
        source.write_text("apple")
        (temp_dir / "A").mkdir()
        sink = RecordingSink()

        MoveTask(source, temp_dir / "A" / "apple.txt", sink)()

        assert sink.moved_calls == [(source, temp_dir / "A" / "apple.txt")]
        assert sink.failed_calls == []

    def test_reports_conflict_as_failure(self, temp_dir: Path):
        source = temp_dir / "apple.txt"
        source.write_text("apple")
        (temp_dir / "A").mkdir()
        (temp_dir / "A" / "apple.txt").write_text("already here")
        sink = RecordingSink()

        MoveTask(source, temp_dir / "A" / "apple.txt", sink)()

        assert len(sink.failed_calls) == 1
        assert sink.failed_calls[0][0] == source
        assert source.exists()

    def test_vanished_source_is_skipped(self, temp_dir: Path):
        (temp_dir / "A").mkdir()
        sink = RecordingSink()

        MoveTask(temp_dir / "gone.txt", temp_dir / "A" / "gone.txt", sink)()

        assert len(sink.skipped_calls) == 1
        assert sink.failed_calls == []

    def test_cancelled_task_does_not_move(self, temp_dir: Path):
        source = temp_dir / "apple.txt"
        source.write_text("apple")
        (temp_dir / "A").mkdir()
        cancel = threading.Event()
        cancel.set()
        sink = RecordingSink()

        MoveTask(source, temp_dir / "A" / "apple.txt", sink, cancel)()

        assert source.exists()
        assert sink.failed_calls == [(source, "operation cancelled")]

    def test_fail_reports_unexpected_error(self, temp_dir: Path):
        sink = RecordingSink()
        task = MoveTask(temp_dir / "x.txt", temp_dir / "X" / "x.txt", sink)

        task.fail(RuntimeError("boom"))

        assert sink.failed_calls == [(temp_dir / "x.txt", "unexpected error: boom")]
