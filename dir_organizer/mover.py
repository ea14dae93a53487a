"""
File system primitives used by every strategy, and the unit of work the
worker pool runs.

Each primitive attempts its operation exactly once and reports failure by
raising an OrganizerError subclass.
"""

import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from .errors import (
    ContentReadError,
    DestinationExistsError,
    DirectoryCreationError,
    MoveError,
    SourceMissingError,
)


logger = logging.getLogger(__name__)


def ensure_directory(path: Path) -> None:
    """
    Create a directory if it does not exist yet.

    Args:
        path: Directory to create (its parent must exist)

    Raises:
        DirectoryCreationError: If a non-directory occupies the path or
            creation fails
    """
    try:
        path.mkdir(exist_ok=True)
    except FileExistsError as e:
        raise DirectoryCreationError(f"'{path}' exists and is not a directory") from e
    except OSError as e:
        raise DirectoryCreationError(f"Cannot create '{path}': {e}") from e


def move_file(source: Path, destination: Path) -> None:
    """
    Move a file within the same volume. Never overwrites.

    The file is hard-linked to the destination and then unlinked from the
    source, so an existing destination is detected atomically. On file
    systems without hard links it falls back to checking the destination
    and renaming, where a file created in between by another process can
    still be replaced.

    Args:
        source: File to move
        destination: Full destination path (parent directory must exist)

    Raises:
        SourceMissingError: If the source no longer exists
        DestinationExistsError: If something already exists at the destination
        MoveError: If the move fails for any other reason
    """
    if not os.path.lexists(source):
        raise SourceMissingError(f"'{source}' no longer exists")
    if os.path.lexists(destination):
        raise DestinationExistsError(f"'{destination}' already exists")

    try:
        os.link(source, destination)
    except FileExistsError as e:
        raise DestinationExistsError(f"'{destination}' already exists") from e
    except FileNotFoundError as e:
        _raise_missing(source, destination, e)
    except OSError as e:
        logger.debug("Hard link unavailable for %s (%s), renaming instead", source, e)
        _rename(source, destination)
        return

    try:
        os.unlink(source)
    except OSError as e:
        os.unlink(destination)
        raise MoveError(f"Cannot remove '{source}' after linking it to '{destination}': {e}") from e


def _rename(source: Path, destination: Path) -> None:
    try:
        os.rename(source, destination)
    except FileExistsError as e:
        raise DestinationExistsError(f"'{destination}' already exists") from e
    except FileNotFoundError as e:
        _raise_missing(source, destination, e)
    except OSError as e:
        raise MoveError(f"Cannot move '{source}' to '{destination}': {e}") from e


def _raise_missing(source: Path, destination: Path, error: OSError) -> None:
    if not os.path.lexists(source):
        raise SourceMissingError(f"'{source}' no longer exists") from error
    raise MoveError(f"Cannot move '{source}' to '{destination}': {error}") from error


def read_text(path: Path, encoding: str = "utf-8") -> str:
    """
    Read a whole file as text.

    Raises:
        ContentReadError: If the file cannot be read or decoded
    """
    try:
        return path.read_text(encoding=encoding)
    except UnicodeDecodeError as e:
        raise ContentReadError(f"'{path.name}' is not valid {encoding} text") from e
    except OSError as e:
        raise ContentReadError(f"Cannot read '{path.name}': {e}") from e


class MoveSink(Protocol):
    """Receives the result of each MoveTask. Called from worker threads."""

    def moved(self, source: Path, destination: Path) -> None: ...

    def skipped(self, source: Path, reason: str) -> None: ...

    def failed(self, source: Path, reason: str) -> None: ...


@dataclass(frozen=True)
class MoveTask:
    """Move exactly one file and report the result to the owning operation."""
    source: Path
    destination: Path
    sink: MoveSink
    cancel_event: Optional[threading.Event] = None

    def __call__(self) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            self.sink.failed(self.source, "operation cancelled")
            return

        try:
            move_file(self.source, self.destination)
        except SourceMissingError as e:
            logger.debug("Skipping %s: %s", self.source, e)
            self.sink.skipped(self.source, str(e))
        except MoveError as e:
            logger.debug("Move failed for %s: %s", self.source, e)
            self.sink.failed(self.source, str(e))
        else:
            logger.debug("Moved %s -> %s", self.source, self.destination)
            self.sink.moved(self.source, self.destination)

    def fail(self, error: BaseException) -> None:
        """Report an unexpected error raised while running this task."""
        self.sink.failed(self.source, f"unexpected error: {error}")
