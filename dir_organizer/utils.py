"""
Pure utility functions for the directory organizer.

These functions are stateless and have no side effects (except reading file
metadata). They are easy to unit test in isolation.
"""

import os
import string
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .config import Config, DEFAULT_CONFIG
from .errors import EnumerationError, InvalidParameterError


@dataclass(frozen=True)
class FileEntry:
    """
    Snapshot of one file taken during a single enumeration pass.

    Attributes:
        path: Absolute path to the file
        size: Size in bytes (0 if the file could not be stat'ed)
        path_length: Number of characters in the path
        extension: Lower-cased suffix including the dot, "" if none
    """
    path: Path
    size: int
    path_length: int
    extension: str

    @property
    def name(self) -> str:
        return self.path.name


def capture_entry(file_path: Path) -> FileEntry:
    """
    Build a FileEntry for a path.

    Args:
        file_path: Path to the file

    Returns:
        FileEntry with size 0 if the file cannot be stat'ed
    """
    path = file_path.absolute()
    try:
        size = path.lstat().st_size
    except OSError:
        size = 0
    return FileEntry(
        path=path,
        size=size,
        path_length=len(str(path)),
        extension=path.suffix.lower(),
    )


def list_regular_files(directory: Path) -> List[FileEntry]:
    """
    Enumerate the regular files directly inside a directory.

    Symbolic links, subdirectories and special files are excluded.
    Entries are returned in name order so repeated runs see the same list.

    Args:
        directory: Directory to scan (top level only)

    Returns:
        List of FileEntry snapshots

    Raises:
        EnumerationError: If the directory cannot be listed
    """
    try:
        paths = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise EnumerationError(f"Cannot list '{directory}': {e}") from e

    return [capture_entry(p) for p in paths if not p.is_symlink() and p.is_file()]


def priority_score(entry: FileEntry, config: Config = DEFAULT_CONFIG) -> int:
    """
    Compute the ordering hint for a file. Lower scores are moved first.

    The score is size plus path length, lowered by config.small_file_bias
    for extensions in config.small_file_extensions.

    Args:
        entry: File snapshot to score
        config: Configuration to use

    Returns:
        Signed integer score

    Example:
        >>> priority_score(FileEntry(Path("/a.txt"), 10, 6, ".txt"))
        -984
    """
    score = entry.size + entry.path_length
    if config.is_small_file_type(entry.extension):
        score -= config.small_file_bias
    return score


def sort_by_priority(entries: Iterable[FileEntry], config: Config = DEFAULT_CONFIG) -> List[FileEntry]:
    """Sort entries by ascending score; equal scores keep their input order."""
    return sorted(entries, key=lambda entry: priority_score(entry, config))


def alphabetical_folder(file_name: str) -> Optional[str]:
    """
    Get the letter folder for a file name.

    Args:
        file_name: Name of the file (not a path)

    Returns:
        Uppercase letter A-Z, or None if the name starts with anything else
    """
    if not file_name:
        return None
    letter = file_name[0].upper()
    if len(letter) == 1 and letter in string.ascii_uppercase:
        return letter
    return None


def first_matching_keyword(text: str, keywords: Sequence[str]) -> Optional[str]:
    """
    Find the first keyword, in list order, that occurs in the text.

    Args:
        text: Text to search
        keywords: Keywords in priority order

    Returns:
        The matching keyword, or None if no keyword occurs
    """
    for keyword in keywords:
        if keyword in text:
            return keyword
    return None


def validate_folder_name(name: str) -> None:
    """
    Check that a keyword can be used as a single subfolder name.

    Raises:
        InvalidParameterError: If the name is empty, "." or "..", or
            contains a path separator
    """
    if not name:
        raise InvalidParameterError("Keyword must not be empty")
    if name in (".", ".."):
        raise InvalidParameterError(f"'{name}' cannot be used as a folder name")
    separators = {os.sep, "/"}
    if os.altsep:
        separators.add(os.altsep)
    if any(sep in name for sep in separators):
        raise InvalidParameterError(f"Keyword '{name}' must not contain a path separator")


def format_file_size(size_bytes: int) -> str:
    """
    Convert bytes to human-readable format (KB, MB, GB).

    Args:
        size_bytes: Size in bytes

    Returns:
        Human-readable string like "1.5 GB" or "256 MB"

    Example:
        >>> format_file_size(1536000000)
        '1.43 GB'
    """
    size = float(size_bytes)
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size < 1024:
            return f"{size:.2f} {unit}" if unit != 'B' else f"{int(size)} {unit}"
        size /= 1024
    return f"{size:.2f} PB"
