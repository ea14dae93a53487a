"""
Directory Organizer - Sort the files of a directory into subfolders.

This package moves files into subfolders by first letter, by a keyword in
the file name, or by the first keyword found in the file's text, using a
pool of worker threads for the moves.
"""

from .config import Config
from .operations import (
    FileError,
    Outcome,
    OutcomeStatus,
    organize_alphabetically,
    organize_by_content,
    organize_by_keyword,
)
from .pool import WorkerPool

__version__ = "1.0.0"
__all__ = [
    "Config",
    "FileError",
    "Outcome",
    "OutcomeStatus",
    "WorkerPool",
    "organize_alphabetically",
    "organize_by_content",
    "organize_by_keyword",
]
