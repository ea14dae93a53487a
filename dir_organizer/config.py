"""
Configuration for the directory organizer.

Uses a dataclass to make configuration testable and injectable.
"""

from dataclasses import dataclass, field
from typing import Set


@dataclass
class Config:
    """
    Configuration for classify-and-move operations.

    All settings can be overridden when creating a Config instance,
    making it easy to test with different values.

    Example:
        # Use defaults
        config = Config()

        # Single worker, no bias for small files
        config = Config(worker_count=1, small_file_bias=0)
    """

    # Worker pool settings
    worker_count: int = 4

    # Heuristic ordering: files with these extensions are moved first
    small_file_extensions: Set[str] = field(default_factory=lambda: {".txt", ".jpg", ".jpeg", ".png"})
    small_file_bias: int = 1000

    # Content strategy settings
    text_encoding: str = "utf-8"

    # Leave dot-files where they are
    skip_hidden: bool = False

    def __post_init__(self) -> None:
        if self.worker_count < 1:
            raise ValueError(f"worker_count must be positive, got {self.worker_count}")

    def is_small_file_type(self, extension: str) -> bool:
        """
        Check if an extension belongs to the curated small/common set.

        Args:
            extension: File extension including dot (e.g., ".jpg")

        Returns:
            True if files of this type should be moved early
        """
        ext_lower = extension.lower()
        return any(ext_lower == ext.lower() for ext in self.small_file_extensions)

    def is_hidden(self, name: str) -> bool:
        """Check if a file name is hidden (starts with dot)."""
        return name.startswith(".")


# Default configuration instance
DEFAULT_CONFIG = Config()
