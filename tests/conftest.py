"""
Pytest fixtures for directory organizer tests.

Provides reusable test fixtures for creating temporary directories,
test files, and configurations.
"""

import pytest
from pathlib import Path

from dir_organizer.config import Config


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Create a temporary directory for testing."""
    return tmp_path


@pytest.fixture
def test_config() -> Config:
    """Create a test configuration with a small pool."""
    return Config(worker_count=2)


@pytest.fixture
def alpha_files(temp_dir: Path) -> dict:
    """
    Create files with a mix of letter and non-letter first characters.

    Returns a dict mapping expected letter folder (or None) to file names.
    """
    layout = {
        "A": ["apple.txt", "Avocado.png"],
        "C": ["cat.png", "Car.txt"],
        "Z": ["zebra.dat"],
        None: ["1file.dat", "_notes.md"],
    }
    for names in layout.values():
        for name in names:
            (temp_dir / name).write_text(f"content of {name}")
    return layout


@pytest.fixture
def content_files(temp_dir: Path) -> dict:
    """Create text files whose content decides their destination."""
    contents = {
        "apple.txt": "order #1",
        "banana.txt": "invoice #9",
        "both.txt": "order and invoice together",
        "neither.txt": "nothing interesting here",
    }
    for name, text in contents.items():
        (temp_dir / name).write_text(text, encoding="utf-8")
    return contents


@pytest.fixture
def capture_output() -> list:
    """Create a list to capture output from operations."""
    return []


@pytest.fixture
def output_callback(capture_output: list):
    """Create an output callback that captures messages."""
    def callback(message: str) -> None:
        capture_output.append(message)
    return callback
