"""
Core classify-and-move operations for the directory organizer.

Each public function is one operation: it validates its parameters, scans
the directory once, decides a destination subfolder per file and hands one
MoveTask per file to a WorkerPool that lives exactly as long as the call.
Output goes through a callback so the caller decides how to present it.
"""

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from .config import Config, DEFAULT_CONFIG
from .errors import (
    ContentReadError,
    DirectoryCreationError,
    EnumerationError,
    InvalidParameterError,
    PoolShutdownError,
)
from .mover import MoveTask, ensure_directory, read_text
from .pool import WorkerPool
from .utils import (
    FileEntry,
    alphabetical_folder,
    first_matching_keyword,
    format_file_size,
    list_regular_files,
    sort_by_priority,
    validate_folder_name,
)


logger = logging.getLogger(__name__)


class OutcomeStatus(Enum):
    """Final status of an operation."""
    SUCCESS = "success"
    EMPTY_RESULT = "empty_result"  # No regular files in the directory
    FAILED = "failed"              # Bad parameters, unreadable directory or per-file errors


@dataclass(frozen=True)
class FileError:
    """A file that could not be processed, and why."""
    path: Path
    reason: str


@dataclass
class Outcome:
    """Result of one operation."""
    status: OutcomeStatus = OutcomeStatus.SUCCESS
    errors: List[FileError] = field(default_factory=list)
    moved: List[Tuple[Path, Path]] = field(default_factory=list)
    actions: List[str] = field(default_factory=list)
    skip_count: int = 0
    message: str = ""
    dry_run: bool = False

    @property
    def success_count(self) -> int:
        return len(self.moved)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def ok(self) -> bool:
        return self.status is not OutcomeStatus.FAILED

    def summary(self) -> str:
        """Build the human-readable report shown to the user."""
        if self.status is OutcomeStatus.EMPTY_RESULT or (not self.actions and not self.errors and self.skip_count == 0):
            return self.message

        prefix = "[DRY RUN] " if self.dry_run else ""
        tag = "[WOULD MOVE]" if self.dry_run else "[MOVED]"
        lines = [f"{prefix}{self.message}", "-" * 60]
        lines.extend(f"  {tag} {action}" for action in self.actions)
        lines.append("-" * 60)

        if self.dry_run:
            lines.append(f"Would move {len(self.actions)} files, {self.skip_count} left in place")
            lines.append("Run again without dry run to apply changes.")
        else:
            lines.append(
                f"Summary: {self.success_count} moved, {self.skip_count} left in place, {self.error_count} errors"
            )

        if self.errors:
            lines.append("")
            lines.append(f"Could not process {self.error_count} files:")
            lines.extend(f"  [ERROR] {error.path.name}: {error.reason}" for error in self.errors)

        return "\n".join(lines)


# Type alias for output callback
OutputCallback = Callable[[str], None]

# Maps score-ordered entries to (entry, subfolder) pairs
Planner = Callable[[List[FileEntry], "_Operation"], List[Tuple[FileEntry, str]]]


def _default_output(message: str) -> None:
    """Default output callback that prints to stdout."""
    print(message)


class _Operation:
    """
    State of a single classify-and-move run.

    Also serves as the result sink of every MoveTask the run submits, so the
    moved/skipped/failed methods are called from worker threads.
    """

    def __init__(
        self,
        directory: Path,
        dry_run: bool,
        config: Config,
        cancel_event: Optional[threading.Event],
    ) -> None:
        self.directory = directory
        self.dry_run = dry_run
        self.config = config
        self.cancel_event = cancel_event

        self._lock = threading.Lock()
        self._rank: Dict[Path, int] = {}
        self._moved: List[Tuple[Path, Path]] = []
        self._errors: List[FileError] = []
        self._skip_count = 0
        self._planned: List[Tuple[FileEntry, str]] = []
        self._folders: Dict[str, Optional[str]] = {}
        self._fatal: Optional[str] = None

    # MoveSink

    def moved(self, source: Path, destination: Path) -> None:
        with self._lock:
            self._moved.append((source, destination))

    def skipped(self, source: Path, reason: str) -> None:
        logger.debug("Left in place: %s (%s)", source.name, reason)
        with self._lock:
            self._skip_count += 1

    def failed(self, source: Path, reason: str) -> None:
        logger.info("Failed: %s (%s)", source.name, reason)
        with self._lock:
            self._errors.append(FileError(source, reason))

    # Submitting side

    def set_order(self, entries: List[FileEntry]) -> None:
        self._rank = {entry.path: i for i, entry in enumerate(entries)}

    def execute(self, moves: List[Tuple[FileEntry, str]]) -> None:
        """Create destination folders and run one move task per planned file."""
        self._planned = moves
        if self.dry_run or not moves:
            return

        try:
            with WorkerPool(self.config.worker_count) as pool:
                for entry, folder in moves:
                    reason = self._prepare_folder(folder)
                    if reason is not None:
                        self.failed(entry.path, reason)
                        continue
                    task = MoveTask(
                        source=entry.path,
                        destination=self.directory / folder / entry.name,
                        sink=self,
                        cancel_event=self.cancel_event,
                    )
                    pool.submit(task, on_error=task.fail)
        except PoolShutdownError as e:
            logger.error("Operation aborted: %s", e)
            self._fatal = str(e)

    def _prepare_folder(self, folder: str) -> Optional[str]:
        # Folder creation must finish before the first task targeting it is queued
        if folder not in self._folders:
            try:
                ensure_directory(self.directory / folder)
            except DirectoryCreationError as e:
                logger.warning("Cannot create folder %s: %s", folder, e)
                self._folders[folder] = f"destination folder '{folder}' unavailable: {e}"
            else:
                self._folders[folder] = None
        return self._folders[folder]

    def finish(self, success_message: str) -> Outcome:
        outcome = Outcome(dry_run=self.dry_run)

        def by_rank(path: Path) -> int:
            return self._rank.get(path, len(self._rank))

        outcome.errors = sorted(self._errors, key=lambda error: by_rank(error.path))
        outcome.skip_count = self._skip_count

        if self.dry_run:
            outcome.actions = [
                f"{entry.name} ({format_file_size(entry.size)}) -> {folder}/"
                for entry, folder in self._planned
            ]
        else:
            outcome.moved = sorted(self._moved, key=lambda pair: by_rank(pair[0]))
            outcome.actions = [
                f"{source.name} -> {destination.parent.name}/" for source, destination in outcome.moved
            ]

        if self._fatal is not None:
            outcome.status = OutcomeStatus.FAILED
            outcome.message = f"Error: {self._fatal}"
        elif outcome.errors:
            outcome.status = OutcomeStatus.FAILED
            outcome.message = f"Finished with {outcome.error_count} errors"
        elif self.dry_run:
            outcome.message = f"Would move {len(outcome.actions)} files in: {self.directory}"
        else:
            outcome.message = success_message
        return outcome


def _resolve_directory(directory: Union[str, Path, None]) -> Path:
    if directory is None or str(directory).strip() == "":
        raise InvalidParameterError("Directory must not be empty")
    path = Path(directory).expanduser().resolve()
    if not path.is_dir():
        raise InvalidParameterError(f"'{path}' is not a valid directory")
    return path


def _failed(message: str, output: OutputCallback, dry_run: bool) -> Outcome:
    outcome = Outcome(status=OutcomeStatus.FAILED, message=f"Error: {message}", dry_run=dry_run)
    output(outcome.summary())
    return outcome


def _run_operation(
    directory: Union[str, Path],
    validate: Callable[[], None],
    plan: Planner,
    success_message: str,
    dry_run: bool,
    config: Config,
    output: OutputCallback,
    cancel_event: Optional[threading.Event],
) -> Outcome:
    """Shared skeleton of every strategy: validate, scan, order, plan, move, report."""
    try:
        resolved = _resolve_directory(directory)
        validate()
    except InvalidParameterError as e:
        return _failed(str(e), output, dry_run)

    try:
        entries = list_regular_files(resolved)
    except EnumerationError as e:
        return _failed(str(e), output, dry_run)

    if not entries:
        outcome = Outcome(
            status=OutcomeStatus.EMPTY_RESULT,
            message=f"No files found to organize in: {resolved}",
            dry_run=dry_run,
        )
        output(outcome.summary())
        return outcome

    operation = _Operation(resolved, dry_run, config, cancel_event)

    candidates = []
    for entry in entries:
        if config.skip_hidden and config.is_hidden(entry.name):
            operation.skipped(entry.path, "hidden file")
        else:
            candidates.append(entry)

    ordered = sort_by_priority(candidates, config)
    operation.set_order(ordered)

    logger.info("Organizing %d files in %s", len(ordered), resolved)
    operation.execute(plan(ordered, operation))

    outcome = operation.finish(success_message)
    logger.info(
        "Finished %s: %d moved, %d left in place, %d errors",
        resolved, outcome.success_count, outcome.skip_count, outcome.error_count,
    )
    output(outcome.summary())
    return outcome


def organize_alphabetically(
    directory: Union[str, Path],
    dry_run: bool = False,
    config: Config = DEFAULT_CONFIG,
    output: OutputCallback = _default_output,
    cancel_event: Optional[threading.Event] = None,
) -> Outcome:
    """
    Move files into A-Z subfolders named after the first letter of each name.

    Files whose name does not start with a letter A-Z (case-insensitive)
    are left in place and are not reported as errors.

    Args:
        directory: Directory to organize
        dry_run: If True, only preview changes without moving files
        config: Configuration to use
        output: Callback for the final report
        cancel_event: When set, files not moved yet are left in place and
            reported as cancelled

    Returns:
        Outcome of the operation
    """
    def plan(ordered: List[FileEntry], operation: _Operation) -> List[Tuple[FileEntry, str]]:
        by_letter: Dict[str, List[FileEntry]] = defaultdict(list)
        for entry in ordered:
            letter = alphabetical_folder(entry.name)
            if letter is None:
                operation.skipped(entry.path, "name does not start with A-Z")
            else:
                by_letter[letter].append(entry)
        # Letter by letter, score order within each letter
        return [(entry, letter) for letter in sorted(by_letter) for entry in by_letter[letter]]

    return _run_operation(
        directory,
        validate=lambda: None,
        plan=plan,
        success_message="Files organized alphabetically!",
        dry_run=dry_run,
        config=config,
        output=output,
        cancel_event=cancel_event,
    )


def organize_by_keyword(
    directory: Union[str, Path],
    keyword: str,
    dry_run: bool = False,
    config: Config = DEFAULT_CONFIG,
    output: OutputCallback = _default_output,
    cancel_event: Optional[threading.Event] = None,
) -> Outcome:
    """
    Move files whose name contains a keyword into a subfolder named after it.

    Matching is a case-sensitive substring test on the file name.

    Args:
        directory: Directory to organize
        keyword: Literal text to look for; also the subfolder name
        dry_run: If True, only preview changes without moving files
        config: Configuration to use
        output: Callback for the final report
        cancel_event: Optional cancellation flag

    Returns:
        Outcome of the operation
    """
    def plan(ordered: List[FileEntry], operation: _Operation) -> List[Tuple[FileEntry, str]]:
        moves = []
        for entry in ordered:
            if keyword in entry.name:
                moves.append((entry, keyword))
            else:
                operation.skipped(entry.path, f"name does not contain '{keyword}'")
        return moves

    return _run_operation(
        directory,
        validate=lambda: validate_folder_name(keyword),
        plan=plan,
        success_message=f"Files with keyword '{keyword}' moved successfully!",
        dry_run=dry_run,
        config=config,
        output=output,
        cancel_event=cancel_event,
    )


def organize_by_content(
    directory: Union[str, Path],
    keywords: Sequence[str],
    dry_run: bool = False,
    config: Config = DEFAULT_CONFIG,
    output: OutputCallback = _default_output,
    cancel_event: Optional[threading.Event] = None,
) -> Outcome:
    """
    Move files into a subfolder named after the first keyword found in their text.

    Keywords are tried in list order and the first one contained in the
    file's content wins. Files that cannot be read or decoded with
    config.text_encoding are reported as errors and left in place.

    Args:
        directory: Directory to organize
        keywords: Keywords in priority order
        dry_run: If True, only preview changes without moving files
        config: Configuration to use
        output: Callback for the final report
        cancel_event: Optional cancellation flag

    Returns:
        Outcome of the operation
    """
    if keywords is None or isinstance(keywords, str):
        keyword_list: List[str] = []
    else:
        keyword_list = list(keywords)

    def validate() -> None:
        if not keyword_list:
            raise InvalidParameterError("Keyword list must contain at least one keyword")
        for keyword in keyword_list:
            validate_folder_name(keyword)

    def plan(ordered: List[FileEntry], operation: _Operation) -> List[Tuple[FileEntry, str]]:
        moves = []
        for entry in ordered:
            try:
                text = read_text(entry.path, config.text_encoding)
            except ContentReadError as e:
                if isinstance(e.__cause__, FileNotFoundError):
                    operation.skipped(entry.path, str(e))
                else:
                    operation.failed(entry.path, str(e))
                continue

            keyword = first_matching_keyword(text, keyword_list)
            if keyword is None:
                operation.skipped(entry.path, "no keyword in content")
            else:
                moves.append((entry, keyword))
        return moves

    return _run_operation(
        directory,
        validate=validate,
        plan=plan,
        success_message="Files organized by content!",
        dry_run=dry_run,
        config=config,
        output=output,
        cancel_event=cancel_event,
    )
