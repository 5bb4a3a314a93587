"""AssignmentLogger for writing icon assignment runs to a log file.

This module provides the AssignmentLogger class that generates structured
log files with a header, a discovery section, one entry per folder and a
summary.
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence, TextIO

from foldericon.models import (
    AssignmentSummary,
    DiscoveryResult,
    FolderOutcome,
    FolderResult,
    PriorityMode,
)


class AssignmentLogger:
    """Logger for icon assignment runs with structured output format.

    Usage:
        with AssignmentLogger(dry_run=True) as logger:
            logger.log_header()
            logger.log_discovery(paths, batch, priority, discovery)
            for result in results:
                logger.log_folder_result(result)
            logger.log_summary(summary)

    Attributes:
        SEPARATOR: The 65-character separator line used between sections.
    """

    SEPARATOR = "=" * 65

    def __init__(
        self,
        log_file_path: Optional[Path] = None,
        dry_run: bool = False,
    ) -> None:
        """Initialize the AssignmentLogger.

        Args:
            log_file_path: Optional path for the log file. If not provided,
                generates a timestamped filename in the current directory.
            dry_run: Whether this is a dry run (no desktop.ini written).

        Raises:
            OSError: If the log file path is not writable.
        """
        self._dry_run = dry_run
        self._start_timestamp = datetime.now()
        self._file_handle: Optional[TextIO] = None
        self._folder_counter = 0

        if log_file_path is None:
            timestamp_str = self._start_timestamp.strftime("%Y-%m-%d_%H-%M-%S")
            self._log_file_path = Path.cwd() / f"icon_log_{timestamp_str}.log"
        else:
            self._log_file_path = Path(log_file_path)

        self._validate_path()

    def _validate_path(self) -> None:
        """Validate that the log file path is writable.

        Raises:
            OSError: If the parent directory doesn't exist or is not writable.
        """
        parent = self._log_file_path.parent
        if not parent.exists():
            raise OSError(f"Parent directory does not exist: {parent}")
        if not parent.is_dir():
            raise OSError(f"Parent path is not a directory: {parent}")
        try:
            test_file = parent / f".foldericon_test_{id(self)}"
            test_file.touch()
            test_file.unlink()
        except PermissionError:
            raise OSError(f"Permission denied: cannot write to {parent}")

    def __enter__(self) -> "AssignmentLogger":
        """Enter the context manager, opening the log file.

        Raises:
            OSError: If the file cannot be opened for writing.
        """
        try:
            self._file_handle = open(self._log_file_path, "w", encoding="utf-8")
        except OSError as e:
            raise OSError(f"Cannot open log file for writing: {e}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit the context manager, closing the log file."""
        if self._file_handle is not None:
            try:
                self._file_handle.close()
            except OSError as e:
                print(f"Warning: Error closing log file: {e}", file=sys.stderr)
            finally:
                self._file_handle = None

    def get_log_path(self) -> Path:
        """Get the path to the log file."""
        return self._log_file_path

    def log_header(self) -> None:
        """Write the title, timestamp, and mode (LIVE or DRY RUN)."""
        self._write_separator()
        self._write_line("Folder Icon Assignment - Run Log")
        self._write_separator()
        self._write_line(f"Timestamp: {self._format_timestamp(self._start_timestamp)}")
        mode = "DRY RUN" if self._dry_run else "LIVE"
        self._write_line(f"Mode: {mode}")
        self._write_line("")

    def log_discovery(
        self,
        paths: Sequence[Path],
        batch: bool,
        priority: Optional[PriorityMode],
        discovery: DiscoveryResult,
    ) -> None:
        """Write the discovery section to the log file.

        Args:
            paths: Input paths given to the run.
            batch: Whether immediate subfolders were processed.
            priority: Selected icon priority mode, if any.
            discovery: Folder source result.
        """
        self._write_separator()
        self._write_line("DISCOVERY")
        self._write_separator()
        self._write_line("Input paths:")
        for path in paths:
            self._write_line(f"- {path}", indent=2)
        self._write_line(f"Mode: {'batch' if batch else 'single'}")
        priority_text = priority.value if priority is not None else "none (fuzzy fallback)"
        self._write_line(f"Icon priority: {priority_text}")
        self._write_line(f"Folders to process: {len(discovery.targets)}")
        self._write_line(f"Folders excluded: {len(discovery.excluded)}")
        self._write_line(f"Paths not found: {len(discovery.missing)}")
        for path in discovery.missing:
            self._write_line(f"- {path}", indent=2)
        self._write_line("")

    def log_folder_result(self, result: FolderResult) -> None:
        """Write one folder entry to the log file.

        Args:
            result: The FolderResult to log.
        """
        if self._folder_counter == 0:
            self._write_separator()
            self._write_line("FOLDERS")
            self._write_separator()
            self._write_line("")

        self._folder_counter += 1
        now = datetime.now()
        self._write_line(f"[{self._format_timestamp(now)}] Folder {self._folder_counter}: {result.path}")
        self._write_line(f"Outcome: {result.outcome.value}", indent=2)

        if result.candidate is not None:
            candidate = result.candidate
            self._write_line(f"Strategy: {candidate.strategy.value}", indent=2)
            if candidate.matched_token:
                self._write_line(f"Matched token: {candidate.matched_token}", indent=2)
            self._write_line(f"Candidate: {candidate.file_path}", indent=2)

        if result.assignment is not None and result.outcome is FolderOutcome.ASSIGNED:
            self._write_line(f"IconResource: {result.assignment.icon_resource}", indent=2)

        if result.error:
            self._write_line(f"! Error: {result.error}", indent=2)
        self._write_line("")

    def log_summary(self, summary: AssignmentSummary) -> None:
        """Write the summary section to the log file.

        Args:
            summary: The AssignmentSummary with aggregated statistics.
        """
        self._write_separator()
        self._write_line("SUMMARY")
        self._write_separator()
        self._write_line(f"Folders processed: {summary.total_folders}")
        self._write_line(f"Icons assigned: {summary.assigned}")
        self._write_line(f"No icon source found: {summary.no_candidate}")
        self._write_line(f"Paths not found: {summary.not_found}")
        self._write_line(f"Failed: {summary.failed}")

        if summary.errors:
            self._write_line(f"Total errors: {len(summary.errors)}")
            self._write_line("Errors:")
            for error in summary.errors:
                self._write_line(f"  - {error}")

        if summary.interrupted:
            self._write_line("Run interrupted by user")

        self._write_line(f"Duration: {self._format_duration(summary.duration_seconds)}")
        self._write_line("")
        self._write_line(f"Log file: {self._log_file_path}")
        self._write_separator()

    def _format_duration(self, seconds: float) -> str:
        """Format duration in human-readable format.

        Returns:
            Formatted string like "5m 23s", "1h 5m 30s", or "45s".
        """
        total_seconds = int(seconds)

        if total_seconds < 60:
            return f"{total_seconds}s"

        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        secs = total_seconds % 60

        if hours > 0:
            return f"{hours}h {minutes}m {secs}s"
        else:
            return f"{minutes}m {secs}s"

    def _format_timestamp(self, dt: datetime) -> str:
        return dt.strftime("%Y-%m-%d %H:%M:%S")

    def _write_separator(self) -> None:
        self._write_line(self.SEPARATOR)

    def _write_line(self, text: str, indent: int = 0) -> None:
        """Write a line to the log file with optional indentation."""
        if self._file_handle is None:
            print(
                f"Warning: Attempted to write to closed log file: {text}",
                file=sys.stderr,
            )
            return

        try:
            self._file_handle.write(" " * indent + text + "\n")
        except OSError as e:
            print(f"Warning: Error writing to log file: {e}", file=sys.stderr)
