"""IconOrchestrator for coordinating folder icon assignment runs.

This module provides the IconOrchestrator class that runs the complete icon
assignment workflow. It coordinates FolderScanner, CandidateSelector, the
assignment builder, DesktopIniPublisher, AssignmentTUI and AssignmentLogger.

Folders are processed one at a time, in discovery order. Each folder is an
isolation boundary: a structural failure is recorded on that folder's result
and the run moves on to the next folder.

Example:
    from foldericon.orchestration import IconOrchestrator
    from pathlib import Path

    orchestrator = IconOrchestrator(
        paths=[Path("D:/Games")],
        batch=True,
        dry_run=True,
    )
    summary = orchestrator.run()
"""

import sys
import time
from pathlib import Path
from typing import Iterable, List, Optional

from foldericon.matching import CandidateSelector
from foldericon.models import (
    AssignmentSummary,
    FolderOutcome,
    FolderResult,
    FolderTarget,
    StructuralFailure,
)
from foldericon.operations import (
    DesktopIniPublisher,
    build_reference,
    compose_assignment,
)
from foldericon.orchestration.assignment_logger import AssignmentLogger
from foldericon.scanning import FolderScanner
from foldericon.ui import AssignmentTUI


class IconOrchestrator:
    """Orchestrates folder discovery, candidate selection and publishing.

    Attributes:
        paths: Input folder paths, in processing order.
        batch: Whether immediate subfolders of each path are processed.
        exclude: Exact folder names to skip.
        dry_run: Whether to skip writing desktop.ini files.
        verbose: Whether to display verbose output.
        log_file_path: Optional path for the run log file.
        write_log: Whether to write a run log file at all.

    Example:
        orchestrator = IconOrchestrator(
            paths=[Path("/apps")],
            selector=CandidateSelector(priority=PriorityMode.ANY),
        )
        summary = orchestrator.run()
    """

    def __init__(
        self,
        paths: Iterable[Path],
        batch: bool = False,
        exclude: Iterable[str] = (),
        selector: Optional[CandidateSelector] = None,
        scanner: Optional[FolderScanner] = None,
        publisher: Optional[DesktopIniPublisher] = None,
        tui: Optional[AssignmentTUI] = None,
        dry_run: bool = False,
        verbose: bool = False,
        log_file_path: Optional[Path] = None,
        write_log: bool = True,
    ) -> None:
        """Initialize the IconOrchestrator.

        Args:
            paths: Input folder paths.
            batch: Process immediate subfolders instead of the folders.
            exclude: Exact folder names to skip.
            selector: CandidateSelector to use. Defaults to one with no
                dependencies and no priority mode.
            scanner: FolderScanner to use. Defaults to a stable-order scanner.
            publisher: DesktopIniPublisher to use. Defaults to one for the
                running platform honoring ``dry_run``.
            tui: AssignmentTUI for console output.
            dry_run: If True, select and compose but write nothing.
            verbose: If True, display additional details during execution.
            log_file_path: Optional path for the log file. If not provided,
                a timestamped filename will be generated.
            write_log: If False, no run log file is written.
        """
        self.paths: List[Path] = list(paths)
        self.batch = batch
        self.exclude: List[str] = list(exclude)
        self.dry_run = dry_run
        self.verbose = verbose
        self.log_file_path = log_file_path
        self.write_log = write_log

        self._selector = selector if selector is not None else CandidateSelector()
        self._scanner = scanner if scanner is not None else FolderScanner()
        self._publisher = (
            publisher if publisher is not None else DesktopIniPublisher(dry_run=dry_run)
        )
        self._tui = tui if tui is not None else AssignmentTUI()

    @property
    def tui(self) -> AssignmentTUI:
        return self._tui

    def run(self) -> AssignmentSummary:
        """Execute the icon assignment workflow.

        1. Discovery - turn input paths into target folders
        2. Assignment - select, compose and publish per folder
        3. Summary - aggregate results, display and log them

        Returns:
            AssignmentSummary with per-folder results and totals.
        """
        start_time = time.time()
        self._scanner.clear_errors()

        discovery = self._scanner.discover_targets(
            self.paths, batch=self.batch, exclude=self.exclude
        )
        self._tui.display_discovery(discovery, self.batch)

        summary = AssignmentSummary(dry_run=self.dry_run)
        for path in discovery.missing:
            self._record(summary, FolderResult(
                path=path,
                outcome=FolderOutcome.NOT_FOUND,
                error=f"Folder not found: {path}",
            ))

        logger: Optional[AssignmentLogger] = None
        if self.write_log:
            try:
                logger = AssignmentLogger(
                    log_file_path=self.log_file_path,
                    dry_run=self.dry_run,
                )
            except OSError as e:
                print(f"Warning: Could not create log file: {e}", file=sys.stderr)

        if logger is not None:
            with logger:
                logger.log_header()
                logger.log_discovery(
                    self.paths, self.batch, self._selector.priority, discovery
                )
                for result in summary.results:
                    logger.log_folder_result(result)

                self._process_targets(discovery.targets, summary, logger)

                summary.duration_seconds = time.time() - start_time
                self._tui.display_summary(summary)
                logger.log_summary(summary)
                if self.verbose:
                    self._tui.console.print(
                        f"[dim]Log file: {logger.get_log_path()}[/dim]"
                    )
        else:
            self._process_targets(discovery.targets, summary, None)
            summary.duration_seconds = time.time() - start_time
            self._tui.display_summary(summary)

        return summary

    def process_folder(self, target: FolderTarget) -> FolderResult:
        """Select, compose and publish the icon for one folder.

        Failures are isolated to the returned FolderResult; nothing is
        raised for a folder that cannot be given an icon.

        Args:
            target: The folder to process.

        Returns:
            FolderResult with the folder's terminal outcome.
        """
        result = FolderResult(path=target.path, outcome=FolderOutcome.NO_CANDIDATE, target=target)

        try:
            listing = self._scanner.list_files(target.path)
            candidate = self._selector.select(target, listing)
            if candidate is None:
                return result

            result.candidate = candidate
            reference = build_reference(candidate, target.path)
            result.assignment = compose_assignment(candidate, reference)
            if not self.dry_run:
                self._publisher.publish(target.path, result.assignment)
            result.outcome = FolderOutcome.ASSIGNED

        except StructuralFailure as e:
            result.outcome = FolderOutcome.FAILED
            result.error = str(e)
        except OSError as e:
            result.outcome = FolderOutcome.FAILED
            result.error = f"Error processing {target.path}: {e}"

        return result

    def preview(self, folder_path: Path) -> FolderResult:
        """Show which file would be chosen for a folder, without writing.

        Args:
            folder_path: Folder to preview.

        Returns:
            FolderResult as a dry run would produce it.
        """
        if not folder_path.is_dir():
            return FolderResult(
                path=folder_path,
                outcome=FolderOutcome.NOT_FOUND,
                error=f"Folder not found: {folder_path}",
            )

        target = self._scanner.build_target(folder_path)
        listing = self._scanner.list_files(target.path)
        candidate = self._selector.select(target, listing)
        result = FolderResult(
            path=target.path,
            outcome=FolderOutcome.NO_CANDIDATE,
            target=target,
            candidate=candidate,
        )
        if candidate is None:
            return result

        try:
            reference = build_reference(candidate, target.path)
        except StructuralFailure as e:
            result.outcome = FolderOutcome.FAILED
            result.error = str(e)
            return result

        result.assignment = compose_assignment(candidate, reference)
        result.outcome = FolderOutcome.ASSIGNED
        return result

    def _process_targets(
        self,
        targets: List[FolderTarget],
        summary: AssignmentSummary,
        logger: Optional[AssignmentLogger],
    ) -> None:
        """Process every target in order, recording each result."""
        if not targets:
            return

        progress, callback = self._tui.create_progress_callback(len(targets))
        try:
            with progress:
                for index, target in enumerate(targets):
                    result = self.process_folder(target)
                    self._record(summary, result)
                    self._tui.display_folder_result(result, verbose=self.verbose)
                    if logger is not None:
                        logger.log_folder_result(result)
                    callback(index + 1)
        except KeyboardInterrupt:
            self._tui.console.print("\n[yellow]Run interrupted by user.[/yellow]")
            summary.interrupted = True

        scanner_errors = self._scanner.get_errors()
        if self.verbose and scanner_errors:
            self._tui.console.print("[yellow]Scanner warnings:[/yellow]")
            for error in scanner_errors:
                self._tui.console.print(f"  [dim]- {error}[/dim]")

    def _record(self, summary: AssignmentSummary, result: FolderResult) -> None:
        """Add one folder result to the summary totals."""
        summary.results.append(result)

        if result.outcome is FolderOutcome.NOT_FOUND:
            summary.not_found += 1
        else:
            summary.total_folders += 1
            if result.outcome is FolderOutcome.ASSIGNED:
                summary.assigned += 1
            elif result.outcome is FolderOutcome.NO_CANDIDATE:
                summary.no_candidate += 1
            elif result.outcome is FolderOutcome.FAILED:
                summary.failed += 1

        if result.error:
            summary.errors.append(result.error)
