"""Terminal User Interface for folder icon assignment.

This module provides the AssignmentTUI class, a Rich-based TUI for reporting
icon assignment runs: discovery results, a progress bar, one status line
per folder and a final summary.

Example:
    from foldericon.ui import AssignmentTUI

    tui = AssignmentTUI()
    tui.display_discovery(discovery, batch=True)
    tui.display_folder_result(result)
    tui.display_summary(summary)
"""

from pathlib import Path
from typing import Callable, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TextColumn,
    TimeElapsedColumn,
)
from rich.prompt import Prompt
from rich.table import Table

from foldericon.models import (
    AssignmentSummary,
    DiscoveryResult,
    FolderOutcome,
    FolderResult,
)


class AssignmentTUI:
    """Rich-based Terminal User Interface for icon assignment runs.

    Args:
        console: Optional Rich Console instance for output. If None, creates
            a new Console. Pass a custom Console for testing (e.g., with
            StringIO file for output capture).

    Attributes:
        console: The Rich Console instance used for all output.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def prompt_for_folder(self) -> Optional[Path]:
        """Ask the user for a folder when no paths were given.

        Returns:
            The entered folder path, or None if the answer was empty.
        """
        answer = Prompt.ask("Folder to assign icons in", console=self.console)
        answer = answer.strip().strip('"')
        if not answer:
            return None
        return Path(answer).expanduser()

    def display_discovery(self, discovery: DiscoveryResult, batch: bool) -> None:
        """Display which folders will be processed.

        Args:
            discovery: Folder source result for the run.
            batch: Whether immediate subfolders are processed.
        """
        header_text = (
            f"Mode: {'batch' if batch else 'single'}\n"
            f"Folders to process: {len(discovery.targets):,}\n"
            f"Folders excluded: {len(discovery.excluded):,}\n"
            f"Paths not found: {len(discovery.missing):,}"
        )
        self.console.print(Panel(header_text, title="Discovery", border_style="blue"))

        for path in discovery.missing:
            self.console.print(f"[red]Not found:[/red] {path}")

    def create_progress_callback(
        self, total_folders: int
    ) -> tuple[Progress, Callable[[int], None]]:
        """Create a progress bar and callback function for folder tracking.

        The caller must use the returned Progress as a context manager.

        Example:
            progress, callback = tui.create_progress_callback(len(targets))
            with progress:
                for i, target in enumerate(targets):
                    process(target)
                    callback(i + 1)
        """
        progress = Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self.console,
        )
        task_id = progress.add_task("Assigning icons...", total=total_folders)

        def callback(completed: int) -> None:
            progress.update(task_id, completed=completed)

        return progress, callback

    def display_folder_result(self, result: FolderResult, verbose: bool = False) -> None:
        """Print one status line for a processed folder.

        Args:
            result: The folder's outcome.
            verbose: Also show strategy and candidate details.
        """
        name = self._truncate_name(result.path.name or str(result.path))

        if result.outcome is FolderOutcome.ASSIGNED and result.candidate is not None:
            self.console.print(
                f"[green]✓[/green] {name} → {result.candidate.file_name}"
            )
            if verbose:
                candidate = result.candidate
                detail = f"strategy: {candidate.strategy.value}"
                if candidate.matched_token:
                    detail += f", token: {candidate.matched_token}"
                self.console.print(f"  [dim]{detail}[/dim]")
                if result.assignment is not None:
                    self.console.print(
                        f"  [dim]IconResource={result.assignment.icon_resource}[/dim]"
                    )
        elif result.outcome is FolderOutcome.NO_CANDIDATE:
            self.console.print(f"[yellow]-[/yellow] {name}: no icon source found")
        elif result.outcome is FolderOutcome.NOT_FOUND:
            self.console.print(f"[red]✗[/red] {name}: folder not found")
        else:
            self.console.print(f"[red]✗[/red] {name}: {result.error}")

    def display_summary(self, summary: AssignmentSummary) -> None:
        """Display final statistics after all folders are processed.

        Args:
            summary: AssignmentSummary with aggregated statistics.
        """
        title = "Icon Assignment Summary"
        if summary.dry_run:
            title += " [yellow][DRY RUN][/yellow]"

        header_panel = Panel(title, border_style="green" if not summary.dry_run else "yellow")
        self.console.print(header_panel)

        table = Table(show_header=True, header_style="bold")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right")

        table.add_row("Folders processed", f"{summary.total_folders:,}")
        table.add_row("Icons assigned", f"{summary.assigned:,}")
        table.add_row("No icon source found", f"{summary.no_candidate:,}")
        table.add_row("Paths not found", f"{summary.not_found:,}")
        table.add_row("Failed", f"{summary.failed:,}")
        table.add_row("Duration", self._format_duration(summary.duration_seconds))

        self.console.print(table)

        if summary.errors:
            self._display_errors(summary.errors)

    def display_preview(self, result: FolderResult) -> None:
        """Display the selection for a single folder without writing anything."""
        table = Table(title=f"Preview: {result.path}", show_header=False)
        table.add_column("Field", style="cyan")
        table.add_column("Value")

        table.add_row("Outcome", result.outcome.value)
        if result.target is not None:
            table.add_row("Normalized name", result.target.normalized_name or "(empty)")
        if result.candidate is not None:
            table.add_row("Strategy", result.candidate.strategy.value)
            if result.candidate.matched_token:
                table.add_row("Matched token", result.candidate.matched_token)
            table.add_row("Candidate", str(result.candidate.file_path))
        if result.assignment is not None:
            table.add_row("IconResource", result.assignment.icon_resource)
            table.add_row("InfoTip", result.assignment.info_tip)
        if result.error:
            table.add_row("Error", f"[red]{result.error}[/red]")

        self.console.print(table)

    def _display_errors(self, errors: List[str]) -> None:
        """Display error messages in a separate panel."""
        max_display = 10
        displayed_errors = errors[:max_display]
        remaining = len(errors) - max_display

        error_text = "\n".join(f"- {e}" for e in displayed_errors)
        if remaining > 0:
            error_text += f"\n\n... and {remaining} more errors"

        error_panel = Panel(
            error_text,
            title=f"Errors ({len(errors)})",
            border_style="red",
        )
        self.console.print(error_panel)

    def _format_duration(self, seconds: float) -> str:
        """Convert seconds to human-readable duration (e.g., "5m 23s")."""
        if seconds < 0:
            seconds = 0
        minutes = int(seconds // 60)
        secs = int(seconds % 60)
        return f"{minutes}m {secs}s"

    def _truncate_name(self, name: str, max_length: int = 60) -> str:
        """Truncate long folder names with ellipsis."""
        if len(name) > max_length:
            return name[: max_length - 3] + "..."
        return name
