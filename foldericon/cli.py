"""
Folder Icon Assignment Tool - CLI Interface.

A command-line interface for giving folders a representative icon. For each
folder the tool picks the executable or .ico file that best represents it
and writes a desktop.ini pointing at that file.

Usage Examples:
    # Assign icons to every subfolder of a games folder
    foldericon assign "D:/Games" --batch

    # Prefer <folder name>.ico files, skip two folders
    foldericon assign "D:/Games" --batch --priority like_folder -x Steam -x Tools

    # Force a specific file for one folder
    foldericon assign "D:/Apps/VS Code" -d "VS Code=Code.exe"

    # Preview the selection without writing anything
    foldericon preview "D:/Games/Doom"

    # Dry run with a log file
    foldericon assign "D:/Games" --batch --dry-run --log-file icons.log --verbose
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from foldericon.matching import CandidateSelector
from foldericon.models import DependencyTable, FolderOutcome, PriorityMode
from foldericon.orchestration import AssignmentLogger, IconOrchestrator
from foldericon.scanning import FolderScanner
from foldericon.ui import AssignmentTUI

__version__ = "1.0.0"

# Initialize Typer app
app = typer.Typer(
    name="foldericon",
    help="Folder Icon Assignment Tool - Give folders the icon of the program they contain.",
    add_completion=False,
    no_args_is_help=True,
)

# Rich console for consistent output formatting
console = Console()


def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(f"Folder Icon Assignment Tool v{__version__}")
        raise typer.Exit()


def validate_similarity(value: Optional[float]) -> Optional[float]:
    """
    Validate the fuzzy similarity threshold is within valid range.

    Raises:
        typer.BadParameter: If value is out of range.
    """
    if value is not None and not 0.0 <= value <= 100.0:
        raise typer.BadParameter("Similarity must be between 0 and 100")
    return value


def load_dependencies(
    pairs: Optional[List[str]], dependencies_file: Optional[Path]
) -> DependencyTable:
    """
    Build the dependency table from the command-line options.

    Entries given with --dependency win over entries from --dependencies-file.

    Raises:
        typer.BadParameter: If an entry or the file is malformed.
    """
    table = DependencyTable()

    if dependencies_file is not None:
        try:
            table = DependencyTable.from_json_file(dependencies_file)
        except (ValueError, OSError) as e:
            raise typer.BadParameter(str(e), param_hint="--dependencies-file")

    if pairs:
        try:
            table = table.merged_with(DependencyTable.from_pairs(pairs))
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="--dependency")

    return table


def configure_logging(verbose: bool) -> None:
    """Route the foldericon loggers through Rich."""
    package_logger = logging.getLogger("foldericon")
    package_logger.handlers.clear()
    package_logger.addHandler(RichHandler(console=console, show_path=False))
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    package_logger.propagate = False


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Folder Icon Assignment Tool - Give folders the icon of the program they contain."""
    pass


@app.command()
def assign(
    paths: Optional[List[Path]] = typer.Argument(
        None,
        help="Folders to process. Prompts for one when omitted.",
        exists=False,  # Missing paths are reported per path
    ),
    batch: bool = typer.Option(
        False,
        "--batch",
        "-b",
        help="Process the immediate subfolders of each path.",
    ),
    priority: Optional[PriorityMode] = typer.Option(
        None,
        "--priority",
        "-p",
        case_sensitive=False,
        help="Icon file search policy used when no executable matches the folder name.",
    ),
    icon_first: bool = typer.Option(
        False,
        "--icon-first",
        help="With --priority like_folder, prefer <name>.ico over a matching executable.",
    ),
    dependency: Optional[List[str]] = typer.Option(
        None,
        "--dependency",
        "-d",
        help="Use a specific file for a folder, as NAME=FILE. Repeatable.",
    ),
    dependencies_file: Optional[Path] = typer.Option(
        None,
        "--dependencies-file",
        help="JSON object mapping folder names to file names.",
    ),
    exclude: Optional[List[str]] = typer.Option(
        None,
        "--exclude",
        "-x",
        help="Folder name to skip (exact match). Repeatable.",
    ),
    min_similarity: Optional[float] = typer.Option(
        None,
        "--min-similarity",
        help="Also accept executables whose name similarity (0-100) reaches this value.",
        callback=validate_similarity,
    ),
    filesystem_order: bool = typer.Option(
        False,
        "--filesystem-order",
        help="Keep the file system's enumeration order instead of sorting.",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Select icons without writing desktop.ini files.",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        "-l",
        help="Path for log file output.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Enable verbose output.",
    ),
) -> None:
    """
    Assign icons to folders.

    For each folder, the icon source is chosen in this order:
    1. Dependency: the file given for the folder with --dependency
    2. Token: an executable whose name contains a word of the folder name
    3. Icon priority (with --priority) or fuzzy executable name matching
    """
    configure_logging(verbose)
    dependencies = load_dependencies(dependency, dependencies_file)
    tui = AssignmentTUI(console=console)

    if not paths:
        folder = tui.prompt_for_folder()
        if folder is None:
            console.print("[red]Error:[/red] No folder given.")
            raise typer.Exit(1)
        paths = [folder]

    # Check the log location before any folder is touched
    if log_file:
        try:
            AssignmentLogger(log_file, dry_run=dry_run)
        except OSError as e:
            if dry_run:
                console.print(
                    f"[yellow]Warning:[/yellow] Cannot write to log file: {e}. "
                    "Continuing without logging."
                )
                log_file = None
            else:
                console.print(f"[red]Error:[/red] Cannot write to log file: {e}")
                raise typer.Exit(1)

    try:
        if dry_run:
            console.print("[yellow][DRY RUN MODE][/yellow] No desktop.ini will be written.\n")

        orchestrator = IconOrchestrator(
            paths=paths,
            batch=batch,
            exclude=exclude or [],
            selector=CandidateSelector(
                dependencies=dependencies,
                priority=priority,
                icon_first=icon_first,
                min_similarity=min_similarity,
            ),
            scanner=FolderScanner(stable_order=not filesystem_order),
            tui=tui,
            dry_run=dry_run,
            verbose=verbose,
            log_file_path=log_file,
            write_log=log_file is not None,
        )

        summary = orchestrator.run()

        if log_file:
            console.print(f"\n[dim]Log written to: {log_file}[/dim]")

        # Return appropriate exit code
        if summary.interrupted:
            raise typer.Exit(130)
        elif summary.has_errors:
            raise typer.Exit(1)

    except KeyboardInterrupt:
        console.print("\n[yellow]Run interrupted by user.[/yellow]")
        raise typer.Exit(130)

    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def preview(
    path: Path = typer.Argument(
        ...,
        help="Folder to preview.",
        exists=False,  # We do our own validation
    ),
    priority: Optional[PriorityMode] = typer.Option(
        None,
        "--priority",
        "-p",
        case_sensitive=False,
        help="Icon file search policy used when no executable matches the folder name.",
    ),
    icon_first: bool = typer.Option(
        False,
        "--icon-first",
        help="With --priority like_folder, prefer <name>.ico over a matching executable.",
    ),
    dependency: Optional[List[str]] = typer.Option(
        None,
        "--dependency",
        "-d",
        help="Use a specific file for a folder, as NAME=FILE. Repeatable.",
    ),
    dependencies_file: Optional[Path] = typer.Option(
        None,
        "--dependencies-file",
        help="JSON object mapping folder names to file names.",
    ),
    min_similarity: Optional[float] = typer.Option(
        None,
        "--min-similarity",
        help="Also accept executables whose name similarity (0-100) reaches this value.",
        callback=validate_similarity,
    ),
    filesystem_order: bool = typer.Option(
        False,
        "--filesystem-order",
        help="Keep the file system's enumeration order instead of sorting.",
    ),
) -> None:
    """
    Show which file a folder's icon would come from, without writing anything.
    """
    configure_logging(False)
    dependencies = load_dependencies(dependency, dependencies_file)

    orchestrator = IconOrchestrator(
        paths=[path],
        selector=CandidateSelector(
            dependencies=dependencies,
            priority=priority,
            icon_first=icon_first,
            min_similarity=min_similarity,
        ),
        scanner=FolderScanner(stable_order=not filesystem_order),
        tui=AssignmentTUI(console=console),
        dry_run=True,
        write_log=False,
    )

    result = orchestrator.preview(path)
    orchestrator.tui.display_preview(result)

    if result.outcome in (FolderOutcome.NOT_FOUND, FolderOutcome.FAILED):
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
