"""foldericon - Folder Icon Assignment Tool.

A Python application that gives folders a representative icon by locating
the executable or .ico file inside each folder that best represents it and
writing a desktop.ini pointing at that file.
"""

__version__ = "1.0.0"

from .models import (
    AssignmentSummary,
    Candidate,
    CandidateKind,
    DependencyTable,
    FolderOutcome,
    FolderResult,
    FolderTarget,
    IconAssignment,
    PriorityMode,
    SelectionStrategy,
)

__all__ = [
    "__version__",
    "AssignmentSummary",
    "Candidate",
    "CandidateKind",
    "DependencyTable",
    "FolderOutcome",
    "FolderResult",
    "FolderTarget",
    "IconAssignment",
    "PriorityMode",
    "SelectionStrategy",
]


def main() -> None:
    """Entry point for the foldericon CLI application."""
    from foldericon.cli import app
    app()
