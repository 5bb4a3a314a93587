"""Terminal UI package for foldericon."""

from .assignment_tui import AssignmentTUI

__all__ = ["AssignmentTUI"]
