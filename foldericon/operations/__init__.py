"""Icon assignment operations package for foldericon.

This package turns a selected candidate into a published desktop.ini:
- relativize / build_reference: path from the folder to the candidate
- compose_assignment: the IconAssignment payload
- DesktopIniPublisher: writes desktop.ini and registers it with the shell

Example:
    >>> from foldericon.operations import (
    ...     DesktopIniPublisher, build_reference, compose_assignment,
    ... )
    >>> reference = build_reference(candidate, target.path)
    >>> assignment = compose_assignment(candidate, reference)
    >>> DesktopIniPublisher().publish(target.path, assignment)
"""

from .assignment_builder import build_reference, compose_assignment, relativize
from .desktop_ini import DesktopIniPublisher
from .shell import PosixShell, ShellIntegration, WindowsShell, default_shell

__all__ = [
    "DesktopIniPublisher",
    "PosixShell",
    "ShellIntegration",
    "WindowsShell",
    "build_reference",
    "compose_assignment",
    "default_shell",
    "relativize",
]
