"""
desktop.ini publishing for the folder icon assignment tool.

This module contains the DesktopIniPublisher class, which writes a folder's
IconAssignment as a desktop.ini and registers it with the shell.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from foldericon.models import IconAssignment, StructuralFailure

from .shell import (
    FILE_ATTRIBUTE_HIDDEN,
    FILE_ATTRIBUTE_READONLY,
    FILE_ATTRIBUTE_SYSTEM,
    ShellIntegration,
    default_shell,
)

logger = logging.getLogger("foldericon.operations")


class DesktopIniPublisher:
    """
    Writes desktop.ini files and registers them with the shell.

    The file is first written next to its destination and then moved into
    place, so a folder never holds a half-written desktop.ini. All steps
    support dry-run mode.
    """

    DESKTOP_INI_NAME = "desktop.ini"
    # The shell reads desktop.ini as ANSI or as UTF-16 with a BOM
    ENCODING = "utf-16"

    def __init__(
        self, shell: Optional[ShellIntegration] = None, dry_run: bool = False
    ) -> None:
        """
        Create a publisher.

        Parameters:
            shell (ShellIntegration): Attribute and notification backend. Defaults to the one for the running platform.
            dry_run (bool): If True, report what would be written without touching the file system.
        """
        self.shell = shell if shell is not None else default_shell()
        self.dry_run = dry_run

    def render(self, assignment: IconAssignment) -> str:
        """
        Render the desktop.ini text for an assignment.

        The resource section points at the icon; the view state section holds
        fixed placeholder fields.
        """
        lines = [
            "[.ShellClassInfo]",
            f"IconResource={assignment.icon_resource}",
            f"InfoTip={assignment.info_tip}",
            "[ViewState]",
            "Mode=",
            "Vid=",
            "FolderType=Generic",
        ]
        return "\n".join(lines) + "\n"

    def publish(self, folder_path: Path, assignment: IconAssignment) -> Path:
        """
        Write ``assignment`` as the folder's desktop.ini and register it.

        Steps: clear the folder's read-only/system flags, remove any existing
        desktop.ini, write the new one through a temporary file, mark it
        hidden and system, restore the folder's attributes with read-only
        added, and notify the shell. If a step after the first fails, the
        folder's original attributes are put back unchanged.

        Parameters:
            folder_path (Path): Folder receiving the icon.
            assignment (IconAssignment): Payload to write.

        Returns:
            Path: Location of the desktop.ini (not created in dry-run mode).

        Raises:
            StructuralFailure: If any file system step fails.
        """
        ini_path = folder_path / self.DESKTOP_INI_NAME

        if self.dry_run:
            logger.debug("[dry run] Would write %s: %s", ini_path, assignment.icon_resource)
            return ini_path

        try:
            original_attributes = self.shell.get_attributes(folder_path)
            self.shell.set_attributes(
                folder_path,
                original_attributes & ~(FILE_ATTRIBUTE_READONLY | FILE_ATTRIBUTE_SYSTEM),
            )

            # The folder gets its own flags back even when the write fails
            restored_attributes = original_attributes
            try:
                self.remove_existing(folder_path)
                self._write_atomically(ini_path, self.render(assignment))
                self.shell.set_attributes(ini_path, FILE_ATTRIBUTE_HIDDEN | FILE_ATTRIBUTE_SYSTEM)
                restored_attributes = original_attributes | FILE_ATTRIBUTE_READONLY
            finally:
                self.shell.set_attributes(folder_path, restored_attributes)

            self.shell.notify_folder_changed(folder_path)
        except OSError as e:
            raise StructuralFailure(folder_path, "publish", "cannot write desktop.ini", e) from e

        logger.debug("Wrote %s: %s", ini_path, assignment.icon_resource)
        return ini_path

    def remove_existing(self, folder_path: Path) -> bool:
        """
        Remove a folder's existing desktop.ini, if any.

        The file's hidden/system/read-only flags are cleared first, since
        Windows refuses to delete a read-only file.

        Returns:
            bool: True if a file was removed (or would be, in dry-run mode).
        """
        ini_path = folder_path / self.DESKTOP_INI_NAME
        if not ini_path.exists():
            return False

        if self.dry_run:
            logger.debug("[dry run] Would remove %s", ini_path)
            return True

        self.shell.set_attributes(ini_path, 0)
        ini_path.unlink()
        logger.debug("Removed existing %s", ini_path)
        return True

    def _write_atomically(self, ini_path: Path, content: str) -> None:
        """
        Write ``content`` to a temporary file beside ``ini_path`` and move it into place.
        """
        temp_path = ini_path.with_name(f".{ini_path.name}.{os.getpid()}.tmp")
        try:
            with open(temp_path, "w", encoding=self.ENCODING, newline="\r\n") as f:
                f.write(content)
            os.replace(temp_path, ini_path)
        except OSError:
            if temp_path.exists():
                temp_path.unlink()
            raise
