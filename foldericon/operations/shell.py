"""
Shell integration for folder icon registration.

The Windows shell only reads a folder's desktop.ini when the file is marked
hidden and system and the folder itself is marked read-only (or system).
WindowsShell sets those attributes through pywin32 and tells Explorer the
folder changed. PosixShell keeps the same interface on other platforms,
where there is no attribute model to update and nothing to notify.
"""

import logging
import os
import sys
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger("foldericon.operations")

# Win32 file attribute flags (winnt.h)
FILE_ATTRIBUTE_READONLY = 0x01
FILE_ATTRIBUTE_HIDDEN = 0x02
FILE_ATTRIBUTE_SYSTEM = 0x04
FILE_ATTRIBUTE_NORMAL = 0x80


class ShellIntegration(ABC):
    """Interface the publisher uses for attributes and shell notification.

    Implementations report failures as OSError.
    """

    @abstractmethod
    def get_attributes(self, path: Path) -> int:
        ...

    @abstractmethod
    def set_attributes(self, path: Path, attributes: int) -> None:
        ...

    @abstractmethod
    def notify_folder_changed(self, folder_path: Path) -> None:
        ...


class WindowsShell(ShellIntegration):
    """Shell integration backed by pywin32."""

    def __init__(self) -> None:
        import pywintypes
        import win32api
        from win32com.shell import shell, shellcon

        self._win32_error = pywintypes.error
        self._win32api = win32api
        self._shell = shell
        self._shellcon = shellcon

    def _os_error(self, error, path: Path) -> OSError:
        # pywintypes.error carries (winerror, funcname, strerror)
        return OSError(error.winerror, error.strerror, str(path))

    def get_attributes(self, path: Path) -> int:
        try:
            return self._win32api.GetFileAttributes(str(path))
        except self._win32_error as e:
            raise self._os_error(e, path) from e

    def set_attributes(self, path: Path, attributes: int) -> None:
        try:
            # SetFileAttributes rejects 0; NORMAL means "no other attributes"
            self._win32api.SetFileAttributes(str(path), attributes or FILE_ATTRIBUTE_NORMAL)
        except self._win32_error as e:
            raise self._os_error(e, path) from e

    def notify_folder_changed(self, folder_path: Path) -> None:
        try:
            self._shell.SHChangeNotify(
                self._shellcon.SHCNE_UPDATEDIR,
                self._shellcon.SHCNF_PATH | self._shellcon.SHCNF_FLUSH,
                os.fsencode(str(folder_path)),
                None,
            )
        except self._win32_error as e:
            raise self._os_error(e, folder_path) from e


class PosixShell(ShellIntegration):
    """Shell integration for platforms without Windows file attributes."""

    def get_attributes(self, path: Path) -> int:
        # Raises FileNotFoundError like GetFileAttributes does
        path.stat()
        return 0

    def set_attributes(self, path: Path, attributes: int) -> None:
        logger.debug("Skipping attributes 0x%02x for %s (not Windows)", attributes, path)

    def notify_folder_changed(self, folder_path: Path) -> None:
        logger.debug("Shell notification not available for %s", folder_path)


def default_shell() -> ShellIntegration:
    """Return the shell integration for the running platform."""
    if sys.platform == "win32":
        return WindowsShell()
    return PosixShell()
