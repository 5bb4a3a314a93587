"""Folder scanning package for foldericon.

This package provides the FolderScanner class, which discovers the folders
to process (single or batch mode, with name exclusions) and lists the files
inside each one for the selection strategies.

Example:
    >>> from foldericon.scanning import FolderScanner
    >>> from pathlib import Path
    >>>
    >>> scanner = FolderScanner()
    >>> discovery = scanner.discover_targets([Path("/apps")], batch=True)
    >>> listing = scanner.list_files(discovery.targets[0].path)
"""

from .folder_scanner import FolderScanner

__all__ = ["FolderScanner"]
