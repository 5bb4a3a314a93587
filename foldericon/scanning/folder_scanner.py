"""Folder discovery and file listing.

This module provides the FolderScanner class, the folder source of the icon
assignment workflow. It turns input paths into FolderTarget instances
(single or batch mode, with an exact-name exclusion filter) and takes the
recursive file listing each selection strategy searches.

Example:
    >>> from foldericon.scanning import FolderScanner
    >>> scanner = FolderScanner()
    >>> discovery = scanner.discover_targets([Path("D:/Games")], batch=True)
    >>> for target in discovery.targets:
    ...     listing = scanner.list_files(target.path)
    ...     print(f"{target.name}: {len(listing.executables)} executables")
"""

import os
from pathlib import Path
from typing import Iterable, List, Set, Tuple

from foldericon.matching import normalize_name
from foldericon.models import DiscoveryResult, FolderListing, FolderTarget


class FolderScanner:
    """Discovers target folders and lists the files inside them.

    By default directory entries are sorted at every level of the walk, so
    listings are stable across platforms: files directly in a folder come
    first, then each subfolder in name order. With ``stable_order=False``
    the raw ``os.walk`` enumeration order is kept, which depends on the
    file system.

    Attributes:
        stable_order: Whether listings are sorted while walking.
        _errors: List of error messages encountered during scanning.

    Example:
        >>> scanner = FolderScanner()
        >>> listing = scanner.list_files(Path("/apps/Tools"))
        >>> print(listing.icons)
    """

    def __init__(self, stable_order: bool = True) -> None:
        """Initialize the FolderScanner.

        Args:
            stable_order: Sort directory entries while walking. Defaults to
                True; pass False to keep the file system's enumeration order.
        """
        self.stable_order = stable_order
        self._errors: List[str] = []

    def build_target(self, folder_path: Path) -> FolderTarget:
        """Create the FolderTarget for an existing folder."""
        resolved_path = folder_path.resolve()
        return FolderTarget(
            path=resolved_path,
            name=resolved_path.name,
            normalized_name=normalize_name(resolved_path.name),
        )

    def discover_targets(
        self,
        paths: Iterable[Path],
        batch: bool = False,
        exclude: Iterable[str] = (),
    ) -> DiscoveryResult:
        """Turn input paths into the ordered list of folders to process.

        In single mode each existing input folder becomes a target. In batch
        mode the immediate subdirectories of each input folder become
        targets instead. Folders whose leaf name is in ``exclude`` (exact
        match) are dropped. Input paths that do not exist are collected in
        ``missing`` so the caller can report them; they do not stop the
        remaining paths.

        Args:
            paths: Input folder paths, in the order they should be processed.
            batch: Process immediate subfolders instead of the folders.
            exclude: Exact folder names to skip.

        Returns:
            DiscoveryResult with targets in processing order.

        Example:
            >>> scanner = FolderScanner()
            >>> # D:/Games contains: Doom/, Quake/, Tools/
            >>> result = scanner.discover_targets(
            ...     [Path("D:/Games")], batch=True, exclude=["Tools"]
            ... )
            >>> [t.name for t in result.targets]
            ['Doom', 'Quake']
        """
        excluded_names = set(exclude)
        result = DiscoveryResult()

        for path in paths:
            if not path.exists():
                self._errors.append(f"Folder not found: {path}")
                result.missing.append(path)
                continue

            if not path.is_dir():
                self._errors.append(f"Not a directory: {path}")
                result.missing.append(path)
                continue

            if batch:
                folders = self._immediate_subdirectories(path)
            else:
                folders = [path]

            for folder in folders:
                if folder.name in excluded_names:
                    result.excluded.append(folder)
                    continue
                result.targets.append(self.build_target(folder))

        return result

    def list_files(self, folder_path: Path) -> FolderListing:
        """List every file under a folder, recursively.

        Walks the tree top-down and follows directory symlinks. A directory
        already visited (by device and inode) is not entered again.

        Args:
            folder_path: Folder to list.

        Returns:
            FolderListing with files in walk order. Files that cannot be
            accessed are skipped with errors logged.
        """
        resolved_path = folder_path.resolve()
        listing = FolderListing(root=resolved_path)

        try:
            # Track visited directories by (device, inode) to detect cycles
            visited_dirs: Set[Tuple[int, int]] = set()
            root_stat = resolved_path.stat()
            visited_dirs.add((root_stat.st_dev, root_stat.st_ino))
        except OSError as e:
            self._errors.append(f"Error accessing {folder_path}: {e}")
            return listing

        for dirpath, dirnames, filenames in os.walk(
            resolved_path, followlinks=True, onerror=self._record_walk_error
        ):
            if self.stable_order:
                # Sorted first so the kept alias of a shared directory is stable
                dirnames.sort()
                filenames = sorted(filenames)

            dirs_to_remove = []
            for dirname in dirnames:
                dir_full_path = Path(dirpath) / dirname
                try:
                    dir_stat = dir_full_path.stat()
                except OSError:
                    # Broken symlink or unreadable entry
                    dirs_to_remove.append(dirname)
                    continue
                dir_id = (dir_stat.st_dev, dir_stat.st_ino)
                if dir_id in visited_dirs:
                    dirs_to_remove.append(dirname)
                else:
                    visited_dirs.add(dir_id)

            for dirname in dirs_to_remove:
                dirnames.remove(dirname)

            for filename in filenames:
                listing.files.append(Path(dirpath) / filename)

        return listing

    def get_errors(self) -> List[str]:
        """Get list of errors encountered during scanning operations.

        Returns:
            List of error message strings.
        """
        return self._errors.copy()

    def clear_errors(self) -> None:
        """Clear the list of accumulated errors."""
        self._errors.clear()

    def _immediate_subdirectories(self, base_path: Path) -> List[Path]:
        """Return the immediate child directories of ``base_path``."""
        try:
            children = [child for child in base_path.iterdir() if child.is_dir()]
        except PermissionError:
            self._errors.append(f"Permission denied accessing base path: {base_path}")
            return []
        except OSError as e:
            self._errors.append(f"Error scanning base path {base_path}: {e}")
            return []

        if self.stable_order:
            children.sort(key=lambda child: child.name)
        return children

    def _record_walk_error(self, error: OSError) -> None:
        self._errors.append(f"Error accessing {error.filename}: {error.strerror}")
