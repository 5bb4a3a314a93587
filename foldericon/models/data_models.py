"""
Core data models for the folder icon assignment tool.

This module contains the following types:
- FolderTarget: A folder entering processing, with its normalized name
- FolderListing: The recursive file listing of a folder
- DiscoveryResult: Ordered folders and missing paths from the folder source
- DependencyTable: Read-only mapping of folder name to the file to use
- Candidate: The single file chosen as a folder's icon source
- RelativeReference: Path fragment addressing a candidate from its folder
- IconAssignment: The desktop.ini payload for a folder
- FolderResult: The terminal outcome of processing one folder
- AssignmentSummary: Aggregate results of a run
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional

from .selection_strategy import SelectionStrategy

EXECUTABLE_SUFFIX = ".exe"
ICON_SUFFIX = ".ico"


class CandidateKind(Enum):
    """Kind of file a candidate points at."""
    EXECUTABLE = "executable"         # Executable with an embedded icon
    ICON = "icon"                     # Standalone .ico file


class FolderOutcome(Enum):
    """Terminal outcome of processing a single folder.

    A folder that exists but holds no usable file is NO_CANDIDATE, reported
    as "no icon source found". NOT_FOUND is kept for input paths that do not
    exist, so the two are counted separately in the summary.
    """
    ASSIGNED = "assigned"             # desktop.ini written (or would be, in dry run)
    NO_CANDIDATE = "no_candidate"     # No strategy found a usable file
    NOT_FOUND = "not_found"           # Input path does not exist
    FAILED = "failed"                 # Structural failure while relativizing or publishing


@dataclass(frozen=True)
class FolderTarget:
    """A folder entering icon assignment."""
    path: Path                        # Absolute directory path
    name: str                         # Leaf directory name
    normalized_name: str              # Canonical token form of the name


@dataclass
class FolderListing:
    """Recursive listing of the files under a folder, in enumeration order."""
    root: Path                        # Folder the listing was taken from
    files: List[Path] = field(default_factory=list)

    @property
    def executables(self) -> List[Path]:
        """Files with an executable suffix, in listing order."""
        return [f for f in self.files if f.suffix.lower() == EXECUTABLE_SUFFIX]

    @property
    def icons(self) -> List[Path]:
        """Files with an icon suffix, in listing order."""
        return [f for f in self.files if f.suffix.lower() == ICON_SUFFIX]

    @property
    def direct_files(self) -> List[Path]:
        """Files that sit directly inside the root folder."""
        return [f for f in self.files if f.parent == self.root]


class DependencyTable:
    """Read-only mapping from an exact folder name to a file name inside it.

    Lookups are exact on the folder's leaf name (no normalization). The
    underlying mapping is exposed through a MappingProxyType so the table
    cannot be mutated after construction.

    Example:
        >>> table = DependencyTable({"Visual Studio Code": "Code.exe"})
        >>> table.lookup("Visual Studio Code")
        'Code.exe'
        >>> table.lookup("visual studio code") is None
        True
    """

    def __init__(self, entries: Optional[Mapping[str, str]] = None) -> None:
        self._entries: Mapping[str, str] = MappingProxyType(dict(entries or {}))

    @classmethod
    def from_pairs(cls, pairs: Iterable[str]) -> "DependencyTable":
        """Build a table from ``NAME=FILE`` strings.

        Args:
            pairs: Strings of the form ``Folder Name=file.exe``. The folder
                name may contain spaces; the first ``=`` splits the pair.

        Raises:
            ValueError: If a pair has no ``=`` or an empty side.
        """
        entries: Dict[str, str] = {}
        for pair in pairs:
            if "=" not in pair:
                raise ValueError(f"Dependency must be NAME=FILE, got: {pair!r}")
            name, file_name = pair.split("=", 1)
            name, file_name = name.strip(), file_name.strip()
            if not name or not file_name:
                raise ValueError(f"Dependency must be NAME=FILE, got: {pair!r}")
            entries[name] = file_name
        return cls(entries)

    @classmethod
    def from_json_file(cls, path: Path) -> "DependencyTable":
        """Load a table from a JSON object of folder name to file name.

        Raises:
            ValueError: If the file is not a JSON object of strings.
            OSError: If the file cannot be read.
        """
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid dependencies file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Dependencies file must contain a JSON object: {path}")
        for key, value in data.items():
            if not isinstance(value, str) or not value:
                raise ValueError(
                    f"Dependency for {key!r} must be a non-empty file name string"
                )
        return cls(data)

    def merged_with(self, other: "DependencyTable") -> "DependencyTable":
        """Return a new table where entries of ``other`` win on key clashes."""
        combined = dict(self._entries)
        combined.update(other.entries)
        return DependencyTable(combined)

    def lookup(self, folder_name: str) -> Optional[str]:
        """Return the file name mapped to ``folder_name``, or None."""
        return self._entries.get(folder_name)

    @property
    def entries(self) -> Mapping[str, str]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, folder_name: object) -> bool:
        return folder_name in self._entries


@dataclass
class DiscoveryResult:
    """Ordered folders produced by the folder source for one run."""
    targets: List[FolderTarget] = field(default_factory=list)
    missing: List[Path] = field(default_factory=list)   # Input paths that do not exist
    excluded: List[Path] = field(default_factory=list)  # Folders dropped by name


@dataclass(frozen=True)
class Candidate:
    """The file selected as a folder's icon source."""
    file_path: Path                   # Absolute file path
    directory: Path                   # Absolute containing directory
    kind: CandidateKind               # Executable or icon
    strategy: SelectionStrategy       # Which strategy selected it
    matched_token: Optional[str] = None  # Token used by token search

    @property
    def file_name(self) -> str:
        return self.file_path.name


@dataclass(frozen=True)
class RelativeReference:
    """Path fragment that addresses a candidate from its folder."""
    prefix_path: str                  # Empty, or e.g. "\\bin\\win64"
    file_name: str                    # Candidate file name


@dataclass(frozen=True)
class IconAssignment:
    """The desktop.ini payload for one folder."""
    icon_resource: str                # e.g. ".\\bin\\app.exe,0"
    info_tip: str                     # Candidate file name


@dataclass
class FolderResult:
    """Outcome of processing one folder (or one missing input path)."""
    path: Path                        # Folder path as processed
    outcome: FolderOutcome            # Terminal outcome
    target: Optional[FolderTarget] = None
    candidate: Optional[Candidate] = None
    assignment: Optional[IconAssignment] = None
    error: Optional[str] = None       # Error context for NOT_FOUND / FAILED


@dataclass
class AssignmentSummary:
    """Summary of an icon assignment run returned by IconOrchestrator."""
    total_folders: int = 0            # Folders that reached the selection chain
    assigned: int = 0                 # Folders given an icon
    no_candidate: int = 0             # Folders left unmodified
    not_found: int = 0                # Input paths that did not exist
    failed: int = 0                   # Folders with a structural failure
    results: List[FolderResult] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    duration_seconds: float = 0.0     # Total run duration
    dry_run: bool = False             # Whether publishing was skipped
    interrupted: bool = False         # Whether the run was interrupted by user

    @property
    def has_errors(self) -> bool:
        return self.failed > 0 or self.not_found > 0
