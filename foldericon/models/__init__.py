"""
Models package for the folder icon assignment tool.

This package provides convenient imports for all data models:
- SelectionStrategy: Enum for which strategy picked a candidate
- PriorityMode: Enum for the icon file search policy
- CandidateKind, FolderOutcome: Enums for candidates and folder results
- FolderTarget, FolderListing: Folder metadata and file listing
- DependencyTable: Read-only folder name to file name mapping
- Candidate, RelativeReference, IconAssignment: Selection products
- FolderResult, AssignmentSummary: Run results
- StructuralFailure: Per-folder structural error
"""

from .selection_strategy import PriorityMode, SelectionStrategy
from .data_models import (
    EXECUTABLE_SUFFIX,
    ICON_SUFFIX,
    AssignmentSummary,
    Candidate,
    CandidateKind,
    DependencyTable,
    DiscoveryResult,
    FolderListing,
    FolderOutcome,
    FolderResult,
    FolderTarget,
    IconAssignment,
    RelativeReference,
)
from .errors import StructuralFailure

__all__ = [
    "EXECUTABLE_SUFFIX",
    "ICON_SUFFIX",
    "PriorityMode",
    "SelectionStrategy",
    "AssignmentSummary",
    "Candidate",
    "CandidateKind",
    "DependencyTable",
    "DiscoveryResult",
    "FolderListing",
    "FolderOutcome",
    "FolderResult",
    "FolderTarget",
    "IconAssignment",
    "RelativeReference",
    "StructuralFailure",
]
