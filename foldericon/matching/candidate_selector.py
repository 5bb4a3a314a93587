"""Icon candidate selection for folders.

This module provides the CandidateSelector class which implements the
selection chain that picks one file inside a folder as the folder's icon
source. Strategies are evaluated in order, returning early on the first
successful selection:
    1. Dependency - caller-supplied exact folder name to file name table
    2. Token - a token of the normalized folder name inside an executable name
    3. Icon Priority - an .ico file under the selected PriorityMode
    4. Fuzzy - every executable name loosely matched against the folder name

Steps 3 and 4 are alternatives: the icon priority step runs when a priority
mode is selected, the fuzzy step runs when none is.

Every strategy keeps the first match in listing order. The listing order is
decided by FolderScanner (stable by default, raw file system order on
request); no strategy ranks multiple matches against each other.

Example:
    >>> from foldericon.matching import CandidateSelector
    >>> selector = CandidateSelector(priority=PriorityMode.LIKE_FOLDER)
    >>> candidate = selector.select(target, listing)
    >>> if candidate:
    ...     print(f"{candidate.file_name} via {candidate.strategy.value}")
"""

import logging
import re
from fnmatch import fnmatchcase
from pathlib import Path
from typing import List, Optional

from rapidfuzz import fuzz

from foldericon.models import (
    Candidate,
    CandidateKind,
    DependencyTable,
    FolderListing,
    FolderTarget,
    PriorityMode,
    SelectionStrategy,
)

from .name_normalizer import name_tokens, normalize_name

logger = logging.getLogger("foldericon.matching")

ICON_ICO_NAME = "icon.ico"


class CandidateSelector:
    """Selects the icon source file for a folder using a chain of strategies.

    Attributes:
        dependencies: Read-only table of folder name to required file name.
        priority: Icon search policy, or None to use the fuzzy fallback.
        icon_first: With PriorityMode.LIKE_FOLDER, let a ``<name>.ico``
            replace an executable found by token search.
        min_similarity: Optional RapidFuzz ratio (0-100) enabling an extra
            fuzzy predicate. None disables it.

    Example:
        >>> selector = CandidateSelector(
        ...     dependencies=DependencyTable({"VS Code": "Code.exe"}),
        ...     priority=None,
        ... )
        >>> candidate = selector.select(target, listing)
    """

    def __init__(
        self,
        dependencies: Optional[DependencyTable] = None,
        priority: Optional[PriorityMode] = None,
        icon_first: bool = False,
        min_similarity: Optional[float] = None,
    ) -> None:
        """Initialize the CandidateSelector.

        Raises:
            ValueError: If min_similarity is not between 0 and 100.
        """
        if min_similarity is not None and not 0.0 <= min_similarity <= 100.0:
            raise ValueError(
                f"min_similarity must be between 0 and 100, got {min_similarity}"
            )
        self.dependencies = dependencies if dependencies is not None else DependencyTable()
        self.priority = priority
        self.icon_first = icon_first
        self.min_similarity = min_similarity

    def select(self, target: FolderTarget, listing: FolderListing) -> Optional[Candidate]:
        """Run the selection chain for one folder.

        Args:
            target: The folder being processed.
            listing: Recursive file listing of the folder.

        Returns:
            The selected Candidate, or None if no strategy found a file.
        """
        # Step 1: Dependency table always wins
        candidate = self.resolve_dependency(target, listing)
        if candidate is not None:
            return candidate

        # Step 2: Token search over executables
        candidate = self.search_tokens(target, listing)

        if candidate is not None:
            if self.icon_first and self.priority is PriorityMode.LIKE_FOLDER:
                icon = self.resolve_icon_priority(target, listing)
                if icon is not None:
                    logger.debug(
                        "%s: %s replaces %s (icon first)",
                        target.name, icon.file_name, candidate.file_name,
                    )
                    return icon
            return candidate

        # Step 3: Icon priority mode, when one is selected
        if self.priority is not None:
            return self.resolve_icon_priority(target, listing)

        # Step 4: Fuzzy fallback
        return self.match_fuzzy(target, listing)

    def resolve_dependency(
        self, target: FolderTarget, listing: FolderListing
    ) -> Optional[Candidate]:
        """Step 1: Look the folder's exact leaf name up in the dependency table.

        The mapped file must actually exist somewhere in the folder tree;
        file names compare case-insensitively, as Windows does.

        Returns:
            Candidate of kind EXECUTABLE, or None if the folder has no entry
            or the mapped file is missing.
        """
        file_name = self.dependencies.lookup(target.name)
        if file_name is None:
            return None

        wanted = file_name.lower()
        for path in listing.files:
            if path.name.lower() == wanted:
                return self._make_candidate(
                    path, CandidateKind.EXECUTABLE, SelectionStrategy.DEPENDENCY
                )

        logger.debug(
            "%s: dependency %s not found in folder, falling through",
            target.name, file_name,
        )
        return None

    def matched_tokens(self, normalized_name: str, listing: FolderListing) -> List[str]:
        """Return the tokens of ``normalized_name`` found in an executable name.

        Tokens are returned in the order they were tried.
        """
        executables = listing.executables
        return [
            token
            for token in name_tokens(normalized_name)
            if self._find_executable_with_token(token, executables) is not None
        ]

    def search_tokens(
        self, target: FolderTarget, listing: FolderListing
    ) -> Optional[Candidate]:
        """Step 2: Find an executable whose name contains a folder name token.

        All tokens are tried and the matching ones recorded. The first
        matching token is then searched again and its first executable kept.
        Which executable is "first" depends on the listing order.

        Returns:
            Candidate of kind EXECUTABLE with ``matched_token`` set, or None.
        """
        tokens = self.matched_tokens(target.normalized_name, listing)
        if not tokens:
            return None

        logger.debug("%s: tokens matched %s", target.name, tokens)
        token = tokens[0]
        path = self._find_executable_with_token(token, listing.executables)
        if path is None:
            return None

        return self._make_candidate(
            path, CandidateKind.EXECUTABLE, SelectionStrategy.TOKEN, matched_token=token
        )

    def resolve_icon_priority(
        self, target: FolderTarget, listing: FolderListing
    ) -> Optional[Candidate]:
        """Step 3: Search for an icon file under the selected priority mode.

        Only the selected mode is evaluated; a miss is final and does not
        fall back to another mode.

        - LIKE_FOLDER: ``<normalized name>.ico`` anywhere in the tree.
        - ICON_ICO: ``icon.ico`` directly inside the folder.
        - ANY: any ``.ico`` anywhere in the tree.

        Returns:
            Candidate of kind ICON, or None.
        """
        if self.priority is None:
            return None

        if self.priority is PriorityMode.LIKE_FOLDER:
            if not target.normalized_name:
                return None
            wanted = f"{target.normalized_name}.ico"
            matches = [p for p in listing.icons if p.name.lower() == wanted]
        elif self.priority is PriorityMode.ICON_ICO:
            matches = [
                p for p in listing.direct_files if p.name.lower() == ICON_ICO_NAME
            ]
        else:
            matches = listing.icons

        if not matches:
            logger.debug(
                "%s: no icon for priority mode %s", target.name, self.priority.value
            )
            return None

        return self._make_candidate(
            matches[0], CandidateKind.ICON, SelectionStrategy.ICON_PRIORITY
        )

    def match_fuzzy(
        self, target: FolderTarget, listing: FolderListing
    ) -> Optional[Candidate]:
        """Step 4: Loosely match every executable name against the folder name.

        Each executable's stem is normalized and kept if any predicate of
        ``_is_fuzzy_match`` holds. The first kept executable wins.

        Returns:
            Candidate of kind EXECUTABLE, or None if nothing matched.
        """
        folder_name = target.normalized_name
        if not folder_name:
            return None

        matches: List[Path] = []
        for path in listing.executables:
            exe_name = normalize_name(path.stem)
            # An empty name is contained in every folder name
            if not exe_name:
                continue
            if self._is_fuzzy_match(folder_name, exe_name):
                matches.append(path)

        if not matches:
            return None

        logger.debug(
            "%s: fuzzy matches %s", target.name, [p.name for p in matches]
        )
        return self._make_candidate(
            matches[0], CandidateKind.EXECUTABLE, SelectionStrategy.FUZZY
        )

    def _is_fuzzy_match(self, folder_name: str, exe_name: str) -> bool:
        """Check the loose matching predicates for two normalized names.

        Args:
            folder_name: Normalized folder name.
            exe_name: Normalized executable stem.

        Returns:
            True if any predicate holds.

        Example:
            >>> selector._is_fuzzy_match("vscode", "code")
            True
        """
        # Wildcard equality, folder name used as the pattern
        if fnmatchcase(exe_name, folder_name):
            return True

        # Regular-expression containment
        if re.search(re.escape(folder_name), exe_name):
            return True

        if exe_name in folder_name:
            return True

        if folder_name in exe_name:
            return True

        if self.min_similarity is not None:
            if fuzz.ratio(folder_name, exe_name) >= self.min_similarity:
                return True

        return False

    def _find_executable_with_token(
        self, token: str, executables: List[Path]
    ) -> Optional[Path]:
        """Return the first executable whose lower-cased stem contains token."""
        for path in executables:
            if token in path.stem.lower():
                return path
        return None

    def _make_candidate(
        self,
        path: Path,
        kind: CandidateKind,
        strategy: SelectionStrategy,
        matched_token: Optional[str] = None,
    ) -> Candidate:
        return Candidate(
            file_path=path,
            directory=path.parent,
            kind=kind,
            strategy=strategy,
            matched_token=matched_token,
        )
