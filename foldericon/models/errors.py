"""Exceptions raised by the folder icon assignment tool."""

from pathlib import Path
from typing import Optional


class StructuralFailure(Exception):
    """A folder could not be given its icon for a structural reason.

    Raised when the nesting invariant between a candidate and its folder is
    violated, or when the desktop.ini cannot be written or moved into place.
    Carries enough context to report which folder failed and where.

    Attributes:
        folder_path: Folder being processed.
        stage: Stage that failed ("relativize" or "publish").
        cause: Underlying exception, if any.
    """

    def __init__(
        self,
        folder_path: Path,
        stage: str,
        message: str,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.folder_path = folder_path
        self.stage = stage
        self.cause = cause
        detail = f"{stage} failed for {folder_path}: {message}"
        if cause is not None:
            detail += f" ({cause})"
        super().__init__(detail)
