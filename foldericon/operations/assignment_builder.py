"""
Relative icon references and desktop.ini payload assembly.

The icon reference in desktop.ini is written relative to the folder
(``.\\bin\\win64\\app.exe,0``) so it keeps working when the folder is moved
or its drive letter changes.
"""

from pathlib import Path, PurePath

from foldericon.models import (
    Candidate,
    IconAssignment,
    RelativeReference,
    StructuralFailure,
)

# desktop.ini is read by the Windows shell, so references always use backslashes
SHELL_SEPARATOR = "\\"
CURRENT_DIRECTORY_MARKER = "."
# Selects the first icon resource in the file
ICON_INDEX_SUFFIX = ",0"


def relativize(
    candidate_directory: PurePath,
    folder_path: PurePath,
    separator: str = SHELL_SEPARATOR,
) -> str:
    """Compute the path fragment from a folder to a nested candidate directory.

    Args:
        candidate_directory: Directory containing the candidate file.
        folder_path: The folder receiving the icon.
        separator: Separator placed before every segment.

    Returns:
        Empty string when the candidate sits directly in the folder,
        otherwise every extra segment prefixed with ``separator``.

    Raises:
        StructuralFailure: If the candidate directory is not inside the folder.

    Example:
        >>> relativize(PureWindowsPath(r"C:\\Apps\\Foo\\bin\\win64"),
        ...            PureWindowsPath(r"C:\\Apps\\Foo"))
        '\\\\bin\\\\win64'
    """
    try:
        relative = candidate_directory.relative_to(folder_path)
    except ValueError as e:
        raise StructuralFailure(
            folder_path,
            "relativize",
            f"candidate directory {candidate_directory} is not inside the folder",
            e,
        ) from e

    return "".join(separator + part for part in relative.parts)


def build_reference(candidate: Candidate, folder_path: Path) -> RelativeReference:
    """Build the RelativeReference for a candidate inside ``folder_path``."""
    return RelativeReference(
        prefix_path=relativize(candidate.directory, folder_path),
        file_name=candidate.file_name,
    )


def compose_assignment(
    candidate: Candidate, reference: RelativeReference
) -> IconAssignment:
    """Assemble the IconAssignment for a candidate.

    Example:
        >>> compose_assignment(candidate, RelativeReference("\\\\bin", "app.exe"))
        IconAssignment(icon_resource='.\\\\bin\\\\app.exe,0', info_tip='app.exe')
    """
    icon_resource = (
        CURRENT_DIRECTORY_MARKER
        + reference.prefix_path
        + SHELL_SEPARATOR
        + reference.file_name
        + ICON_INDEX_SUFFIX
    )
    return IconAssignment(icon_resource=icon_resource, info_tip=candidate.file_name)
