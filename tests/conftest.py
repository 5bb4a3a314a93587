"""Pytest fixtures for foldericon tests."""

import io
import tempfile
from pathlib import Path
from typing import Callable, Dict, Generator, Iterable, List, Tuple

import pytest
from rich.console import Console

from foldericon.matching import CandidateSelector, normalize_name
from foldericon.models import FolderListing, FolderTarget
from foldericon.operations import DesktopIniPublisher, ShellIntegration
from foldericon.scanning import FolderScanner
from foldericon.ui import AssignmentTUI


def pytest_configure(config) -> None:
    config.addinivalue_line("markers", "unit: fast tests of a single component")
    config.addinivalue_line("markers", "integration: tests that run a whole workflow on disk")


class RecordingShell(ShellIntegration):
    """ShellIntegration that records calls instead of touching Windows.

    Attributes are kept in a dict keyed by path so tests can assert on what
    the publisher asked for.
    """

    def __init__(self, fail_on_notify: bool = False) -> None:
        self.attributes: Dict[Path, int] = {}
        self.calls: List[Tuple[str, Path, int]] = []
        self.notified: List[Path] = []
        self.fail_on_notify = fail_on_notify

    def get_attributes(self, path: Path) -> int:
        path.stat()
        self.calls.append(("get", path, self.attributes.get(path, 0)))
        return self.attributes.get(path, 0)

    def set_attributes(self, path: Path, attributes: int) -> None:
        self.calls.append(("set", path, attributes))
        self.attributes[path] = attributes

    def notify_folder_changed(self, folder_path: Path) -> None:
        if self.fail_on_notify:
            raise OSError("shell notification failed")
        self.notified.append(folder_path)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for isolated test environments.

    Yields:
        Resolved path to the temporary directory.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def make_tree(temp_dir: Path) -> Callable[[str, Iterable[str]], Path]:
    """Factory that creates a folder with the given relative file paths.

    Example:
        folder = make_tree("My Game", ["bin/mygame_launcher.exe", "readme.txt"])
    """

    def _make(folder_name: str, files: Iterable[str]) -> Path:
        folder = temp_dir / folder_name
        folder.mkdir(parents=True, exist_ok=True)
        for relative in files:
            file_path = folder / relative
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_bytes(b"MZ")
        return folder

    return _make


@pytest.fixture
def scanner() -> FolderScanner:
    return FolderScanner()


@pytest.fixture
def select_in(scanner: FolderScanner):
    """Run a CandidateSelector against a folder on disk."""

    def _select(selector: CandidateSelector, folder: Path):
        target = scanner.build_target(folder)
        listing = scanner.list_files(folder)
        return selector.select(target, listing)

    return _select


@pytest.fixture
def listing_for() -> Callable[[str, Iterable[str]], Tuple[FolderTarget, FolderListing]]:
    """Build an in-memory target and listing without touching the disk.

    File paths are given relative to the folder, in listing order.
    """

    def _build(folder_name: str, files: Iterable[str]) -> Tuple[FolderTarget, FolderListing]:
        root = Path("/library") / folder_name
        target = FolderTarget(path=root, name=folder_name, normalized_name=normalize_name(folder_name))
        listing = FolderListing(root=root, files=[root / f for f in files])
        return target, listing

    return _build


@pytest.fixture
def recording_shell() -> RecordingShell:
    return RecordingShell()


@pytest.fixture
def publisher(recording_shell: RecordingShell) -> DesktopIniPublisher:
    return DesktopIniPublisher(shell=recording_shell)


@pytest.fixture
def tui_with_captured_output() -> AssignmentTUI:
    """Create an AssignmentTUI whose console writes to a StringIO buffer."""
    console = Console(file=io.StringIO(), force_terminal=False, width=120)
    return AssignmentTUI(console=console)

@pytest.fixture
def failing_shell() -> RecordingShell:
    """RecordingShell whose shell notification raises OSError."""
    return RecordingShell(fail_on_notify=True)
