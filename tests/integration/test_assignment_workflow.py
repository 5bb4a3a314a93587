"""
Integration tests for the end-to-end icon assignment workflow.

Tests cover:
- Batch run over a library mixing every selection strategy
- Re-running over folders that already carry a desktop.ini
- Dry run leaving the library untouched
- A structural failure in one folder not affecting the others
- Stable ordering of results across runs
"""

from pathlib import Path
from typing import Dict

import pytest

from foldericon.matching import CandidateSelector
from foldericon.models import (
    DependencyTable,
    FolderOutcome,
    PriorityMode,
    SelectionStrategy,
)
from foldericon.operations import DesktopIniPublisher
from foldericon.orchestration import IconOrchestrator
from foldericon.scanning import FolderScanner
from foldericon.ui import AssignmentTUI


@pytest.fixture
def mixed_library(make_tree, temp_dir: Path) -> Path:
    """A library where each folder is resolved by a different strategy."""
    make_tree("Apps/Editor", ["bin/editor.exe", "tools/convert.exe"])      # dependency
    make_tree("Apps/My Game", ["readme.txt", "bin/win64/mygame_launcher.exe"])  # token
    make_tree("Apps/VSCode", ["resources/helper.exe", "Code.exe"])         # fuzzy
    make_tree("Apps/Nothing", ["data/level1.dat"])                          # no candidate
    return temp_dir / "Apps"


def _read_ini(folder: Path) -> Dict[str, str]:
    text = (folder / "desktop.ini").read_bytes().decode("utf-16")
    entries = {}
    for line in text.splitlines():
        if "=" in line:
            key, value = line.split("=", 1)
            entries[key] = value
    return entries


def _run(paths, tui, publisher, **kwargs):
    orchestrator = IconOrchestrator(
        paths=paths, tui=tui, publisher=publisher, write_log=False, **kwargs
    )
    return orchestrator.run()


@pytest.mark.integration
class TestAssignmentWorkflow:
    """End-to-end runs with the real scanner, selector and publisher."""

    def test_mixed_strategies(
        self, mixed_library: Path, tui_with_captured_output: AssignmentTUI,
        publisher: DesktopIniPublisher,
    ) -> None:
        selector = CandidateSelector(dependencies=DependencyTable({"Editor": "convert.exe"}))

        summary = _run(
            [mixed_library], tui_with_captured_output, publisher,
            batch=True, selector=selector,
        )

        by_name = {r.path.name: r for r in summary.results}
        assert by_name["Editor"].candidate.strategy is SelectionStrategy.DEPENDENCY
        assert by_name["My Game"].candidate.strategy is SelectionStrategy.TOKEN
        assert by_name["VSCode"].candidate.strategy is SelectionStrategy.FUZZY
        assert by_name["Nothing"].outcome is FolderOutcome.NO_CANDIDATE

        assert _read_ini(mixed_library / "Editor")["IconResource"] == r".\tools\convert.exe,0"
        assert _read_ini(mixed_library / "My Game") == {
            "IconResource": r".\bin\win64\mygame_launcher.exe,0",
            "InfoTip": "mygame_launcher.exe",
            "Mode": "",
            "Vid": "",
            "FolderType": "Generic",
        }
        assert _read_ini(mixed_library / "VSCode")["IconResource"] == r".\Code.exe,0"
        assert not (mixed_library / "Nothing" / "desktop.ini").exists()

        assert summary.assigned == 3
        assert summary.no_candidate == 1
        assert summary.has_errors is False

    def test_rerun_replaces_existing_desktop_ini(
        self, mixed_library: Path, tui_with_captured_output: AssignmentTUI,
        publisher: DesktopIniPublisher,
    ) -> None:
        _run([mixed_library], tui_with_captured_output, publisher, batch=True)
        first = _read_ini(mixed_library / "My Game")

        summary = _run([mixed_library], tui_with_captured_output, publisher, batch=True)

        assert _read_ini(mixed_library / "My Game") == first
        assert summary.assigned == 3
        leftovers = [p.name for p in (mixed_library / "My Game").iterdir() if p.suffix == ".tmp"]
        assert leftovers == []

    def test_priority_change_on_rerun(
        self, make_tree, tui_with_captured_output: AssignmentTUI,
        publisher: DesktopIniPublisher,
    ) -> None:
        folder = make_tree("Tools", ["icon.ico", "res/tools.ico"])

        _run([folder], tui_with_captured_output, publisher,
             selector=CandidateSelector(priority=PriorityMode.ICON_ICO))
        assert _read_ini(folder)["IconResource"] == r".\icon.ico,0"

        _run([folder], tui_with_captured_output, publisher,
             selector=CandidateSelector(priority=PriorityMode.LIKE_FOLDER))
        assert _read_ini(folder)["IconResource"] == r".\res\tools.ico,0"

    def test_dry_run_leaves_library_untouched(
        self, mixed_library: Path, tui_with_captured_output: AssignmentTUI,
        recording_shell,
    ) -> None:
        before = sorted(p.relative_to(mixed_library) for p in mixed_library.rglob("*"))

        summary = _run(
            [mixed_library], tui_with_captured_output,
            DesktopIniPublisher(shell=recording_shell, dry_run=True),
            batch=True, dry_run=True,
        )

        after = sorted(p.relative_to(mixed_library) for p in mixed_library.rglob("*"))
        assert after == before
        assert recording_shell.calls == []
        assert summary.assigned == 3

    def test_failing_folder_does_not_stop_run(
        self, mixed_library: Path, tui_with_captured_output: AssignmentTUI,
        recording_shell,
    ) -> None:
        # A directory named desktop.ini cannot be replaced by the ini file
        (mixed_library / "My Game" / "desktop.ini" / "blocker").mkdir(parents=True)

        summary = _run(
            [mixed_library], tui_with_captured_output,
            DesktopIniPublisher(shell=recording_shell), batch=True,
        )

        by_name = {r.path.name: r for r in summary.results}
        assert by_name["My Game"].outcome is FolderOutcome.FAILED
        assert "publish failed" in by_name["My Game"].error
        assert by_name["VSCode"].outcome is FolderOutcome.ASSIGNED
        assert (mixed_library / "VSCode" / "desktop.ini").is_file()
        assert summary.failed == 1
        assert summary.has_errors is True

    def test_results_follow_stable_order(
        self, mixed_library: Path, tui_with_captured_output: AssignmentTUI,
        publisher: DesktopIniPublisher,
    ) -> None:
        summary = _run(
            [mixed_library], tui_with_captured_output, publisher,
            batch=True, dry_run=True, scanner=FolderScanner(stable_order=True),
        )

        assert [r.path.name for r in summary.results] == [
            "Editor", "My Game", "Nothing", "VSCode",
        ]
