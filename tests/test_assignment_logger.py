"""Unit tests for AssignmentLogger."""

import os
import re
from pathlib import Path

import pytest

from foldericon.models import (
    AssignmentSummary,
    Candidate,
    CandidateKind,
    DiscoveryResult,
    FolderOutcome,
    FolderResult,
    FolderTarget,
    IconAssignment,
    PriorityMode,
    SelectionStrategy,
)
from foldericon.orchestration import AssignmentLogger


def _assigned_result(folder: Path) -> FolderResult:
    candidate = Candidate(
        file_path=folder / "bin" / "mygame_launcher.exe",
        directory=folder / "bin",
        kind=CandidateKind.EXECUTABLE,
        strategy=SelectionStrategy.TOKEN,
        matched_token="mygame",
    )
    return FolderResult(
        path=folder,
        outcome=FolderOutcome.ASSIGNED,
        target=FolderTarget(path=folder, name=folder.name, normalized_name="mygame"),
        candidate=candidate,
        assignment=IconAssignment(
            icon_resource=r".\bin\mygame_launcher.exe,0",
            info_tip="mygame_launcher.exe",
        ),
    )


class TestAssignmentLoggerBasic:
    """Test basic AssignmentLogger functionality."""

    def test_log_file_creation_with_auto_generated_filename(self, temp_dir: Path):
        """Test that the log file gets a timestamped name in the working directory."""
        original_cwd = os.getcwd()
        try:
            os.chdir(temp_dir)
            with AssignmentLogger() as logger:
                log_path = logger.get_log_path()
                assert log_path.parent == temp_dir
                pattern = r"icon_log_\d{4}-\d{2}-\d{2}_\d{2}-\d{2}-\d{2}\.log"
                assert re.match(pattern, log_path.name)
        finally:
            os.chdir(original_cwd)

    def test_custom_log_file_path(self, temp_dir: Path):
        custom_path = temp_dir / "icons.log"
        with AssignmentLogger(log_file_path=custom_path) as logger:
            assert logger.get_log_path() == custom_path
            logger.log_header()

        content = custom_path.read_text(encoding="utf-8")
        assert "Folder Icon Assignment - Run Log" in content
        assert "Mode: LIVE" in content

    def test_dry_run_mode_in_header(self, temp_dir: Path):
        log_path = temp_dir / "dry.log"
        with AssignmentLogger(log_file_path=log_path, dry_run=True) as logger:
            logger.log_header()

        assert "Mode: DRY RUN" in log_path.read_text(encoding="utf-8")

    def test_missing_parent_directory_raises(self, temp_dir: Path):
        with pytest.raises(OSError, match="Parent directory does not exist"):
            AssignmentLogger(log_file_path=temp_dir / "nope" / "run.log")

    def test_parent_is_a_file_raises(self, temp_dir: Path):
        blocker = temp_dir / "blocker"
        blocker.write_text("x")

        with pytest.raises(OSError, match="not a directory"):
            AssignmentLogger(log_file_path=blocker / "run.log")

    def test_validation_leaves_no_probe_file(self, temp_dir: Path):
        AssignmentLogger(log_file_path=temp_dir / "run.log")

        assert list(temp_dir.iterdir()) == []

    def test_write_after_close_warns(self, temp_dir: Path, capsys):
        logger = AssignmentLogger(log_file_path=temp_dir / "run.log")
        with logger:
            pass

        logger.log_header()

        assert "closed log file" in capsys.readouterr().err


class TestAssignmentLoggerSections:
    """Test the discovery, folder and summary sections."""

    def test_log_discovery(self, temp_dir: Path):
        log_path = temp_dir / "run.log"
        discovery = DiscoveryResult(
            targets=[FolderTarget(path=temp_dir / "Doom", name="Doom", normalized_name="doom")],
            missing=[temp_dir / "Gone"],
            excluded=[temp_dir / "Tools"],
        )

        with AssignmentLogger(log_file_path=log_path) as logger:
            logger.log_discovery([temp_dir], True, PriorityMode.LIKE_FOLDER, discovery)

        content = log_path.read_text(encoding="utf-8")
        assert "DISCOVERY" in content
        assert f"  - {temp_dir}" in content
        assert "Mode: batch" in content
        assert "Icon priority: like_folder" in content
        assert "Folders to process: 1" in content
        assert "Folders excluded: 1" in content
        assert "Paths not found: 1" in content
        assert f"  - {temp_dir / 'Gone'}" in content

    def test_log_discovery_without_priority(self, temp_dir: Path):
        log_path = temp_dir / "run.log"

        with AssignmentLogger(log_file_path=log_path) as logger:
            logger.log_discovery([temp_dir], False, None, DiscoveryResult())

        content = log_path.read_text(encoding="utf-8")
        assert "Mode: single" in content
        assert "Icon priority: none (fuzzy fallback)" in content

    def test_log_folder_results(self, temp_dir: Path):
        log_path = temp_dir / "run.log"
        folder = temp_dir / "My Game"

        with AssignmentLogger(log_file_path=log_path) as logger:
            logger.log_folder_result(_assigned_result(folder))
            logger.log_folder_result(
                FolderResult(path=temp_dir / "Empty", outcome=FolderOutcome.NO_CANDIDATE)
            )
            logger.log_folder_result(
                FolderResult(
                    path=temp_dir / "Broken",
                    outcome=FolderOutcome.FAILED,
                    error="publish failed for Broken: cannot write desktop.ini",
                )
            )

        content = log_path.read_text(encoding="utf-8")
        assert content.count("FOLDERS") == 1
        assert f"Folder 1: {folder}" in content
        assert "Outcome: assigned" in content
        assert "Strategy: token" in content
        assert "Matched token: mygame" in content
        assert r"IconResource: .\bin\mygame_launcher.exe,0" in content
        assert "Folder 2:" in content
        assert "Outcome: no_candidate" in content
        assert "Folder 3:" in content
        assert "! Error: publish failed for Broken" in content

    def test_log_summary(self, temp_dir: Path):
        log_path = temp_dir / "run.log"
        summary = AssignmentSummary(
            total_folders=4,
            assigned=2,
            no_candidate=1,
            not_found=1,
            failed=1,
            errors=["Folder not found: /x", "publish failed for /y"],
            duration_seconds=125.0,
            interrupted=True,
        )

        with AssignmentLogger(log_file_path=log_path) as logger:
            logger.log_summary(summary)

        content = log_path.read_text(encoding="utf-8")
        assert "SUMMARY" in content
        assert "Folders processed: 4" in content
        assert "Icons assigned: 2" in content
        assert "No icon source found: 1" in content
        assert "Paths not found: 1" in content
        assert "Failed: 1" in content
        assert "Total errors: 2" in content
        assert "  - Folder not found: /x" in content
        assert "Run interrupted by user" in content
        assert "Duration: 2m 5s" in content
        assert f"Log file: {log_path}" in content


class TestFormatDuration:
    """Test duration formatting."""

    @pytest.mark.parametrize(
        "seconds, expected",
        [(0, "0s"), (45.9, "45s"), (60, "1m 0s"), (323, "5m 23s"), (3930, "1h 5m 30s")],
    )
    def test_format_duration(self, temp_dir: Path, seconds: float, expected: str):
        logger = AssignmentLogger(log_file_path=temp_dir / "run.log")

        assert logger._format_duration(seconds) == expected
