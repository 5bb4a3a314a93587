"""Workflow orchestration package for foldericon.

This package contains orchestration components for icon assignment runs:
- AssignmentLogger: Structured logging of a run to a timestamped log file.
- IconOrchestrator: Central coordinator for discovery, selection and publishing.
"""

from foldericon.orchestration.assignment_logger import AssignmentLogger
from foldericon.orchestration.icon_orchestrator import IconOrchestrator

__all__ = ["AssignmentLogger", "IconOrchestrator"]
