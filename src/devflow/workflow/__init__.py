"""Workflow engine: sequential steps threading an immutable state."""

from __future__ import annotations

from devflow.workflow.engine import run_step, run_workflow
from devflow.workflow.state import StepContext, WorkflowState

__all__ = [
    "StepContext",
    "WorkflowState",
    "run_step",
    "run_workflow",
]
