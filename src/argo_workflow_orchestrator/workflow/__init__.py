"""Workflow specification building.

This package provides:
- Argo-compatible workflow models
- the source protocols components implement
- `WorkflowBuilder`, which composes sources into a `Workflow`
"""

from argo_workflow_orchestrator.workflow.builder import (
    EntrypointNotFoundError,
    WorkflowBuilder,
    WorkflowBuilderError,
    WorkflowCompositionError,
)
from argo_workflow_orchestrator.workflow.source import (
    ParallelWorkflowSource,
    WorkflowMetricsProvider,
    WorkflowSource,
)

__all__ = [
    "EntrypointNotFoundError",
    "ParallelWorkflowSource",
    "WorkflowBuilder",
    "WorkflowBuilderError",
    "WorkflowCompositionError",
    "WorkflowMetricsProvider",
    "WorkflowSource",
]
