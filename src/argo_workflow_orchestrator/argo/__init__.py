"""Argo Server access and the workflow lifecycle built on top of it."""

from argo_workflow_orchestrator.argo.client import ArgoAPIError, ArgoServerClient, WorkflowBackend
from argo_workflow_orchestrator.argo.operations import (
    DEFAULT_POLL_INTERVAL_SECONDS,
    WorkflowDeleteError,
    WorkflowFailedError,
    WorkflowOperationError,
    WorkflowQueryError,
    WorkflowSubmissionError,
    WorkflowTimeoutError,
    delete_workflow,
    get_workflow_status,
    list_workflows,
    submit_and_wait,
    submit_workflow,
)

__all__ = [
    "DEFAULT_POLL_INTERVAL_SECONDS",
    "ArgoAPIError",
    "ArgoServerClient",
    "WorkflowBackend",
    "WorkflowDeleteError",
    "WorkflowFailedError",
    "WorkflowOperationError",
    "WorkflowQueryError",
    "WorkflowSubmissionError",
    "WorkflowTimeoutError",
    "delete_workflow",
    "get_workflow_status",
    "list_workflows",
    "submit_and_wait",
    "submit_workflow",
]
