"""Workflow lifecycle operations: submit, wait, inspect, list, delete.

All functions take a `WorkflowBackend` so they work against the real Argo
Server client or a test double. Backend failures are wrapped in
`WorkflowOperationError` subclasses and chained to the backend exception.
"""

from __future__ import annotations

import logging
import threading
import time

from argo_workflow_orchestrator.argo.client import WorkflowBackend
from argo_workflow_orchestrator.workflow.models import Workflow, WorkflowPhase, WorkflowStatus

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 5.0


class WorkflowOperationError(RuntimeError):
    pass


class WorkflowSubmissionError(WorkflowOperationError):
    pass


class WorkflowQueryError(WorkflowOperationError):
    pass


class WorkflowDeleteError(WorkflowOperationError):
    pass


class WorkflowFailedError(WorkflowOperationError):
    """The workflow reached the Failed or Error phase.

    `workflow` is the last polled state, so callers can inspect node details.
    """

    def __init__(self, workflow: Workflow) -> None:
        self.workflow = workflow
        self.phase = workflow.status.phase
        self.message = workflow.status.message or ""
        super().__init__(f"workflow failed with phase: {self.phase}, message: {self.message}")


class WorkflowTimeoutError(WorkflowOperationError):
    """No terminal phase was observed before the deadline (or the wait was cancelled).

    `workflow` is the object returned at submission time, not the last polled one.
    """

    def __init__(self, workflow: Workflow) -> None:
        self.workflow = workflow
        super().__init__(f"timeout waiting for workflow: {workflow.name}")


def submit_workflow(backend: WorkflowBackend, workflow: Workflow) -> Workflow:
    """Create the workflow on the backend and return the backend's copy of it.

    Raises:
        WorkflowSubmissionError: The backend rejected or failed the create call.
    """
    namespace = workflow.namespace
    logger.info(
        "Submitting workflow",
        extra={
            "workflow_name": workflow.metadata.generate_name or workflow.name,
            "namespace": namespace,
        },
    )

    try:
        created = backend.create_workflow(namespace, workflow)
    except Exception as e:
        logger.error(
            "Failed to submit workflow",
            extra={"workflow_name": workflow.metadata.generate_name, "error": str(e)},
        )
        raise WorkflowSubmissionError(f"failed to submit workflow: {e}") from e

    logger.info(
        "Workflow submitted",
        extra={"workflow_name": created.name, "workflow_uid": created.metadata.uid},
    )
    return created


def submit_and_wait(
    backend: WorkflowBackend,
    workflow: Workflow,
    timeout_seconds: float,
    *,
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
    cancel_event: threading.Event | None = None,
) -> Workflow:
    """Submit the workflow, then poll until it finishes.

    The first poll happens one interval after submission. A poll that fails is
    logged and skipped. A poll that returns after the deadline counts as a
    timeout, whatever phase it reports.

    Args:
        backend: Backend to submit to and poll.
        workflow: The workflow to submit.
        timeout_seconds: Overall deadline, measured from submission.
        poll_interval_seconds: Time between status polls.
        cancel_event: When set, the wait stops as if the deadline had passed.

    Returns:
        The polled workflow once it reaches the Succeeded phase.

    Raises:
        WorkflowSubmissionError: Submission failed.
        WorkflowFailedError: The workflow reached Failed or Error.
        WorkflowTimeoutError: Deadline reached or wait cancelled.
    """
    if poll_interval_seconds <= 0:
        raise ValueError("poll_interval_seconds must be > 0")
    if timeout_seconds < 0:
        raise ValueError("timeout_seconds must be >= 0")

    created = submit_workflow(backend, workflow)
    namespace = created.namespace or workflow.namespace

    logger.info(
        "Waiting for workflow completion",
        extra={"workflow_name": created.name, "timeout_seconds": timeout_seconds},
    )

    started = time.monotonic()
    deadline = started + timeout_seconds
    next_poll = started + poll_interval_seconds

    while True:
        if next_poll >= deadline:
            cancelled = _pause(deadline - time.monotonic(), cancel_event)
            raise _timed_out(created, started, cancelled=cancelled)

        if _pause(next_poll - time.monotonic(), cancel_event):
            raise _timed_out(created, started, cancelled=True)

        try:
            current: Workflow | None = backend.get_workflow(namespace, created.name)
        except Exception as e:
            logger.warning(
                "Failed to get workflow status",
                extra={"workflow_name": created.name, "error": str(e)},
            )
            current = None

        now = time.monotonic()
        if now >= deadline:
            raise _timed_out(created, started, cancelled=False)
        # Ticks missed during a slow query are dropped, not replayed.
        next_poll = max(next_poll + poll_interval_seconds, now + poll_interval_seconds)

        if current is None:
            continue

        phase = current.status.phase
        if phase == WorkflowPhase.SUCCEEDED:
            logger.info(
                "Workflow succeeded",
                extra={
                    "workflow_name": created.name,
                    "duration_seconds": round(time.monotonic() - started, 3),
                },
            )
            return current

        if phase in (WorkflowPhase.FAILED, WorkflowPhase.ERROR):
            err = WorkflowFailedError(current)
            logger.error(
                "Workflow failed",
                extra={
                    "workflow_name": created.name,
                    "phase": phase,
                    "error": str(err),
                    "duration_seconds": round(time.monotonic() - started, 3),
                },
            )
            raise err

        logger.debug("Workflow still running", extra={"workflow_name": created.name, "phase": phase})


def get_workflow_status(backend: WorkflowBackend, namespace: str, name: str) -> WorkflowStatus:
    logger.debug("Getting workflow status", extra={"namespace": namespace, "workflow_name": name})
    try:
        workflow = backend.get_workflow(namespace, name)
    except Exception as e:
        logger.error(
            "Failed to get workflow",
            extra={"namespace": namespace, "workflow_name": name, "error": str(e)},
        )
        raise WorkflowQueryError(f"failed to get workflow: {e}") from e

    logger.debug(
        "Retrieved workflow status", extra={"workflow_name": name, "phase": workflow.status.phase}
    )
    return workflow.status


def list_workflows(
    backend: WorkflowBackend, namespace: str, label_selector: str = ""
) -> list[Workflow]:
    """List workflows in `namespace`, optionally filtered by a label selector like `app=myapp`."""

    try:
        workflows = backend.list_workflows(namespace, label_selector)
    except Exception as e:
        logger.error(
            "Failed to list workflows",
            extra={"namespace": namespace, "label_selector": label_selector, "error": str(e)},
        )
        raise WorkflowQueryError(f"failed to list workflows: {e}") from e

    logger.info("Listed workflows", extra={"namespace": namespace, "count": len(workflows)})
    return workflows


def delete_workflow(backend: WorkflowBackend, namespace: str, name: str) -> None:
    logger.info("Deleting workflow", extra={"namespace": namespace, "workflow_name": name})
    try:
        backend.delete_workflow(namespace, name)
    except Exception as e:
        logger.error(
            "Failed to delete workflow",
            extra={"namespace": namespace, "workflow_name": name, "error": str(e)},
        )
        raise WorkflowDeleteError(f"failed to delete workflow: {e}") from e


def _pause(seconds: float, cancel_event: threading.Event | None) -> bool:
    """Sleep for `seconds`; return True if `cancel_event` was set meanwhile."""

    seconds = max(0.0, seconds)
    if cancel_event is None:
        time.sleep(seconds)
        return False
    return cancel_event.wait(seconds)


def _timed_out(created: Workflow, started: float, *, cancelled: bool) -> WorkflowTimeoutError:
    err = WorkflowTimeoutError(created)
    logger.error(
        "Workflow wait cancelled" if cancelled else "Workflow timed out",
        extra={
            "workflow_name": created.name,
            "duration_seconds": round(time.monotonic() - started, 3),
        },
    )
    return err
