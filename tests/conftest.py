"""Test configuration and fixtures."""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import Mock

import pytest

from argo_workflow_orchestrator.argo import operations as operations_module
from argo_workflow_orchestrator.argo.client import WorkflowBackend
from argo_workflow_orchestrator.workflow.models import (
    ObjectMeta,
    Template,
    Workflow,
    WorkflowSpec,
    WorkflowStatus,
)


class FakeClock:
    """Monotonic clock that only moves when something sleeps."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock(monkeypatch: pytest.MonkeyPatch) -> FakeClock:
    """Make the lifecycle polling loop deterministic and instant."""
    clock = FakeClock()
    monkeypatch.setattr(operations_module.time, "monotonic", clock.monotonic)
    monkeypatch.setattr(operations_module.time, "sleep", clock.sleep)
    return clock


@pytest.fixture
def make_workflow() -> Callable[..., Workflow]:
    """Build a workflow as the backend would report it."""

    def _make(
        phase: str = "",
        *,
        name: str = "hello-abc12",
        namespace: str = "argo",
        message: str | None = None,
    ) -> Workflow:
        return Workflow(
            metadata=ObjectMeta(name=name, generate_name="hello-", namespace=namespace, uid="uid-1"),
            spec=WorkflowSpec(entrypoint="main", templates=[Template(name="main")]),
            status=WorkflowStatus(phase=phase, message=message),
        )

    return _make


@pytest.fixture
def unsubmitted_workflow() -> Workflow:
    """A workflow as produced by the builder, before submission."""
    return Workflow(
        metadata=ObjectMeta(generate_name="hello-", namespace="argo"),
        spec=WorkflowSpec(entrypoint="main", templates=[Template(name="main")]),
    )


@pytest.fixture
def backend() -> Mock:
    """Provide a mocked workflow backend."""
    return Mock(spec=WorkflowBackend)
