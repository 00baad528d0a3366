"""Capabilities a workflow component provides to the builder.

Components are anything with the right methods; there is no base class.
A producer signals failure by raising, and the builder records that error
instead of propagating it immediately.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from argo_workflow_orchestrator.workflow.models import (
    Metrics,
    ParallelSteps,
    Template,
    WorkflowStep,
)


@runtime_checkable
class WorkflowSource(Protocol):
    """A reusable building block: steps to run plus the templates they reference."""

    def steps(self) -> list[WorkflowStep]:
        """Steps to run, in order. Each becomes its own sequential group."""
        ...

    def templates(self) -> list[Template]:
        """Templates required by the steps. Duplicates by name are dropped."""
        ...


@runtime_checkable
class ParallelWorkflowSource(Protocol):
    """A building block whose steps are already grouped for parallel execution."""

    def parallel_steps(self) -> list[ParallelSteps]: ...

    def templates(self) -> list[Template]: ...


@runtime_checkable
class WorkflowMetricsProvider(Protocol):
    """Supplies Prometheus metrics emitted by the workflow when it runs."""

    def metrics(self) -> Metrics: ...
