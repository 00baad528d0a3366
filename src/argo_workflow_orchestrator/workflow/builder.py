"""Fluent builder that composes workflow sources into an Argo `Workflow`.

Typical use::

    deploy = ContainerSource("deploy", "myapp:v1", command=["deploy.sh"])
    healthcheck = HTTPSource("healthcheck", url="https://myapp/health")
    cleanup = ScriptSource("cleanup", "bash", source="echo 'Cleaning up...'")

    workflow = (
        WorkflowBuilder("deployment", "argo", service_account="argo-workflow")
        .add(deploy)
        .add(healthcheck)
        .add_exit_handler(cleanup)
        .build()
    )

The builder collects errors raised by sources instead of failing on the first
`add*` call. The first recorded error is raised by `build()` /
`build_with_entrypoint()`.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Mapping

from argo_workflow_orchestrator.workflow.models import (
    Metrics,
    ObjectMeta,
    ParallelSteps,
    PodGC,
    RetryStrategy,
    Template,
    TTLStrategy,
    Volume,
    Workflow,
    WorkflowSpec,
    WorkflowStep,
)
from argo_workflow_orchestrator.workflow.source import (
    ParallelWorkflowSource,
    WorkflowMetricsProvider,
    WorkflowSource,
)

logger = logging.getLogger(__name__)

ENTRYPOINT_TEMPLATE_NAME = "main"
EXIT_HANDLER_TEMPLATE_NAME = "exit-handler"
DEFAULT_SERVICE_ACCOUNT = "argo-workflow"

# Exit steps whose name contains one of these run before all other exit steps.
CLEANUP_STEP_MARKERS = ("destroy", "cleanup")


class WorkflowBuilderError(ValueError):
    pass


class WorkflowCompositionError(WorkflowBuilderError):
    """A source failed to produce its templates, steps, or metrics."""


class EntrypointNotFoundError(WorkflowBuilderError):
    def __init__(self, entrypoint: str) -> None:
        self.entrypoint = entrypoint
        super().__init__(f"entrypoint template '{entrypoint}' not found in templates")


def is_cleanup_step(step: WorkflowStep) -> bool:
    """Return True if the step name marks it as a cleanup/destroy step (substring match)."""

    return any(marker in step.name for marker in CLEANUP_STEP_MARKERS)


def _copy_groups(groups: Iterable[ParallelSteps]) -> list[ParallelSteps]:
    # Built workflows never share step lists with the builder or each other.
    return [ParallelSteps(list(group.root)) for group in groups]


class WorkflowBuilder:
    """Accumulates templates and step groups, then finalizes them into a `Workflow`.

    Template names are unique: the first template registered under a name wins and
    later ones with the same name are ignored, even if their bodies differ.

    A builder is not thread-safe; use one instance per caller.
    """

    def __init__(
        self,
        name: str,
        namespace: str,
        *,
        service_account: str = DEFAULT_SERVICE_ACCOUNT,
        retry_strategy: RetryStrategy | None = None,
        volumes: Iterable[Volume] | None = None,
        archive_logs: bool | None = None,
        pod_gc: PodGC | None = None,
        ttl: TTLStrategy | None = None,
        active_deadline_seconds: int | None = None,
        labels: Mapping[str, str] | None = None,
        annotations: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the builder.

        Args:
            name: Base name; submitted workflows get `name-<suffix>` from the backend.
            namespace: Namespace the workflow is created in.
            service_account: Service account the workflow pods run as.
            retry_strategy: Default retry policy for templates that declare none.
            volumes: Volumes available to all steps.
            archive_logs: Whether the backend should archive step logs.
            pod_gc: Pod garbage collection strategy.
            ttl: How long the workflow is kept after completion.
            active_deadline_seconds: Maximum run time before the backend terminates it.
            labels: Workflow labels.
            annotations: Workflow annotations.
        """
        self._name_prefix = f"{name}-"
        self._namespace = namespace
        self._service_account = service_account
        self._retry_strategy = retry_strategy
        self._volumes: list[Volume] = list(volumes or [])
        self._archive_logs = archive_logs
        self._pod_gc = pod_gc
        self._ttl = ttl
        self._active_deadline_seconds = active_deadline_seconds
        self._labels: dict[str, str] = dict(labels or {})
        self._annotations: dict[str, str] = dict(annotations or {})

        self._templates: list[Template] = []
        self._template_names: set[str] = set()
        self._main: list[ParallelSteps] = []
        self._exit_handlers: list[ParallelSteps] = []
        self._metrics: Metrics | None = None
        self._errors: list[WorkflowCompositionError] = []

    @property
    def name_prefix(self) -> str:
        return self._name_prefix

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def errors(self) -> tuple[WorkflowCompositionError, ...]:
        return tuple(self._errors)

    @property
    def main_steps(self) -> tuple[ParallelSteps, ...]:
        return tuple(self._main)

    @property
    def exit_handler_steps(self) -> tuple[ParallelSteps, ...]:
        return tuple(self._exit_handlers)

    def add(self, source: WorkflowSource) -> WorkflowBuilder:
        """Append the source's steps to the main sequence, one group per step."""

        logger.debug("Adding workflow source", extra={"source": type(source).__name__})

        try:
            templates = list(source.templates())
        except Exception as e:
            self._record_error("failed to get templates", e)
            return self
        try:
            steps = list(source.steps())
        except Exception as e:
            self._record_error("failed to get steps", e)
            return self

        self._register_templates(templates)
        self._main.extend(ParallelSteps.of(step) for step in steps)

        logger.debug(
            "Workflow source added",
            extra={"templates_count": len(templates), "steps_count": len(steps)},
        )
        return self

    def add_parallel(self, source: ParallelWorkflowSource) -> WorkflowBuilder:
        """Append the source's step groups to the main sequence, keeping their grouping."""

        logger.debug("Adding parallel workflow source", extra={"source": type(source).__name__})

        try:
            templates = list(source.templates())
        except Exception as e:
            self._record_error("failed to get templates", e)
            return self
        try:
            groups = list(source.parallel_steps())
        except Exception as e:
            self._record_error("failed to get parallel steps", e)
            return self

        self._register_templates(templates)
        self._main.extend(_copy_groups(groups))

        logger.debug(
            "Parallel workflow source added",
            extra={"templates_count": len(templates), "parallel_groups_count": len(groups)},
        )
        return self

    def add_exit_handler(self, source: WorkflowSource) -> WorkflowBuilder:
        """Add the source's steps to the exit handler.

        Exit handler steps run after the main sequence whether it succeeded or not.
        Cleanup steps (see `is_cleanup_step`) are moved to the front, so across
        several calls they run most-recently-added first, followed by all other
        exit steps in the order they were added.
        """

        logger.debug("Adding exit handler", extra={"source": type(source).__name__})

        try:
            templates = list(source.templates())
        except Exception as e:
            self._record_error("failed to get exit handler templates", e)
            return self
        try:
            steps = list(source.steps())
        except Exception as e:
            self._record_error("failed to get exit handler steps", e)
            return self

        self._register_templates(templates)
        for step in steps:
            group = ParallelSteps.of(step)
            if is_cleanup_step(step):
                self._exit_handlers.insert(0, group)
            else:
                self._exit_handlers.append(group)

        logger.debug(
            "Exit handler added",
            extra={"templates_count": len(templates), "steps_count": len(steps)},
        )
        return self

    def add_template(self, template: Template) -> WorkflowBuilder:
        """Register a template directly, e.g. a hand-built entrypoint."""

        self._insert_template(template)
        return self

    def with_metrics(self, provider: WorkflowMetricsProvider) -> WorkflowBuilder:
        try:
            self._metrics = provider.metrics()
        except Exception as e:
            self._record_error("failed to get metrics", e)
        return self

    def build(self) -> Workflow:
        """Finalize into a workflow whose entrypoint is a synthesized `main` template.

        Safe to call repeatedly; each call returns a fresh `Workflow` and leaves the
        builder unchanged.

        Raises:
            WorkflowCompositionError: The first error recorded by an `add*` call.
        """
        started = time.perf_counter()
        self._raise_first_error()

        if not self._main:
            logger.warning(
                "No steps provided, workflow will be empty",
                extra={"workflow_name": self._name_prefix},
            )

        templates = list(self._templates)
        templates.append(Template(name=ENTRYPOINT_TEMPLATE_NAME, steps=_copy_groups(self._main)))
        on_exit = self._append_exit_handler(templates)

        workflow = self._assemble(ENTRYPOINT_TEMPLATE_NAME, templates, on_exit)
        self._log_built(workflow, started)
        return workflow

    def build_with_entrypoint(self, entrypoint: str) -> Workflow:
        """Finalize using an already-registered template as the entrypoint.

        The main sequence collected by `add`/`add_parallel` is not turned into a
        template here; the caller is expected to have registered the entrypoint
        template (and everything it references) via `add_template`.

        Raises:
            WorkflowCompositionError: The first error recorded by an `add*` call.
            EntrypointNotFoundError: No template named `entrypoint` is registered.
        """
        started = time.perf_counter()
        self._raise_first_error()

        if entrypoint not in self._template_names:
            err = EntrypointNotFoundError(entrypoint)
            logger.error(
                "Entrypoint template not found",
                extra={"workflow_name": self._name_prefix, "entrypoint": entrypoint},
            )
            raise err

        templates = list(self._templates)
        on_exit = self._append_exit_handler(templates)

        workflow = self._assemble(entrypoint, templates, on_exit)
        self._log_built(workflow, started)
        return workflow

    def _insert_template(self, template: Template) -> None:
        if template.name in self._template_names:
            logger.debug("Ignoring duplicate template", extra={"template": template.name})
            return
        self._templates.append(template)
        self._template_names.add(template.name)

    def _register_templates(self, templates: Iterable[Template]) -> None:
        for template in templates:
            self._insert_template(template)

    def _record_error(self, context: str, cause: Exception) -> None:
        error = WorkflowCompositionError(f"{context}: {cause}")
        error.__cause__ = cause
        self._errors.append(error)
        logger.error(
            "Workflow composition failed",
            extra={"workflow_name": self._name_prefix, "error": str(error)},
        )

    def _raise_first_error(self) -> None:
        if self._errors:
            logger.error(
                "Failed to build workflow",
                extra={
                    "workflow_name": self._name_prefix,
                    "errors_count": len(self._errors),
                    "error": str(self._errors[0]),
                },
            )
            raise self._errors[0]

    def _append_exit_handler(self, templates: list[Template]) -> str | None:
        if not self._exit_handlers:
            return None
        templates.append(Template(name=EXIT_HANDLER_TEMPLATE_NAME, steps=_copy_groups(self._exit_handlers)))
        return EXIT_HANDLER_TEMPLATE_NAME

    def _assemble(self, entrypoint: str, templates: list[Template], on_exit: str | None) -> Workflow:
        if self._retry_strategy is not None:
            templates = [
                t
                if t.retry_strategy is not None
                else t.model_copy(update={"retry_strategy": self._retry_strategy})
                for t in templates
            ]

        return Workflow(
            metadata=ObjectMeta(
                generate_name=self._name_prefix,
                namespace=self._namespace,
                labels=dict(self._labels) or None,
                annotations=dict(self._annotations) or None,
            ),
            spec=WorkflowSpec(
                entrypoint=entrypoint,
                templates=templates,
                service_account_name=self._service_account,
                volumes=list(self._volumes) or None,
                metrics=self._metrics,
                archive_logs=self._archive_logs,
                pod_gc=self._pod_gc,
                ttl_strategy=self._ttl,
                active_deadline_seconds=self._active_deadline_seconds,
                on_exit=on_exit,
            ),
        )

    def _log_built(self, workflow: Workflow, started: float) -> None:
        logger.info(
            "Workflow built",
            extra={
                "workflow_name": workflow.metadata.generate_name,
                "entrypoint": workflow.spec.entrypoint,
                "templates_count": len(workflow.spec.templates),
                "has_exit_handler": workflow.spec.on_exit is not None,
                "build_duration_ms": round((time.perf_counter() - started) * 1000, 3),
            },
        )
