"""Pydantic models for the subset of the Argo Workflows API used by this project.

Models serialize to the JSON shape the Argo Server expects (camelCase keys,
unset fields omitted). Every model is frozen; derive new values with
`model_copy(update=...)` instead of mutating.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterator

from pydantic import BaseModel, ConfigDict, Field, RootModel
from pydantic.alias_generators import to_camel


class ArgoModel(BaseModel):
    """Base model with Argo-compatible (camelCase) field aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class WorkflowPhase(str, Enum):
    PENDING = "Pending"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    ERROR = "Error"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_PHASES


_TERMINAL_PHASES = frozenset({WorkflowPhase.SUCCEEDED, WorkflowPhase.FAILED, WorkflowPhase.ERROR})


class Backoff(ArgoModel):
    duration: str | None = None
    factor: int | str | None = None
    max_duration: str | None = None


class RetryStrategy(ArgoModel):
    """Retry policy applied by the backend to a template."""

    limit: int | str | None = None
    retry_policy: str | None = None
    backoff: Backoff | None = None


class ContinueOn(ArgoModel):
    """Continuation policy: proceed even if the step errors and/or fails."""

    error: bool = False
    failed: bool = False


class Parameter(ArgoModel):
    name: str
    value: str | None = None


class Arguments(ArgoModel):
    parameters: list[Parameter] = Field(default_factory=list)


class WorkflowStep(ArgoModel):
    """A reference to a template, with an optional guard and continuation policy."""

    name: str
    template: str
    when: str | None = None
    continue_on: ContinueOn | None = None
    arguments: Arguments | None = None


class ParallelSteps(RootModel[list[WorkflowStep]]):
    """Steps that run concurrently.

    Groups execute one after another; steps within a group run in parallel.
    Serializes as a plain JSON array, matching Argo's list-of-lists `steps`.
    """

    model_config = ConfigDict(frozen=True)

    @classmethod
    def of(cls, *steps: WorkflowStep) -> ParallelSteps:
        return cls(list(steps))

    @property
    def steps(self) -> list[WorkflowStep]:
        return self.root

    def __iter__(self) -> Iterator[WorkflowStep]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)


class EnvVar(ArgoModel):
    name: str
    value: str | None = None
    value_from: dict[str, Any] | None = None


class VolumeMount(ArgoModel):
    name: str
    mount_path: str
    read_only: bool = False


class ResourceRequirements(ArgoModel):
    requests: dict[str, str] | None = None
    limits: dict[str, str] | None = None


class Container(ArgoModel):
    name: str | None = None
    image: str
    command: list[str] | None = None
    args: list[str] | None = None
    env: list[EnvVar] | None = None
    volume_mounts: list[VolumeMount] | None = None
    working_dir: str | None = None
    image_pull_policy: str | None = None
    resources: ResourceRequirements | None = None


class ScriptTemplate(Container):
    source: str = ""


class HTTPHeader(ArgoModel):
    name: str
    value: str


class HTTPTemplate(ArgoModel):
    method: str = "GET"
    url: str
    headers: list[HTTPHeader] | None = None
    body: str | None = None
    timeout_seconds: int | None = None
    success_condition: str | None = None


class Counter(ArgoModel):
    value: str


class Gauge(ArgoModel):
    value: str
    realtime: bool | None = None


class MetricLabel(ArgoModel):
    key: str
    value: str


class Prometheus(ArgoModel):
    name: str
    help: str
    labels: list[MetricLabel] | None = None
    counter: Counter | None = None
    gauge: Gauge | None = None


class Metrics(ArgoModel):
    prometheus: list[Prometheus] = Field(default_factory=list)


class Template(ArgoModel):
    """A named executable unit.

    The body (container, script, http, or steps) is opaque to the builder.
    """

    name: str
    container: Container | None = None
    script: ScriptTemplate | None = None
    http: HTTPTemplate | None = None
    steps: list[ParallelSteps] | None = None
    retry_strategy: RetryStrategy | None = None
    metrics: Metrics | None = None


class TTLStrategy(ArgoModel):
    seconds_after_completion: int | None = None
    seconds_after_success: int | None = None
    seconds_after_failure: int | None = None


class PodGC(ArgoModel):
    strategy: str


class Volume(ArgoModel):
    name: str
    config_map: dict[str, Any] | None = None
    secret: dict[str, Any] | None = None
    empty_dir: dict[str, Any] | None = None
    persistent_volume_claim: dict[str, Any] | None = None


class ObjectMeta(ArgoModel):
    name: str | None = None
    generate_name: str | None = None
    namespace: str | None = None
    uid: str | None = None
    labels: dict[str, str] | None = None
    annotations: dict[str, str] | None = None
    creation_timestamp: str | None = None


class WorkflowSpec(ArgoModel):
    entrypoint: str
    templates: list[Template] = Field(default_factory=list)
    service_account_name: str | None = None
    volumes: list[Volume] | None = None
    metrics: Metrics | None = None
    archive_logs: bool | None = None
    pod_gc: PodGC | None = Field(default=None, alias="podGC")
    ttl_strategy: TTLStrategy | None = None
    active_deadline_seconds: int | None = None
    on_exit: str | None = None

    def template(self, name: str) -> Template | None:
        for t in self.templates:
            if t.name == name:
                return t
        return None


class WorkflowStatus(ArgoModel):
    # Argo reports an empty phase until the controller picks the workflow up.
    phase: str = ""
    message: str | None = None
    started_at: str | None = None
    finished_at: str | None = None
    progress: str | None = None


class Workflow(ArgoModel):
    """A workflow specification, or the backend's view of a submitted one."""

    api_version: str = "argoproj.io/v1alpha1"
    kind: str = "Workflow"
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: WorkflowSpec
    status: WorkflowStatus = Field(default_factory=WorkflowStatus)

    @property
    def name(self) -> str:
        return self.metadata.name or ""

    @property
    def namespace(self) -> str:
        return self.metadata.namespace or ""

    @classmethod
    def from_json(cls, obj: dict[str, Any]) -> Workflow:
        return cls.model_validate(obj)
