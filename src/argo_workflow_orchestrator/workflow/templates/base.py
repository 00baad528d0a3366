"""Shared behaviour for sources that contribute exactly one step and one template."""

from __future__ import annotations

import logging
import re
from typing import Self

from argo_workflow_orchestrator.workflow.models import (
    ContinueOn,
    EnvVar,
    ResourceRequirements,
    RetryStrategy,
    VolumeMount,
    WorkflowStep,
)

logger = logging.getLogger(__name__)


# Kubernetes resource quantity, e.g. "500m", "1.5", "256Mi", "1e3".
_QUANTITY_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+|[numkMGTPE]|[KMGTPE]i)?$")


def parse_quantity(value: str) -> str:
    """Validate a Kubernetes resource quantity and return it unchanged.

    Raises:
        ValueError: If `value` is not a valid quantity.
    """
    if not _QUANTITY_RE.match(value.strip()):
        raise ValueError(f"invalid resource quantity: {value!r}")
    return value.strip()


class SingleStepSource:
    """One step named `name` that references a template named `name-template`."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.template_name = f"{name}-template"
        self._when: str | None = None
        self._continue_on: ContinueOn | None = None

    def when(self, condition: str) -> Self:
        """Only run the step if `condition` holds, e.g. `{{steps.test.outputs.exitCode}} == 0`."""

        self._when = condition
        return self

    def continue_on(self, *, error: bool = False, failed: bool = False) -> Self:
        self._continue_on = ContinueOn(error=error, failed=failed)
        return self

    def steps(self) -> list[WorkflowStep]:
        logger.debug(
            "Generating step", extra={"step": self.name, "template": self.template_name}
        )
        return [
            WorkflowStep(
                name=self.name,
                template=self.template_name,
                when=self._when or None,
                continue_on=self._continue_on,
            )
        ]


class ContainerSettings(SingleStepSource):
    """Container options shared by container and script templates."""

    def __init__(
        self,
        name: str,
        *,
        env: dict[str, str] | None = None,
        working_dir: str | None = None,
        retry_strategy: RetryStrategy | None = None,
    ) -> None:
        super().__init__(name)
        self._env: list[EnvVar] = [EnvVar(name=k, value=v) for k, v in (env or {}).items()]
        self._volume_mounts: list[VolumeMount] = []
        self._working_dir = working_dir
        self._retry_strategy = retry_strategy
        self._cpu: tuple[str, str] | None = None
        self._memory: tuple[str, str] | None = None

    def env(self, name: str, value: str) -> Self:
        self._env.append(EnvVar(name=name, value=value))
        return self

    def env_from(self, name: str, value_from: dict[str, object]) -> Self:
        """Add an environment variable sourced from a secret, config map, or field ref."""

        self._env.append(EnvVar(name=name, value_from=dict(value_from)))
        return self

    def volume_mount(self, name: str, mount_path: str, read_only: bool = False) -> Self:
        self._volume_mounts.append(VolumeMount(name=name, mount_path=mount_path, read_only=read_only))
        return self

    def working_dir(self, directory: str) -> Self:
        self._working_dir = directory
        return self

    def cpu(self, request: str, limit: str | None = None) -> Self:
        """Set the CPU request; the limit defaults to the request."""

        self._cpu = (request, limit or request)
        return self

    def memory(self, request: str, limit: str | None = None) -> Self:
        """Set the memory request; the limit defaults to the request."""

        self._memory = (request, limit or request)
        return self

    def with_retry(self, retry: RetryStrategy) -> Self:
        self._retry_strategy = retry
        return self

    def _resources(self) -> ResourceRequirements | None:
        if self._cpu is None and self._memory is None:
            return None

        requests: dict[str, str] = {}
        limits: dict[str, str] = {}
        if self._cpu is not None:
            requests["cpu"] = parse_quantity(self._cpu[0])
            limits["cpu"] = parse_quantity(self._cpu[1])
        if self._memory is not None:
            requests["memory"] = parse_quantity(self._memory[0])
            limits["memory"] = parse_quantity(self._memory[1])
        return ResourceRequirements(requests=requests, limits=limits)
