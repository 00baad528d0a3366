"""Container template source: run an image with a command."""

from __future__ import annotations

import logging
from typing import Self

from argo_workflow_orchestrator.workflow.models import Container, RetryStrategy, Template
from argo_workflow_orchestrator.workflow.templates.base import ContainerSettings

logger = logging.getLogger(__name__)


class ContainerSource(ContainerSettings):
    """A step that runs `image`.

    Example::

        build = (
            ContainerSource("build", "golang:1.22", command=["go", "build", "./..."])
            .working_dir("/workspace")
            .cpu("500m", "1")
            .memory("256Mi")
        )
    """

    def __init__(
        self,
        name: str,
        image: str,
        *,
        command: list[str] | None = None,
        args: list[str] | None = None,
        env: dict[str, str] | None = None,
        working_dir: str | None = None,
        image_pull_policy: str = "IfNotPresent",
        retry_strategy: RetryStrategy | None = None,
    ) -> None:
        super().__init__(name, env=env, working_dir=working_dir, retry_strategy=retry_strategy)
        self.image = image
        self._command: list[str] = list(command or [])
        self._args: list[str] = list(args or [])
        self._image_pull_policy = image_pull_policy

    def command(self, *cmd: str) -> Self:
        """Append to the container command."""

        self._command.extend(cmd)
        return self

    def args(self, *args: str) -> Self:
        """Append to the container arguments."""

        self._args.extend(args)
        return self

    def image_pull_policy(self, policy: str) -> Self:
        self._image_pull_policy = policy
        return self

    def templates(self) -> list[Template]:
        logger.debug(
            "Generating container template",
            extra={"template": self.template_name, "image": self.image},
        )

        container = Container(
            name=self.name,
            image=self.image,
            command=list(self._command) or None,
            args=list(self._args) or None,
            env=list(self._env) or None,
            volume_mounts=list(self._volume_mounts) or None,
            working_dir=self._working_dir or None,
            image_pull_policy=self._image_pull_policy or None,
            resources=self._resources(),
        )
        return [
            Template(
                name=self.template_name,
                container=container,
                retry_strategy=self._retry_strategy,
            )
        ]
