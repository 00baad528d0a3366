"""Script template source: run inline source code with an interpreter image."""

from __future__ import annotations

import logging
from typing import Self

from argo_workflow_orchestrator.workflow.models import RetryStrategy, ScriptTemplate, Template
from argo_workflow_orchestrator.workflow.templates.base import ContainerSettings

logger = logging.getLogger(__name__)

# language -> (image, command). Unknown languages fall back to bash.
LANGUAGE_DEFAULTS: dict[str, tuple[str, list[str]]] = {
    "bash": ("bash:5.2", ["bash"]),
    "sh": ("bash:5.2", ["bash"]),
    "python": ("python:3.11-slim", ["python"]),
    "python3": ("python:3.11-slim", ["python"]),
    "node": ("node:20-slim", ["node"]),
    "nodejs": ("node:20-slim", ["node"]),
    "javascript": ("node:20-slim", ["node"]),
    "ruby": ("ruby:3.2-slim", ["ruby"]),
}


class ScriptSource(ContainerSettings):
    """A step that runs a script in an interpreter picked from `language`."""

    def __init__(
        self,
        name: str,
        language: str = "bash",
        *,
        source: str = "",
        image: str | None = None,
        command: list[str] | None = None,
        env: dict[str, str] | None = None,
        working_dir: str | None = None,
        retry_strategy: RetryStrategy | None = None,
    ) -> None:
        super().__init__(name, env=env, working_dir=working_dir, retry_strategy=retry_strategy)
        default_image, default_command = LANGUAGE_DEFAULTS.get(language, LANGUAGE_DEFAULTS["bash"])
        self.language = language
        self._image = image or default_image
        self._command: list[str] = list(command or default_command)
        self._source = source

    def source(self, content: str) -> Self:
        self._source = content
        return self

    def image(self, image: str) -> Self:
        self._image = image
        return self

    def command(self, *cmd: str) -> Self:
        """Replace the interpreter command."""

        self._command = list(cmd)
        return self

    def templates(self) -> list[Template]:
        logger.debug(
            "Generating script template",
            extra={"template": self.template_name, "image": self._image},
        )

        script = ScriptTemplate(
            name=self.name,
            image=self._image,
            command=list(self._command) or None,
            env=list(self._env) or None,
            volume_mounts=list(self._volume_mounts) or None,
            working_dir=self._working_dir or None,
            resources=self._resources(),
            source=self._source,
        )
        return [
            Template(
                name=self.template_name,
                script=script,
                retry_strategy=self._retry_strategy,
            )
        ]
