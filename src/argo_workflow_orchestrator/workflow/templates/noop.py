"""A step that does nothing, useful as a placeholder or join point."""

from __future__ import annotations

from argo_workflow_orchestrator.workflow.models import Container, Template
from argo_workflow_orchestrator.workflow.templates.base import SingleStepSource

NOOP_IMAGE = "alpine:3.19"


class NoopSource(SingleStepSource):
    def __init__(self, name: str = "noop") -> None:
        super().__init__(name)

    def templates(self) -> list[Template]:
        return [
            Template(
                name=self.template_name,
                container=Container(image=NOOP_IMAGE, command=["sh", "-c"], args=["echo noop"]),
            )
        ]
