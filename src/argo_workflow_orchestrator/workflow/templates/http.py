"""HTTP template source: call an endpoint and judge the response."""

from __future__ import annotations

import logging
from typing import Self

from argo_workflow_orchestrator.workflow.models import (
    HTTPHeader,
    HTTPTemplate,
    Template,
    WorkflowStep,
)
from argo_workflow_orchestrator.workflow.templates.base import SingleStepSource

logger = logging.getLogger(__name__)

DEFAULT_SUCCESS_CONDITION = "response.statusCode >= 200 && response.statusCode < 300"


class HTTPSource(SingleStepSource):
    """A step that performs an HTTP request, e.g. a health check."""

    def __init__(
        self,
        name: str,
        *,
        url: str = "",
        method: str = "GET",
        headers: dict[str, str] | None = None,
        body: str | None = None,
        success_condition: str | None = None,
        timeout_seconds: int = 30,
    ) -> None:
        super().__init__(name)
        self._url = url
        self._method = method
        self._headers: list[HTTPHeader] = [
            HTTPHeader(name=k, value=v) for k, v in (headers or {}).items()
        ]
        self._body = body
        self._success_condition = success_condition
        self._timeout_seconds = timeout_seconds

    def url(self, url: str) -> Self:
        self._url = url
        return self

    def method(self, method: str) -> Self:
        self._method = method
        return self

    def header(self, name: str, value: str) -> Self:
        self._headers.append(HTTPHeader(name=name, value=value))
        return self

    def body(self, body: str) -> Self:
        self._body = body
        return self

    def success_condition(self, condition: str) -> Self:
        self._success_condition = condition
        return self

    def timeout(self, seconds: int) -> Self:
        self._timeout_seconds = seconds
        return self

    def steps(self) -> list[WorkflowStep]:
        if not self._url:
            raise ValueError(f"HTTP URL is required for step {self.name}")
        return super().steps()

    def templates(self) -> list[Template]:
        logger.debug(
            "Generating HTTP template", extra={"template": self.template_name, "url": self._url}
        )

        http = HTTPTemplate(
            method=self._method,
            url=self._url,
            headers=list(self._headers) or None,
            body=self._body or None,
            timeout_seconds=self._timeout_seconds,
            success_condition=self._success_condition or DEFAULT_SUCCESS_CONDITION,
        )
        return [Template(name=self.template_name, http=http)]
