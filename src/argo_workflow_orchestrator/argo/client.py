"""Argo Server REST client.

`WorkflowBackend` is the narrow capability the lifecycle operations depend on.
`ArgoServerClient` implements it over the Argo Server HTTP API with `requests`;
tests substitute a `Mock(spec=WorkflowBackend)`.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, Protocol

import requests

from argo_workflow_orchestrator.config import ArgoSettings
from argo_workflow_orchestrator.workflow.models import Workflow

logger = logging.getLogger(__name__)


class ArgoAPIError(RuntimeError):
    """The Argo Server answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"argo server returned {status_code}: {message}")


class WorkflowBackend(Protocol):
    """Create/get/list/delete for workflows in a namespace."""

    def create_workflow(self, namespace: str, workflow: Workflow) -> Workflow: ...

    def get_workflow(self, namespace: str, name: str) -> Workflow: ...

    def list_workflows(self, namespace: str, label_selector: str = "") -> list[Workflow]: ...

    def delete_workflow(self, namespace: str, name: str) -> None: ...


class ArgoServerClient:
    """Small wrapper around the Argo Server `/api/v1/workflows` endpoints."""

    def __init__(
        self,
        *,
        base_url: str,
        token: str = "",
        insecure_skip_verify: bool = False,
        timeout_seconds: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        if not base_url.strip():
            raise ValueError("Argo Server URL is required")

        self._base_url = base_url.strip().rstrip("/")
        self._timeout = timeout_seconds
        self._session = session or requests.Session()
        self._session.verify = not insecure_skip_verify
        self._session.headers.update(
            {
                "Accept": "application/json",
                "Content-Type": "application/json",
                "User-Agent": "argo-workflow-orchestrator",
            }
        )
        if token:
            self._session.headers["Authorization"] = (
                token if token.startswith("Bearer ") else f"Bearer {token}"
            )

        logger.debug("Argo Server client created", extra={"base_url": self._base_url})

    @classmethod
    def from_settings(
        cls, settings: ArgoSettings, *, session: requests.Session | None = None
    ) -> ArgoServerClient:
        return cls(
            base_url=settings.server_url,
            token=settings.token,
            insecure_skip_verify=settings.insecure_skip_verify,
            timeout_seconds=settings.request_timeout_seconds,
            session=session,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def _workflows_url(self, namespace: str, name: str = "") -> str:
        namespace = namespace.strip().strip("/")
        if not namespace:
            raise ValueError("namespace is required")
        url = f"{self._base_url}/api/v1/workflows/{namespace}"
        if name:
            url = f"{url}/{name.strip().strip('/')}"
        return url

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        resp = self._session.request(method, url, timeout=self._timeout, **kwargs)
        if not resp.ok:
            raise ArgoAPIError(resp.status_code, _error_message(resp))
        if not resp.content:
            return None
        return resp.json()

    def create_workflow(self, namespace: str, workflow: Workflow) -> Workflow:
        body = {
            "namespace": namespace,
            "workflow": workflow.model_dump(
                mode="json", by_alias=True, exclude_none=True, exclude={"status"}
            ),
        }
        data = self._request("POST", self._workflows_url(namespace), json=body)
        created = Workflow.from_json(data)
        logger.info(
            "Workflow created",
            extra={"namespace": namespace, "workflow_name": created.name},
        )
        return created

    def get_workflow(self, namespace: str, name: str) -> Workflow:
        data = self._request("GET", self._workflows_url(namespace, name))
        return Workflow.from_json(data)

    def list_workflows(self, namespace: str, label_selector: str = "") -> list[Workflow]:
        params: dict[str, str] = {}
        if label_selector:
            params["listOptions.labelSelector"] = label_selector
        data = self._request("GET", self._workflows_url(namespace), params=params)
        # Argo returns `"items": null` for an empty list.
        items = (data or {}).get("items") or []
        return [Workflow.from_json(item) for item in items]

    def delete_workflow(self, namespace: str, name: str) -> None:
        self._request("DELETE", self._workflows_url(namespace, name))
        logger.info("Workflow deleted", extra={"namespace": namespace, "workflow_name": name})

    def close(self) -> None:
        self._session.close()
        logger.debug("Argo Server client closed")

    def __enter__(self) -> ArgoServerClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def _error_message(resp: requests.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text.strip() or resp.reason or ""
    if isinstance(data, dict) and isinstance(data.get("message"), str):
        return data["message"]
    return resp.text.strip()
