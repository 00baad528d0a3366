"""Ready-made workflow sources for common step kinds."""

from argo_workflow_orchestrator.workflow.templates.base import parse_quantity
from argo_workflow_orchestrator.workflow.templates.container import ContainerSource
from argo_workflow_orchestrator.workflow.templates.http import DEFAULT_SUCCESS_CONDITION, HTTPSource
from argo_workflow_orchestrator.workflow.templates.noop import NoopSource
from argo_workflow_orchestrator.workflow.templates.script import ScriptSource

__all__ = [
    "DEFAULT_SUCCESS_CONDITION",
    "ContainerSource",
    "HTTPSource",
    "NoopSource",
    "ScriptSource",
    "parse_quantity",
]
