"""Argo Workflow Orchestrator.

Compose Argo Workflows from reusable step sources, then submit them to an
Argo Server and wait for them to finish:
- `workflow`: models, `WorkflowBuilder`, template generators and patterns
- `argo`: Argo Server client and lifecycle operations
- configuration loaded from `.env`, structured JSON logging
"""

__version__ = "0.1.0"

from argo_workflow_orchestrator.config import ArgoSettings

__all__ = ["__version__", "ArgoSettings"]
