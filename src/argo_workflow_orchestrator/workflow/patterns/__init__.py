"""Pre-built workflow shapes composed with `WorkflowBuilder`."""

from argo_workflow_orchestrator.workflow.patterns.cicd import (
    build_test_deploy,
    build_test_deploy_with_cleanup,
    conditional_deploy,
    multi_environment_deploy,
)
from argo_workflow_orchestrator.workflow.patterns.parallel import (
    fan_out_fan_in,
    map_reduce,
    parallel_data_processing,
    parallel_deployment,
    parallel_test_suite,
)

__all__ = [
    "build_test_deploy",
    "build_test_deploy_with_cleanup",
    "conditional_deploy",
    "fan_out_fan_in",
    "map_reduce",
    "multi_environment_deploy",
    "parallel_data_processing",
    "parallel_deployment",
    "parallel_test_suite",
]
