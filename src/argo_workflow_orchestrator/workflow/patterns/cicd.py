"""Sequential CI/CD workflow shapes built from container, script and HTTP steps."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from argo_workflow_orchestrator.workflow.builder import WorkflowBuilder
from argo_workflow_orchestrator.workflow.models import Workflow
from argo_workflow_orchestrator.workflow.templates import ContainerSource, HTTPSource, ScriptSource


def build_test_deploy(
    name: str,
    namespace: str,
    build_image: str,
    test_image: str,
    deploy_image: str,
    **builder_options: Any,
) -> Workflow:
    """build -> test -> deploy -> health-check, each step after the previous one."""

    build = ContainerSource(
        "build",
        build_image,
        command=["sh", "-c"],
        args=["echo 'Building application...' && go build -o app"],
        working_dir="/workspace",
    )
    test = ContainerSource(
        "test",
        test_image,
        command=["sh", "-c"],
        args=["echo 'Running tests...' && go test ./..."],
        working_dir="/workspace",
    )
    deploy = ContainerSource(
        "deploy",
        deploy_image,
        command=["sh", "-c"],
        args=["echo 'Deploying application...'"],
    )
    health_check = HTTPSource(
        "health-check",
        url="https://myapp/health",
        method="GET",
        success_condition="response.statusCode == 200",
    )

    return (
        WorkflowBuilder(name, namespace, **builder_options)
        .add(build)
        .add(test)
        .add(deploy)
        .add(health_check)
        .build()
    )


def build_test_deploy_with_cleanup(
    name: str,
    namespace: str,
    build_image: str,
    cleanup_image: str,
    **builder_options: Any,
) -> Workflow:
    """build -> test -> deploy, with cleanup and a notification as exit handlers."""

    build = ContainerSource(
        "build", build_image, command=["go", "build", "-o", "app"], working_dir="/workspace"
    )
    test = ContainerSource("test", build_image, command=["go", "test", "./..."], working_dir="/workspace")
    deploy = ContainerSource("deploy", build_image, command=["sh", "-c", "echo 'Deploying...'"])
    cleanup = ContainerSource(
        "cleanup",
        cleanup_image,
        command=["sh", "-c", "echo 'Cleaning up temporary resources...'"],
    )
    notify = ScriptSource(
        "notify",
        "bash",
        source=(
            'echo "Workflow completed"\n'
            'echo "Status: {{workflow.status}}"\n'
            'echo "Duration: {{workflow.duration}}"\n'
        ),
    )

    return (
        WorkflowBuilder(name, namespace, **builder_options)
        .add(build)
        .add(test)
        .add(deploy)
        .add_exit_handler(cleanup)
        .add_exit_handler(notify)
        .build()
    )


def conditional_deploy(name: str, namespace: str, image: str, **builder_options: Any) -> Workflow:
    """test, then deploy only if tests passed, then roll back only if deploy failed."""

    test = ContainerSource("test", image, command=["go", "test", "./..."])
    deploy = ContainerSource(
        "deploy", image, command=["sh", "-c", "echo 'Deploying to production...'"]
    ).when("{{steps.test.outputs.exitCode}} == 0")
    rollback = ContainerSource(
        "rollback", image, command=["sh", "-c", "echo 'Rolling back deployment...'"]
    ).when("{{steps.deploy.outputs.exitCode}} != 0")

    return WorkflowBuilder(name, namespace, **builder_options).add(test).add(deploy).add(rollback).build()


def multi_environment_deploy(
    name: str,
    namespace: str,
    deploy_image: str,
    environments: Sequence[str],
    **builder_options: Any,
) -> Workflow:
    """Deploy to each environment in turn, health-checking each before moving on."""

    builder = WorkflowBuilder(name, namespace, **builder_options)
    for env in environments:
        deploy = ContainerSource(
            f"deploy-{env}",
            deploy_image,
            command=["deploy.sh"],
            env={"ENVIRONMENT": env, "APP_NAME": name},
        )
        health_check = HTTPSource(
            f"health-check-{env}", url=f"https://{env}.myapp.com/health", method="GET"
        )
        builder.add(deploy).add(health_check)

    return builder.build()
