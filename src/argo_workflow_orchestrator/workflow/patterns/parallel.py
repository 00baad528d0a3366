"""Parallel workflow shapes: fan-out/fan-in, map-reduce and friends.

Each pattern hand-builds a `<name>-main` entrypoint template whose first group
runs concurrently, registers it with `add_template`, and finalizes with
`build_with_entrypoint`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from argo_workflow_orchestrator.workflow.builder import WorkflowBuilder
from argo_workflow_orchestrator.workflow.models import (
    ParallelSteps,
    Template,
    Workflow,
    WorkflowStep,
)
from argo_workflow_orchestrator.workflow.templates import ContainerSource, HTTPSource
from argo_workflow_orchestrator.workflow.source import WorkflowSource


def _entrypoint_name(name: str) -> str:
    return f"{name}-main"


def _register(builder: WorkflowBuilder, source: WorkflowSource) -> WorkflowStep:
    """Register the source's templates and return its single step."""

    steps = source.steps()
    for template in source.templates():
        builder.add_template(template)
    return steps[0]


def fan_out_fan_in(
    name: str,
    namespace: str,
    image: str,
    tasks: Sequence[str],
    **builder_options: Any,
) -> Workflow:
    """Run every task concurrently, then a single aggregate step."""

    if not tasks:
        raise ValueError("at least one task is required for fan-out/fan-in pattern")

    builder = WorkflowBuilder(name, namespace, **builder_options)

    fan_out = [
        _register(
            builder,
            ContainerSource(
                task,
                image,
                command=["sh", "-c"],
                args=[f"echo 'Processing {task}...' && sleep 2 && echo 'Result: {task}-output'"],
            ),
        )
        for task in tasks
    ]
    aggregate = ContainerSource(
        "aggregate",
        image,
        command=["sh", "-c"],
        args=["echo 'Aggregating all results...' && echo 'All parallel tasks completed'"],
    )

    builder.add_template(
        Template(
            name=_entrypoint_name(name),
            steps=[ParallelSteps(fan_out), ParallelSteps(aggregate.steps())],
        )
    )
    for template in aggregate.templates():
        builder.add_template(template)
    return builder.build_with_entrypoint(_entrypoint_name(name))


def parallel_data_processing(
    name: str,
    namespace: str,
    image: str,
    data_items: Sequence[str],
    processing_command: str,
    **builder_options: Any,
) -> Workflow:
    """Process every data item concurrently with the same command."""

    if not data_items:
        raise ValueError("at least one data item is required")

    builder = WorkflowBuilder(name, namespace, **builder_options)
    steps = [
        _register(
            builder,
            ContainerSource(
                f"process-{i}",
                image,
                command=["sh", "-c"],
                args=[f"{processing_command} {item}"],
                env={"DATA_ITEM": item, "ITEM_INDEX": str(i)},
            ),
        )
        for i, item in enumerate(data_items)
    ]

    builder.add_template(Template(name=_entrypoint_name(name), steps=[ParallelSteps(steps)]))
    return builder.build_with_entrypoint(_entrypoint_name(name))


def map_reduce(
    name: str,
    namespace: str,
    image: str,
    inputs: Sequence[str],
    map_command: str,
    reduce_command: str,
    **builder_options: Any,
) -> Workflow:
    """Map every input concurrently, then reduce once all maps finish."""

    if not inputs:
        raise ValueError("at least one input is required for map-reduce")

    builder = WorkflowBuilder(name, namespace, **builder_options)
    map_steps = [
        _register(
            builder,
            ContainerSource(
                f"map-{i}",
                image,
                command=["sh", "-c"],
                args=[f"echo 'Mapping {item}' && {map_command} {item}"],
                env={"INPUT": item},
            ),
        )
        for i, item in enumerate(inputs)
    ]
    reduce = ContainerSource(
        "reduce",
        image,
        command=["sh", "-c"],
        args=[f"echo 'Reducing results...' && {reduce_command}"],
    )

    builder.add_template(
        Template(
            name=_entrypoint_name(name),
            steps=[ParallelSteps(map_steps), ParallelSteps(reduce.steps())],
        )
    )
    for template in reduce.templates():
        builder.add_template(template)
    return builder.build_with_entrypoint(_entrypoint_name(name))


def parallel_test_suite(
    name: str,
    namespace: str,
    image: str,
    test_suites: Mapping[str, str],
    **builder_options: Any,
) -> Workflow:
    """Run each named test suite (suite name -> command) concurrently."""

    if not test_suites:
        raise ValueError("at least one test suite is required")

    builder = WorkflowBuilder(name, namespace, **builder_options)
    steps = [
        _register(
            builder,
            ContainerSource(
                f"test-{suite}",
                image,
                command=["sh", "-c"],
                args=[f"echo 'Running {suite} tests...' && {command}"],
                working_dir="/workspace",
            ),
        )
        for suite, command in test_suites.items()
    ]

    builder.add_template(Template(name=_entrypoint_name(name), steps=[ParallelSteps(steps)]))
    return builder.build_with_entrypoint(_entrypoint_name(name))


def parallel_deployment(
    name: str,
    namespace: str,
    deploy_image: str,
    environments: Sequence[str],
    **builder_options: Any,
) -> Workflow:
    """Deploy to all environments concurrently; each deploy is followed by its health check."""

    if not environments:
        raise ValueError("at least one environment is required")

    builder = WorkflowBuilder(name, namespace, **builder_options)
    env_steps: list[WorkflowStep] = []
    for env in environments:
        deploy = ContainerSource(
            f"deploy-{env}",
            deploy_image,
            command=["deploy.sh"],
            env={"ENVIRONMENT": env, "APP_NAME": name},
        )
        health = HTTPSource(
            f"health-{env}",
            url=f"https://{env}.myapp.com/health",
            method="GET",
            success_condition="response.statusCode == 200",
        )

        env_template = f"deploy-and-check-{env}"
        deploy_step = deploy.steps()[0]
        health_step = health.steps()[0]
        builder.add_template(
            Template(
                name=env_template,
                steps=[ParallelSteps.of(deploy_step), ParallelSteps.of(health_step)],
            )
        )
        for template in (*deploy.templates(), *health.templates()):
            builder.add_template(template)

        env_steps.append(WorkflowStep(name=f"env-{env}", template=env_template))

    builder.add_template(Template(name=_entrypoint_name(name), steps=[ParallelSteps(env_steps)]))
    return builder.build_with_entrypoint(_entrypoint_name(name))
