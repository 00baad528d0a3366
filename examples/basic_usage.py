#!/usr/bin/env python3
"""Programmatic workflow example.

This demonstrates using the orchestrator components directly:

* load settings from `.env`
* compose a build -> test -> deploy workflow with a cleanup exit handler
* submit it to the Argo Server and wait for the result

Pass `--dry-run` to print the workflow JSON instead of submitting it.
"""

from __future__ import annotations

import argparse
import json
from typing import Sequence

from argo_workflow_orchestrator.argo import (
    ArgoServerClient,
    WorkflowFailedError,
    WorkflowTimeoutError,
    submit_and_wait,
)
from argo_workflow_orchestrator.config import ArgoSettings
from argo_workflow_orchestrator.logging import configure_logging
from argo_workflow_orchestrator.workflow import WorkflowBuilder
from argo_workflow_orchestrator.workflow.models import RetryStrategy
from argo_workflow_orchestrator.workflow.templates import (
    ContainerSource,
    HTTPSource,
    ScriptSource,
)


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build and submit a workflow (programmatic example).")
    parser.add_argument("--name", default="example", help="Workflow base name")
    parser.add_argument("--image", default="alpine:3.19", help="Image for build/test/deploy steps")
    parser.add_argument("--health-url", default="https://myapp/health", help="Health check URL")
    parser.add_argument("--dry-run", action="store_true", help="Print the workflow and exit")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = ArgoSettings()
    configure_logging(settings.log_level)

    build = ContainerSource("build", args.image, command=["sh", "-c"], args=["echo building"])
    test = ContainerSource("test", args.image, command=["sh", "-c"], args=["echo testing"])
    deploy = (
        ContainerSource("deploy", args.image, command=["sh", "-c"], args=["echo deploying"])
        .cpu("100m", "500m")
        .memory("128Mi")
    )
    health = HTTPSource("health-check", url=args.health_url)
    cleanup = ScriptSource("cleanup", "bash", source="echo 'Cleaning up...'")

    workflow = (
        WorkflowBuilder(
            args.name,
            settings.namespace,
            retry_strategy=RetryStrategy(limit="2", retry_policy="OnFailure"),
            labels={"app": args.name},
        )
        .add(build)
        .add(test)
        .add(deploy)
        .add(health)
        .add_exit_handler(cleanup)
        .build()
    )

    if args.dry_run:
        print(json.dumps(workflow.to_json(), indent=2))
        return 0

    with ArgoServerClient.from_settings(settings) as client:
        try:
            done = submit_and_wait(
                client,
                workflow,
                settings.wait_timeout_seconds,
                poll_interval_seconds=settings.poll_interval_seconds,
            )
        except (WorkflowFailedError, WorkflowTimeoutError) as exc:
            print(str(exc))
            return 1

    print(f"Workflow {done.name} finished: {done.status.phase}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
