"""CLI entrypoint: submit, inspect and delete workflows on an Argo Server."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from argo_workflow_orchestrator import __version__
from argo_workflow_orchestrator.argo.client import ArgoServerClient
from argo_workflow_orchestrator.argo.operations import (
    WorkflowFailedError,
    WorkflowTimeoutError,
    delete_workflow,
    get_workflow_status,
    list_workflows,
    submit_and_wait,
    submit_workflow,
)
from argo_workflow_orchestrator.config import ArgoSettings
from argo_workflow_orchestrator.logging import configure_logging
from argo_workflow_orchestrator.workflow.models import Workflow
from argo_workflow_orchestrator.workflow.patterns import build_test_deploy, fan_out_fan_in

logger = logging.getLogger(__name__)

EXAMPLE_KINDS = ("build-test-deploy", "fan-out")


def _load_workflow(path: Path, namespace: str, default_namespace: str) -> Workflow:
    """Read a workflow JSON file; `namespace` overrides the file, `default_namespace` fills a gap."""

    data = json.loads(path.read_text(encoding="utf-8"))
    workflow = Workflow.from_json(data)
    namespace = namespace or workflow.namespace or default_namespace
    if namespace != workflow.namespace:
        metadata = workflow.metadata.model_copy(update={"namespace": namespace})
        workflow = workflow.model_copy(update={"metadata": metadata})
    return workflow


def _example(kind: str, name: str, namespace: str, image: str) -> Workflow:
    if kind == "build-test-deploy":
        return build_test_deploy(name, namespace, image, image, image)
    return fan_out_fan_in(name, namespace, image, ["task-a", "task-b", "task-c"])


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="argo-orchestrator",
        description="Build, submit and track Argo Workflows",
    )
    parser.add_argument(
        "--version", action="version", version=f"argo-workflow-orchestrator {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    submit = subparsers.add_parser("submit", help="Submit a workflow from a JSON file")
    submit.add_argument("--file", required=True, type=Path, help="Workflow JSON file")
    submit.add_argument(
        "--namespace",
        default="",
        help="Namespace to submit to (defaults to the file's namespace, then ARGO_NAMESPACE)",
    )
    submit.add_argument(
        "--wait",
        action="store_true",
        help="Poll until the workflow succeeds, fails or times out",
    )
    submit.add_argument(
        "--timeout-seconds",
        type=float,
        default=None,
        help="Wait timeout in seconds (defaults to ARGO_WAIT_TIMEOUT_SECONDS)",
    )
    submit.add_argument(
        "--poll-seconds",
        type=float,
        default=None,
        help="Polling interval in seconds (defaults to ARGO_POLL_INTERVAL_SECONDS)",
    )

    status = subparsers.add_parser("status", help="Show the status of a workflow")
    status.add_argument("--name", required=True, help="Workflow name")
    status.add_argument("--namespace", default="", help="Namespace (defaults to ARGO_NAMESPACE)")

    list_cmd = subparsers.add_parser("list", help="List workflows in a namespace")
    list_cmd.add_argument("--namespace", default="", help="Namespace (defaults to ARGO_NAMESPACE)")
    list_cmd.add_argument(
        "--selector",
        default="",
        help="Label selector, e.g. 'app=myapp'",
    )

    delete = subparsers.add_parser("delete", help="Delete a workflow")
    delete.add_argument("--name", required=True, help="Workflow name")
    delete.add_argument("--namespace", default="", help="Namespace (defaults to ARGO_NAMESPACE)")

    example = subparsers.add_parser(
        "example",
        help="Print an example workflow as JSON (no Argo Server needed)",
    )
    example.add_argument("--kind", choices=EXAMPLE_KINDS, default=EXAMPLE_KINDS[0])
    example.add_argument("--name", required=True, help="Workflow base name")
    example.add_argument("--namespace", default="argo", help="Workflow namespace")
    example.add_argument("--image", default="alpine:3.19", help="Image used by every step")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "example":
        workflow = _example(args.kind, args.name, args.namespace, args.image)
        print(json.dumps(workflow.to_json(), indent=2))
        return 0

    try:
        settings = ArgoSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)
    namespace = args.namespace or settings.namespace

    try:
        with ArgoServerClient.from_settings(settings) as client:
            if args.command == "submit":
                workflow = _load_workflow(args.file, args.namespace, settings.namespace)

                if not args.wait:
                    created = submit_workflow(client, workflow)
                    print(f"Submitted workflow {created.name} in {created.namespace}")
                    return 0

                timeout = (
                    settings.wait_timeout_seconds
                    if args.timeout_seconds is None
                    else args.timeout_seconds
                )
                interval = (
                    settings.poll_interval_seconds if args.poll_seconds is None else args.poll_seconds
                )
                done = submit_and_wait(client, workflow, timeout, poll_interval_seconds=interval)
                print(f"Workflow {done.name} {done.status.phase}")
                return 0

            if args.command == "status":
                status = get_workflow_status(client, namespace, args.name)
                print(f"{args.name}: {status.phase or 'Unknown'}")
                if status.message:
                    print(status.message)
                return 0

            if args.command == "list":
                for wf in list_workflows(client, namespace, args.selector):
                    print(f"{wf.name}\t{wf.status.phase or 'Unknown'}")
                return 0

            if args.command == "delete":
                delete_workflow(client, namespace, args.name)
                print(f"Deleted workflow {args.name}")
                return 0

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except WorkflowFailedError as e:
        print(str(e), file=sys.stderr)
        return 3

    except WorkflowTimeoutError as e:
        print(str(e), file=sys.stderr)
        return 4

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
