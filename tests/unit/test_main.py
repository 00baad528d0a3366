"""Unit tests for the CLI (mocked Argo Server client)."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from argo_workflow_orchestrator import main as main_module
from argo_workflow_orchestrator.argo.client import ArgoAPIError, ArgoServerClient
from argo_workflow_orchestrator.workflow.models import Workflow


@pytest.fixture
def cli_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    for name in ("ARGO_TOKEN", "ARGO_POLL_INTERVAL_SECONDS", "ARGO_WAIT_TIMEOUT_SECONDS", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ARGO_SERVER_URL", "https://argo.internal")
    monkeypatch.setenv("ARGO_NAMESPACE", "argo")
    monkeypatch.setattr(main_module, "configure_logging", lambda level: None)
    return tmp_path


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    mock_client = MagicMock(spec=ArgoServerClient)
    mock_client.__enter__.return_value = mock_client
    mock_client.__exit__.return_value = False
    monkeypatch.setattr(
        main_module.ArgoServerClient, "from_settings", classmethod(lambda cls, settings: mock_client)
    )
    return mock_client


def _write_workflow(path: Path, namespace: str | None = None) -> Path:
    metadata = {"generateName": "hello-"}
    if namespace:
        metadata["namespace"] = namespace
    path.write_text(
        json.dumps(
            {
                "apiVersion": "argoproj.io/v1alpha1",
                "kind": "Workflow",
                "metadata": metadata,
                "spec": {"entrypoint": "main", "templates": [{"name": "main", "steps": []}]},
            }
        ),
        encoding="utf-8",
    )
    return path


def test_example_prints_workflow_json(capsys: pytest.CaptureFixture[str]) -> None:
    code = main_module.main(["example", "--kind", "fan-out", "--name", "demo", "--image", "busybox"])

    assert code == 0
    data = json.loads(capsys.readouterr().out)
    assert data["metadata"]["generateName"] == "demo-"
    assert data["spec"]["entrypoint"] == "demo-main"


def test_missing_server_url_is_a_configuration_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ARGO_SERVER_URL", raising=False)

    code = main_module.main(["status", "--name", "x"])

    assert code == 2
    assert "Configuration error" in capsys.readouterr().err


def test_submit_uses_file_namespace_then_default(
    cli_env: Path, client: MagicMock, make_workflow: Callable[..., Workflow], capsys
) -> None:
    client.create_workflow.return_value = make_workflow("Pending")
    wf_file = _write_workflow(cli_env / "wf.json")

    code = main_module.main(["submit", "--file", str(wf_file)])

    assert code == 0
    namespace, submitted = client.create_workflow.call_args.args
    assert namespace == "argo"
    assert submitted.metadata.namespace == "argo"
    assert "Submitted workflow hello-abc12 in argo" in capsys.readouterr().out


def test_submit_namespace_flag_overrides_file(
    cli_env: Path, client: MagicMock, make_workflow: Callable[..., Workflow]
) -> None:
    client.create_workflow.return_value = make_workflow("Pending", namespace="ci")
    wf_file = _write_workflow(cli_env / "wf.json", namespace="dev")

    assert main_module.main(["submit", "--file", str(wf_file), "--namespace", "ci"]) == 0
    assert client.create_workflow.call_args.args[0] == "ci"


def test_submit_and_wait_success(
    cli_env: Path, client: MagicMock, fake_clock, make_workflow: Callable[..., Workflow], capsys
) -> None:
    client.create_workflow.return_value = make_workflow("Pending")
    client.get_workflow.side_effect = [make_workflow("Running"), make_workflow("Succeeded")]
    wf_file = _write_workflow(cli_env / "wf.json")

    code = main_module.main(["submit", "--file", str(wf_file), "--wait", "--poll-seconds", "1"])

    assert code == 0
    assert "Workflow hello-abc12 Succeeded" in capsys.readouterr().out
    assert fake_clock.now == 2


def test_submit_and_wait_failure_exit_code(
    cli_env: Path, client: MagicMock, fake_clock, make_workflow: Callable[..., Workflow], capsys
) -> None:
    client.create_workflow.return_value = make_workflow("Pending")
    client.get_workflow.return_value = make_workflow("Failed", message="oops")
    wf_file = _write_workflow(cli_env / "wf.json")

    code = main_module.main(["submit", "--file", str(wf_file), "--wait"])

    assert code == 3
    assert "workflow failed with phase: Failed, message: oops" in capsys.readouterr().err


def test_submit_and_wait_timeout_exit_code(
    cli_env: Path, client: MagicMock, fake_clock, make_workflow: Callable[..., Workflow]
) -> None:
    client.create_workflow.return_value = make_workflow("Pending")
    client.get_workflow.return_value = make_workflow("Running")
    wf_file = _write_workflow(cli_env / "wf.json")

    code = main_module.main(
        ["submit", "--file", str(wf_file), "--wait", "--timeout-seconds", "3", "--poll-seconds", "1"]
    )

    assert code == 4


def test_status_list_and_delete(
    cli_env: Path, client: MagicMock, make_workflow: Callable[..., Workflow], capsys
) -> None:
    client.get_workflow.return_value = make_workflow("Running", message="1/3 steps")
    client.list_workflows.return_value = [make_workflow("Succeeded", name="a"), make_workflow(name="b")]

    assert main_module.main(["status", "--name", "hello-abc12"]) == 0
    assert main_module.main(["list", "--namespace", "ci", "--selector", "app=myapp"]) == 0
    assert main_module.main(["delete", "--name", "hello-abc12"]) == 0

    out = capsys.readouterr().out
    assert "hello-abc12: Running" in out
    assert "1/3 steps" in out
    assert "a\tSucceeded" in out
    assert "b\tUnknown" in out
    client.list_workflows.assert_called_once_with("ci", "app=myapp")
    client.delete_workflow.assert_called_once_with("argo", "hello-abc12")
    assert client.__exit__.call_count == 3


def test_backend_error_exit_code(cli_env: Path, client: MagicMock) -> None:
    client.delete_workflow.side_effect = ArgoAPIError(404, "not found")

    assert main_module.main(["delete", "--name", "missing"]) == 1


def test_submit_and_wait_explicit_zero_timeout_is_honoured(
    cli_env: Path, client: MagicMock, fake_clock, make_workflow: Callable[..., Workflow]
) -> None:
    client.create_workflow.return_value = make_workflow("Pending")
    client.get_workflow.return_value = make_workflow("Succeeded")
    wf_file = _write_workflow(cli_env / "wf.json")

    code = main_module.main(["submit", "--file", str(wf_file), "--wait", "--timeout-seconds", "0"])

    assert code == 4
    client.get_workflow.assert_not_called()


def test_submit_and_wait_explicit_zero_poll_interval_is_rejected(
    cli_env: Path, client: MagicMock, fake_clock, make_workflow: Callable[..., Workflow]
) -> None:
    wf_file = _write_workflow(cli_env / "wf.json")

    code = main_module.main(["submit", "--file", str(wf_file), "--wait", "--poll-seconds", "0"])

    assert code == 1
    client.create_workflow.assert_not_called()
