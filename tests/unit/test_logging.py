"""Unit tests for the JSON log formatter."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from argo_workflow_orchestrator.logging import JsonFormatter, configure_logging


def _record(msg: str = "Workflow submitted", **extra: object) -> logging.LogRecord:
    record = logging.LogRecord("argo_workflow_orchestrator.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_emits_one_json_object() -> None:
    line = JsonFormatter().format(_record(workflow_name="hello-abc12", templates_count=3))

    payload = json.loads(line)
    assert payload["level"] == "INFO"
    assert payload["logger"] == "argo_workflow_orchestrator.test"
    assert payload["message"] == "Workflow submitted"
    assert payload["extra"] == {"workflow_name": "hello-abc12", "templates_count": 3}
    assert payload["timestamp"].endswith("+00:00")
    assert "exception" not in payload


def test_formatter_omits_empty_extra() -> None:
    payload = json.loads(JsonFormatter().format(_record()))

    assert "extra" not in payload


def test_formatter_includes_exception_and_stringifies_unknown_values() -> None:
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = _record("Command failed", when=object())
        record.exc_info = sys.exc_info()

    payload = json.loads(JsonFormatter().format(record))

    assert "RuntimeError: boom" in payload["exception"]
    assert payload["extra"]["when"].startswith("<object object")


def test_configure_logging_is_idempotent(capsys: pytest.CaptureFixture[str]) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        configure_logging("debug")
        configure_logging("debug")

        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
        assert root.level == logging.DEBUG
        assert logging.getLogger("urllib3").level == logging.INFO

        logging.getLogger("argo_workflow_orchestrator").info("hello", extra={"namespace": "argo"})
        out = capsys.readouterr().out.strip().splitlines()
        assert json.loads(out[-1])["extra"] == {"namespace": "argo"}
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
