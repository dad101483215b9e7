"""Unit tests for log formatting."""

from __future__ import annotations

import json
import logging

from codepipeline_execute.logging import JsonFormatter, TextFormatter, configure_logging


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="codepipeline_execute.poller",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Poll complete",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extra_fields() -> None:
    payload = json.loads(JsonFormatter().format(_record(execution_id="exec-1", changed=2)))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "codepipeline_execute.poller"
    assert payload["message"] == "Poll complete"
    assert payload["extra"] == {"execution_id": "exec-1", "changed": 2}


def test_text_formatter_appends_extra_fields() -> None:
    line = TextFormatter().format(_record(status="Succeeded"))

    assert line.endswith("Poll complete [status=Succeeded]")


def test_configure_logging_replaces_handlers() -> None:
    root = logging.getLogger()
    previous = list(root.handlers), root.level
    try:
        configure_logging("debug", "text")
        configure_logging("info", "json")

        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
        assert root.level == logging.INFO
        assert logging.getLogger("botocore").level == logging.INFO
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
        for handler in previous[0]:
            root.addHandler(handler)
        root.setLevel(previous[1])
