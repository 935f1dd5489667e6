"""Tests for the logging bootstrap."""

import json
import logging

import pytest

from creatorkit.configs.system import LoggingConfig
from creatorkit.infra.logging import setup_logging


@pytest.fixture
def restore_root():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)


def test_json_lines_carry_extra_fields(restore_root, capsys):
    setup_logging(LoggingConfig(level="INFO", json_output=True))
    logging.getLogger("creatorkit.test").info(
        "Tool run %s completed", "hashtags", extra={"tool": "hashtags"}
    )

    record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert record["message"] == "Tool run hashtags completed"
    assert record["level"] == "INFO"
    assert record["logger"] == "creatorkit.test"
    assert record["tool"] == "hashtags"
    assert record["trace_id"] == ""


def test_level_applies_to_root(restore_root, capsys):
    setup_logging(LoggingConfig(level="warning", json_output=True))
    logging.getLogger("creatorkit.test").info("hidden")
    assert restore_root.level == logging.WARNING
    assert "hidden" not in capsys.readouterr().out
