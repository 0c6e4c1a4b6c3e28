"""Tests for the JSONL log sink."""

import json
import logging
import sys

import pytest

from dep_workspace.logging_setup import JsonlHandler
from dep_workspace.logging_setup import init_json_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
    root.setLevel(level)


def test_writes_one_json_object_per_record(tmp_path, restore_root_logger):
    path = tmp_path / "logs" / "out.jsonl"
    init_json_logging(path, "debug")

    logging.getLogger("dep_workspace.test").info("Loaded project", extra={"import_root": "example.com/app"})

    lines = path.read_text().splitlines()
    assert len(lines) == 1
    entry = json.loads(lines[0])
    assert entry["lvl"] == "INFO"
    assert entry["logger"] == "dep_workspace.test"
    assert entry["message"] == "Loaded project"
    assert entry["import_root"] == "example.com/app"


def test_level_filters_records(tmp_path, restore_root_logger):
    path = tmp_path / "out.jsonl"
    init_json_logging(path, "warning")

    logging.getLogger("dep_workspace.test").debug("hidden")
    logging.getLogger("dep_workspace.test").warning("shown")

    messages = [json.loads(line)["message"] for line in path.read_text().splitlines()]
    assert messages == ["shown"]


def test_reinitialising_replaces_handler(tmp_path, restore_root_logger):
    init_json_logging(tmp_path / "a.jsonl", "info")
    init_json_logging(tmp_path / "b.jsonl", "info")

    handlers = [h for h in logging.getLogger().handlers if isinstance(h, JsonlHandler)]
    assert [h.path.name for h in handlers] == ["b.jsonl"]


def test_exception_is_recorded(tmp_path):
    handler = JsonlHandler(tmp_path / "out.jsonl")
    try:
        raise ValueError("boom")
    except ValueError:
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

    assert handler.format_record(record)["error"] == "ValueError: boom"
