from __future__ import annotations
import json
import logging
from logging.handlers import RotatingFileHandler

from trello_export.logging_setup import setup_logging, setup_logging_from_env


def test_json_file_logging_carries_run_id(monkeypatch, tmp_path, restore_logging):
    log_file = tmp_path / "export.log"
    monkeypatch.setenv("RUN_ID", "run-123")
    monkeypatch.setenv("LOG_JSON", "true")
    monkeypatch.setenv("LOG_FILE", str(log_file))
    monkeypatch.setenv("LOG_LEVEL", "info")

    assert setup_logging_from_env() == "run-123"

    root = logging.getLogger()
    assert root.level == logging.INFO
    assert any(isinstance(h, RotatingFileHandler) for h in root.handlers)
    assert logging.getLogger("httpx").level == logging.WARNING

    logging.getLogger("trello_export.test").info("hello", extra={"board_id": "b1"})
    for h in root.handlers:
        h.flush()

    record = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
    assert record["message"] == "hello"
    assert record["run_id"] == "run-123"
    assert record["board_id"] == "b1"


def test_console_only_without_log_file(monkeypatch, restore_logging):
    monkeypatch.delenv("LOG_FILE", raising=False)
    monkeypatch.delenv("LOG_JSON", raising=False)

    run_id = setup_logging_from_env()

    root = logging.getLogger()
    assert run_id
    assert not any(isinstance(h, RotatingFileHandler) for h in root.handlers)
    assert len(root.handlers) == 1


def test_unwritable_log_file_falls_back_to_console(tmp_path, restore_logging):
    # a directory cannot be opened as a log file
    run_id = setup_logging(log_file=str(tmp_path), run_id="r1")

    root = logging.getLogger()
    assert run_id == "r1"
    assert [type(h) for h in root.handlers] == [logging.StreamHandler]


def test_keeps_record_factory_installed_after_import(restore_logging):
    outer = logging.getLogRecordFactory()

    def tagging_factory(*args, **kwargs):
        record = outer(*args, **kwargs)
        record.tag = "kept"
        return record
    logging.setLogRecordFactory(tagging_factory)

    setup_logging(run_id="first")
    setup_logging(run_id="second")

    record = logging.getLogRecordFactory()("x", logging.INFO, __file__, 1, "msg", None, None)
    assert record.tag == "kept"
    assert record.run_id == "second"
    # the second setup replaced the first wrapper instead of stacking on it
    assert logging.getLogRecordFactory()._run_id_base is tagging_factory
