"""Process-wide logging for the exporter: stdout, optional rotating file, run_id on every record."""
from __future__ import annotations

import logging
import os
import sys
import uuid
from logging.handlers import RotatingFileHandler
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

PLAIN_FORMAT = "%(asctime)s %(levelname)-8s [%(run_id)s] %(name)s: %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s %(run_id)s"
NOISY_LOGGERS = ("httpx", "httpcore")


def _build_formatter(json_mode: bool) -> logging.Formatter:
    if json_mode:
        return JsonFormatter(fmt=JSON_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")
    return logging.Formatter(fmt=PLAIN_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def _install_run_id(run_id: str) -> None:
    current = logging.getLogRecordFactory()
    # a factory installed by an earlier setup call is replaced, anything else is wrapped
    base = getattr(current, "_run_id_base", current)

    def record_factory(*args, **kwargs):
        record = base(*args, **kwargs)
        record.run_id = run_id
        return record
    record_factory._run_id_base = base
    logging.setLogRecordFactory(record_factory)


def setup_logging(
    *,
    level: str = "INFO",
    json_mode: bool = False,
    log_file: Optional[str] = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    run_id: Optional[str] = None,
) -> str:
    run_id = run_id or str(uuid.uuid4())
    _install_run_id(run_id)

    log_level = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(log_level)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = _build_formatter(json_mode)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    file_error: OSError | None = None
    if log_file:
        try:
            handlers.append(
                RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
            )
        except OSError as e:
            file_error = e
    for h in handlers:
        h.setFormatter(fmt)
        root.addHandler(h)

    quiet = logging.WARNING if log_level > logging.DEBUG else logging.NOTSET
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet)

    log = logging.getLogger(__name__)
    if file_error is not None:
        log.warning("Cannot open log file, logging to stdout only", extra={"log_file": log_file, "error": str(file_error)})
    log.debug("Logging initialized", extra={"json": json_mode, "log_file": log_file})
    return run_id


def setup_logging_from_env() -> str:
    """setup_logging() driven by LOG_LEVEL, LOG_JSON, LOG_FILE, LOG_MAX_BYTES, LOG_BACKUP_COUNT, RUN_ID."""
    return setup_logging(
        level=os.getenv("LOG_LEVEL", "INFO"),
        json_mode=os.getenv("LOG_JSON", "false").lower() in {"1", "true", "yes", "on"},
        log_file=os.getenv("LOG_FILE") or None,
        max_bytes=int(os.getenv("LOG_MAX_BYTES", "10485760")),
        backup_count=int(os.getenv("LOG_BACKUP_COUNT", "5")),
        run_id=os.getenv("RUN_ID"),
    )
