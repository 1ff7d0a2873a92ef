# medcabinet/core/logging_utils.py
from __future__ import annotations

import logging
import os
from datetime import date, datetime
from logging.handlers import RotatingFileHandler
from typing import Any, List

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers that share the medcabinet handlers
SCHEDULER_LOGGER = "apscheduler"


def _close_handlers(logger: logging.Logger) -> None:
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()


def setup_logging(cfg: Any) -> logging.Logger:
    """
    Route the ``medcabinet.*`` loggers to a rotating audit file and the console.

    The audit file keeps DEBUG (each parse fallback, trigger and cancel handle); the
    console level comes from ``cfg.LOG_LEVEL``. APScheduler's own warnings (misfires,
    job errors) land in the same audit file. Calling it again replaces the handlers.
    """
    path = cfg.AUDIT_LOG_FILE
    log_dir = os.path.dirname(path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    fmt = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

    audit = RotatingFileHandler(
        path,
        maxBytes=int(getattr(cfg, "AUDIT_LOG_MAX_BYTES", 1_000_000)),
        backupCount=int(getattr(cfg, "AUDIT_LOG_BACKUPS", 10)),
        encoding="utf-8",
    )
    audit.setFormatter(fmt)
    audit.setLevel(logging.DEBUG)

    console = logging.StreamHandler()
    console.setFormatter(fmt)
    console.setLevel(getattr(cfg, "LOG_LEVEL", "INFO"))

    handlers: List[logging.Handler] = [audit, console]

    root = logging.getLogger("medcabinet")
    _close_handlers(root)
    root.setLevel(logging.DEBUG)
    root.propagate = False
    for h in handlers:
        root.addHandler(h)

    sched = logging.getLogger(SCHEDULER_LOGGER)
    _close_handlers(sched)
    sched.setLevel(logging.WARNING)
    sched.propagate = False
    for h in handlers:
        sched.addHandler(h)

    return root


def _render(v: Any) -> str:
    if isinstance(v, (datetime, date)):
        return v.isoformat()
    return repr(v)


def kv(**kwargs: Any) -> str:
    """key=value event fields; dates print as ISO, everything else as repr."""
    return " ".join(f"{k}={_render(v)}" for k, v in kwargs.items())
