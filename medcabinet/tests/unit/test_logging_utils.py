# medcabinet/tests/unit/test_logging_utils.py
import logging
from datetime import date, datetime
from logging.handlers import RotatingFileHandler
from zoneinfo import ZoneInfo

import pytest

from medcabinet.core.logging_utils import kv, setup_logging


@pytest.fixture
def restore_loggers():
    yield
    for name in ("medcabinet", "apscheduler"):
        lg = logging.getLogger(name)
        for h in list(lg.handlers):
            lg.removeHandler(h)
            h.close()
        lg.propagate = True
        lg.setLevel(logging.NOTSET)


def _cfg(tmp_path, **extra):
    attrs = {"AUDIT_LOG_FILE": str(tmp_path / "logs" / "audit.log"), "LOG_LEVEL": "WARNING"}
    attrs.update(extra)
    return type("Cfg", (), attrs)


def test_setup_writes_audit_file_and_sets_console_level(tmp_path, restore_loggers):
    root = setup_logging(_cfg(tmp_path))
    files = [h for h in root.handlers if isinstance(h, RotatingFileHandler)]
    consoles = [h for h in root.handlers if not isinstance(h, RotatingFileHandler)]
    assert len(files) == 1 and len(consoles) == 1
    assert files[0].level == logging.DEBUG
    assert consoles[0].level == logging.WARNING
    assert files[0].maxBytes == 1_000_000 and files[0].backupCount == 10

    logging.getLogger("medcabinet.reminders").debug("reminder.cancel " + kv(handle="h1"))
    files[0].flush()
    text = (tmp_path / "logs" / "audit.log").read_text(encoding="utf-8")
    assert "medcabinet.reminders: reminder.cancel handle='h1'" in text


def test_scheduler_warnings_reach_audit_file(tmp_path, restore_loggers):
    root = setup_logging(_cfg(tmp_path))
    logging.getLogger("apscheduler.executors.default").warning("Run time of job was missed")
    logging.getLogger("apscheduler.scheduler").info("Added job")
    for h in root.handlers:
        h.flush()
    text = (tmp_path / "logs" / "audit.log").read_text(encoding="utf-8")
    assert "Run time of job was missed" in text
    assert "Added job" not in text


def test_setup_twice_replaces_handlers(tmp_path, restore_loggers):
    setup_logging(_cfg(tmp_path))
    root = setup_logging(_cfg(tmp_path, AUDIT_LOG_BACKUPS=3))
    assert len(root.handlers) == 2
    assert len(logging.getLogger("apscheduler").handlers) == 2
    fh = next(h for h in root.handlers if isinstance(h, RotatingFileHandler))
    assert fh.backupCount == 3


def test_kv_formatting():
    assert kv(a=1, b="x") == "a=1 b='x'"
    assert kv(handles=["h1", "h2"]) == "handles=['h1', 'h2']"
    when = datetime(2026, 11, 2, 9, 0, tzinfo=ZoneInfo("UTC"))
    assert kv(at=when, day=date(2026, 11, 2)) == "at=2026-11-02T09:00:00+00:00 day=2026-11-02"
