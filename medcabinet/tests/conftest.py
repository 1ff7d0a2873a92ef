# medcabinet/tests/conftest.py
import sys
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

# This file is at <project_root>/medcabinet/tests/conftest.py
# Project root is two levels up from here.
ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

UTC = ZoneInfo("UTC")


class FixedClock:
    """Clock frozen at a given instant; tests move it by assigning `.at`."""

    def __init__(self, at: datetime):
        self.at = at
        self.tz = at.tzinfo

    def now(self) -> datetime:
        return self.at

    def today(self):
        return self.at.date()


class FakeNotifier:
    """Records every call in order; handles are sequential strings."""

    def __init__(self):
        self.calls = []
        self.active = {}
        self._n = 0

    def _next(self) -> str:
        self._n += 1
        return f"h{self._n}"

    def schedule_at(self, instant, content):
        h = self._next()
        self.calls.append(("at", instant, h))
        self.active[h] = ("at", instant, content)
        return h

    def schedule_recurring(self, descriptor, content):
        h = self._next()
        self.calls.append(("recurring", descriptor, h))
        self.active[h] = ("recurring", descriptor, content)
        return h

    def cancel(self, handle):
        self.calls.append(("cancel", handle))
        return self.active.pop(handle, None) is not None

    def cancel_all(self):
        self.calls.append(("cancel_all",))
        n = len(self.active)
        self.active.clear()
        return n


@pytest.fixture
def clock():
    # Sunday
    return FixedClock(datetime(2026, 10, 18, 12, 0, tzinfo=UTC))


@pytest.fixture
def notifier():
    return FakeNotifier()
