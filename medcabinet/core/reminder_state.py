# medcabinet/core/reminder_state.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Iterable, Optional, Tuple
from zoneinfo import ZoneInfo

from medcabinet.core.recurrence import RecurrenceRule
from medcabinet.core.timeofday import TimeOfDay


@dataclass(frozen=True)
class ActiveSchedule:
    """What is currently registered with the notifier for one medicine."""

    medicine_id: str
    time: TimeOfDay
    rule: RecurrenceRule
    handles: Tuple[str, ...]


class Clock:
    """Injectable, testable clock bound to a timezone."""

    def __init__(self, tz: ZoneInfo):
        self.tz = tz

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def today(self) -> date:
        return self.now().date()


class ReminderState:
    """
    In-memory registry: at most one ActiveSchedule per medicine.
    Only stores; cancel/register ordering lives in the ReminderManager.
    """

    def __init__(self) -> None:
        self._active: Dict[str, ActiveSchedule] = {}

    def get(self, medicine_id: str) -> Optional[ActiveSchedule]:
        return self._active.get(medicine_id)

    def values(self) -> Iterable[ActiveSchedule]:
        return self._active.values()

    def put(self, sched: ActiveSchedule) -> None:
        self._active[sched.medicine_id] = sched

    def pop(self, medicine_id: str) -> Optional[ActiveSchedule]:
        return self._active.pop(medicine_id, None)

    def clear(self) -> None:
        self._active.clear()

    def __len__(self) -> int:
        return len(self._active)
