# medcabinet/core/recurrence.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import FrozenSet, Iterable, List, Optional, Union

from medcabinet.core.logging_utils import kv
from medcabinet.core.medicines import Medicine
from medcabinet.core.timeofday import TimeOfDay, at_time, next_occurrence, not_after

log = logging.getLogger("medcabinet.schedule")

# 1 = Sunday ... 7 = Saturday
WEEKDAY_NAMES = {1: "sun", 2: "mon", 3: "tue", 4: "wed", 5: "thu", 6: "fri", 7: "sat"}


# -------------------------------------------------------------------------------------------------
# Recurrence rules
# -------------------------------------------------------------------------------------------------
@dataclass(frozen=True)
class OneTime:
    date: date


@dataclass(frozen=True)
class Weekly:
    weekdays: FrozenSet[int]

    def __post_init__(self) -> None:
        bad = [d for d in self.weekdays if d not in WEEKDAY_NAMES]
        if bad:
            raise ValueError(f"weekdays must be in 1..7, got {sorted(bad)}")


@dataclass(frozen=True)
class Daily:
    pass


@dataclass(frozen=True)
class Unscheduled:
    pass


RecurrenceRule = Union[OneTime, Weekly, Daily, Unscheduled]


# -------------------------------------------------------------------------------------------------
# Trigger descriptors (input to the notifier)
# -------------------------------------------------------------------------------------------------
@dataclass(frozen=True)
class OneShotTrigger:
    at: datetime


@dataclass(frozen=True)
class WeeklyTrigger:
    weekday: int
    time: TimeOfDay

    @property
    def day_of_week(self) -> str:
        return WEEKDAY_NAMES[self.weekday]


@dataclass(frozen=True)
class DailyTrigger:
    time: TimeOfDay


Trigger = Union[OneShotTrigger, WeeklyTrigger, DailyTrigger]


def compute_schedule(rule: RecurrenceRule, time: TimeOfDay, from_: datetime) -> List[Trigger]:
    """
    Turn a recurrence rule into trigger descriptors.

    OneTime whose instant is not after `from_` still fires once, at the next
    occurrence of `time`. Unscheduled yields nothing.
    """
    if isinstance(rule, OneTime):
        target = at_time(rule.date, time, from_.tzinfo)
        if not_after(target, from_):
            target = next_occurrence(time, from_)
            log.info(
                "schedule.onetime.rolled "
                + kv(date=rule.date.isoformat(), fires_at=target.isoformat())
            )
        return [OneShotTrigger(target)]

    if isinstance(rule, Weekly):
        return [WeeklyTrigger(d, time) for d in sorted(rule.weekdays)]

    if isinstance(rule, Daily):
        return [DailyTrigger(time)]

    return []


# -------------------------------------------------------------------------------------------------
# Rule selection for a stored medicine
# -------------------------------------------------------------------------------------------------
def _parse_iso_date(s: Optional[str]) -> Optional[date]:
    if not s:
        return None
    try:
        y, m, d = (int(x) for x in str(s).split("-"))
        return date(y, m, d)
    except ValueError:
        return None


def _valid_weekdays(days: Iterable[int]) -> FrozenSet[int]:
    return frozenset(d for d in days if d in WEEKDAY_NAMES)


def rule_for_medicine(med: Medicine, today: date) -> RecurrenceRule:
    """
    Precedence: no time -> Unscheduled; date -> OneTime; weekdays -> Weekly;
    frequency missing or mentioning "daily" -> Daily; other frequency -> next occurrence.
    """
    if not (med.time_to_take or "").strip():
        return Unscheduled()

    when = _parse_iso_date(med.date)
    if when is not None:
        return OneTime(when)
    if med.date:
        log.warning("schedule.date.invalid " + kv(medicine_id=med.id, date=med.date))

    weekdays = _valid_weekdays(med.days_of_week)
    if weekdays:
        return Weekly(weekdays)

    freq = (med.frequency or "").strip().lower()
    if not freq or "daily" in freq:
        return Daily()

    return OneTime(today)


__all__ = [
    "WEEKDAY_NAMES",
    "OneTime",
    "Weekly",
    "Daily",
    "Unscheduled",
    "RecurrenceRule",
    "OneShotTrigger",
    "WeeklyTrigger",
    "DailyTrigger",
    "Trigger",
    "compute_schedule",
    "rule_for_medicine",
]
