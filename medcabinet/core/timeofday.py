# medcabinet/core/timeofday.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Optional

from medcabinet.core.logging_utils import kv

log = logging.getLogger("medcabinet.time")

# "11:18pm", "11:18 pm", "9:00 AM", "14:00"
_HH_MM_RE = re.compile(r"^(\d{1,2}):(\d{2})\s*(am|pm)?$")
# "11pm", "7 am"
_HH_RE = re.compile(r"^(\d{1,2})\s*(am|pm)$")


class TimeParseError(ValueError):
    """Reminder time text could not be understood (strict parsing only)."""


@dataclass(frozen=True)
class TimeOfDay:
    """Wall-clock reminder time, 24-hour."""

    hour: int
    minute: int

    def __post_init__(self) -> None:
        if not (0 <= self.hour <= 23 and 0 <= self.minute <= 59):
            raise ValueError(f"invalid time of day {self.hour}:{self.minute:02d}")

    def as_time(self) -> time:
        return time(self.hour, self.minute)


DEFAULT_TIME = TimeOfDay(9, 0)


def _to_24h(hour: int, meridiem: Optional[str]) -> int:
    if meridiem == "pm" and hour < 12:
        return hour + 12
    if meridiem == "am" and hour == 12:
        return 0
    # No meridiem: already 24-hour
    return hour


def _match(clean: str) -> Optional[tuple[int, int]]:
    m = _HH_MM_RE.match(clean)
    if m:
        return _to_24h(int(m.group(1)), m.group(3)), int(m.group(2))
    m = _HH_RE.match(clean)
    if m:
        return _to_24h(int(m.group(1)), m.group(2)), 0
    return None


def parse_time_of_day(
    text: Optional[str],
    *,
    strict: bool = False,
    default: Optional[TimeOfDay] = None,
) -> TimeOfDay:
    """
    Parse loosely formatted reminder text ("11:18pm", "9:00 AM", "14:00", "7 am").

    Soft mode (default) never raises: anything unparseable, including matches whose
    hour/minute fall out of range, resolves to `default` (9:00 unless given).
    Strict mode raises TimeParseError instead.
    """
    fallback = default or DEFAULT_TIME
    clean = (text or "").strip().lower()

    parsed = _match(clean) if clean else None
    if parsed is not None:
        hour, minute = parsed
        if 0 <= hour <= 23 and 0 <= minute <= 59:
            result = TimeOfDay(hour, minute)
            log.debug("time.parse " + kv(text=text, hour=hour, minute=minute))
            return result

    if strict:
        raise TimeParseError(f"unrecognized time {text!r}")

    log.warning(
        "time.parse.fallback "
        + kv(text=text, hour=fallback.hour, minute=fallback.minute)
    )
    return fallback


def format_time_of_day(t: TimeOfDay) -> str:
    """12-hour form without padding on the hour: 0:05 -> '12:05am', 23:18 -> '11:18pm'."""
    meridiem = "am" if t.hour < 12 else "pm"
    hour12 = t.hour % 12 or 12
    return f"{hour12}:{t.minute:02d}{meridiem}"


def at_time(day, t: TimeOfDay, tz) -> datetime:
    """The instant `day` at wall-clock `t` in `tz`."""
    return datetime(day.year, day.month, day.day, t.hour, t.minute, tzinfo=tz)


def not_after(a: datetime, b: datetime) -> bool:
    """
    a <= b as absolute instants.
    Aware datetimes sharing a tzinfo otherwise compare wall clocks and ignore fold.
    """
    if a.tzinfo is None or b.tzinfo is None:
        return a <= b
    return a.timestamp() <= b.timestamp()


def next_occurrence(t: TimeOfDay, from_: datetime) -> datetime:
    """
    First instant at wall-clock `t` that is strictly after `from_`.
    Today's slot is used unless it is <= from_, then the same time tomorrow.
    On a DST fall-back day the repeated wall-clock hour counts as today's slot.
    """
    target = at_time(from_.date(), t, from_.tzinfo)
    if not_after(target, from_):
        repeat = target.replace(fold=1)
        if not not_after(repeat, from_):
            return repeat
        target = at_time(from_.date() + timedelta(days=1), t, from_.tzinfo)
    return target


__all__ = [
    "DEFAULT_TIME",
    "TimeOfDay",
    "TimeParseError",
    "at_time",
    "format_time_of_day",
    "next_occurrence",
    "not_after",
    "parse_time_of_day",
]
