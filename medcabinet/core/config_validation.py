# medcabinet/core/config_validation.py
from __future__ import annotations

import re
from typing import Any, Dict, List
from zoneinfo import ZoneInfo

from medcabinet.core.questions import QuestionCatalog
from medcabinet.core.recurrence import WEEKDAY_NAMES
from medcabinet.core.timeofday import TimeParseError, parse_time_of_day

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def validate_config(cfg: Any) -> None:
    """Validate runtime configuration before starting the reminder service."""
    if not isinstance(getattr(cfg, "TZ", None), ZoneInfo):
        raise ValueError("TZ must be a zoneinfo.ZoneInfo")

    try:
        parse_time_of_day(getattr(cfg, "DEFAULT_REMINDER_TIME", None), strict=True)
    except TimeParseError:
        raise ValueError("DEFAULT_REMINDER_TIME must be a valid time of day") from None

    level = getattr(cfg, "LOG_LEVEL", "INFO")
    if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ValueError(f"LOG_LEVEL must be a logging level name, got {level!r}")

    for name in ("YES_PATTERNS", "NO_PATTERNS"):
        pats = getattr(cfg, name, None)
        if not isinstance(pats, list) or not pats or not all(isinstance(x, str) and x for x in pats):
            raise ValueError(f"{name} must be a non-empty list of strings")

    meds: List[Dict[str, Any]] = getattr(cfg, "MEDICINES", None) or []
    if not isinstance(meds, list):
        raise ValueError("MEDICINES must be a list")

    seen: set[str] = set()
    for m in meds:
        for key in ("id", "name"):
            if not str(m.get(key) or "").strip():
                raise ValueError(f"medicine missing required field: {key}")
        mid = m["id"]
        if mid in seen:
            raise ValueError(f"duplicate medicine id '{mid}'")
        seen.add(mid)

        t = m.get("timeToTake")
        if t:
            # Configured reminders are never silently defaulted
            try:
                parse_time_of_day(t, strict=True)
            except TimeParseError:
                raise ValueError(f"medicine {mid}: invalid timeToTake '{t}'") from None

        d = m.get("date")
        if d is not None and not _DATE_RE.match(str(d)):
            raise ValueError(f"medicine {mid}: invalid date '{d}' (expected YYYY-MM-DD)")

        days = m.get("daysOfWeek") or []
        if not isinstance(days, list) or any(x not in WEEKDAY_NAMES for x in days):
            raise ValueError(f"medicine {mid}: daysOfWeek must be a list of 1..7")


def validate_catalog(catalog: QuestionCatalog) -> None:
    """Cross-checks the loader does not do: yes/no wording and derivations."""
    for q in catalog:
        if q.kind == "yesno" and not (q.summary_yes and q.summary_no):
            raise ValueError(f"yes/no question '{q.key}' needs summary_yes and summary_no")
        if q.depends_on is not None and catalog.get(q.depends_on).kind != "yesno":
            raise ValueError(f"question '{q.key}' must depend on a yes/no question")
        if q.derived_from is not None and catalog.get(q.derived_from).kind != "date":
            raise ValueError(f"question '{q.key}' can only be derived from a date question")
        if q.summary is not None:
            try:
                q.summary.format(answer="x")
            except (KeyError, IndexError):
                raise ValueError(f"question '{q.key}': summary may only use {{answer}}") from None
