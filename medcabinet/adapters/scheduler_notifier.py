# medcabinet/adapters/scheduler_notifier.py
from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, FrozenSet, Set

from apscheduler.events import EVENT_ALL_JOBS_REMOVED, EVENT_JOB_REMOVED
from apscheduler.jobstores.base import JobLookupError
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.date import DateTrigger

from medcabinet.core.logging_utils import kv
from medcabinet.core.recurrence import DailyTrigger, Trigger, WeeklyTrigger


class SchedulerNotifier:
    """
    Local-notification collaborator on top of an APScheduler scheduler.

    Handles are job ids. Only jobs created here are touched by cancel_all(), so the
    scheduler can be shared with other work. `deliver(content)` is called when a
    reminder fires (sync or async callable; AsyncIOScheduler awaits coroutines).
    Jobs the scheduler drops on its own, such as a one-shot after it fires, leave
    the owned set through the job-removed event.
    """

    def __init__(self, scheduler: Any, deliver: Callable[[Dict[str, Any]], Any], tz=None) -> None:
        self.scheduler = scheduler
        self.deliver = deliver
        self.tz = tz
        self.log = logging.getLogger("medcabinet.notifier")
        self._owned: Set[str] = set()
        scheduler.add_listener(self._on_removed, EVENT_JOB_REMOVED | EVENT_ALL_JOBS_REMOVED)

    @property
    def handles(self) -> FrozenSet[str]:
        return frozenset(self._owned)

    def _on_removed(self, event: Any) -> None:
        if event.code == EVENT_ALL_JOBS_REMOVED:
            # reminder jobs all live in the default job store
            if event.alias in (None, "default"):
                self._owned.clear()
        else:
            self._owned.discard(event.job_id)

    # ---- schedule ----------------------------------------------------------------
    def schedule_at(self, instant: datetime, content: Dict[str, Any]) -> str:
        trigger = DateTrigger(run_date=instant, timezone=instant.tzinfo or self.tz)
        return self._add(trigger, content, kind="once", at=instant.isoformat())

    def schedule_recurring(self, descriptor: Trigger, content: Dict[str, Any]) -> str:
        if isinstance(descriptor, WeeklyTrigger):
            trigger = CronTrigger(
                day_of_week=descriptor.day_of_week,
                hour=descriptor.time.hour,
                minute=descriptor.time.minute,
                timezone=self.tz,
            )
            return self._add(trigger, content, kind="weekly", day=descriptor.day_of_week)
        if isinstance(descriptor, DailyTrigger):
            trigger = CronTrigger(
                hour=descriptor.time.hour,
                minute=descriptor.time.minute,
                timezone=self.tz,
            )
            return self._add(trigger, content, kind="daily")
        raise TypeError(f"not a recurring trigger: {descriptor!r}")

    def _add(self, trigger: Any, content: Dict[str, Any], **info: Any) -> str:
        med_id = (content.get("data") or {}).get("medicineId", "")
        job_id = f"reminder:{med_id}:{uuid.uuid4().hex[:12]}"
        self.scheduler.add_job(
            self.deliver,
            trigger=trigger,
            kwargs={"content": content},
            id=job_id,
            replace_existing=True,
            coalesce=True,
            misfire_grace_time=300,
            max_instances=1,
        )
        self._owned.add(job_id)
        self.log.debug("notifier.add " + kv(job_id=job_id, **info))
        return job_id

    # ---- cancel ------------------------------------------------------------------
    def cancel(self, handle: str) -> bool:
        """Remove a job; unknown or already-fired handles return False."""
        self._owned.discard(handle)
        try:
            self.scheduler.remove_job(handle)
        except JobLookupError:
            self.log.debug("notifier.cancel.unknown " + kv(job_id=handle))
            return False
        self.log.debug("notifier.cancel " + kv(job_id=handle))
        return True

    def cancel_all(self) -> int:
        cancelled = 0
        for job_id in list(self._owned):
            if self.cancel(job_id):
                cancelled += 1
        self.log.info("notifier.cancel_all " + kv(cancelled=cancelled))
        return cancelled
