# medcabinet/core/reminder_engine.py
from __future__ import annotations

import dataclasses
import logging
from typing import Any, Dict, Iterable, List, Optional
from zoneinfo import ZoneInfo

from medcabinet.core.i18n import fmt
from medcabinet.core.logging_utils import kv
from medcabinet.core.medicines import Medicine
from medcabinet.core.recurrence import (
    OneShotTrigger,
    Unscheduled,
    compute_schedule,
    rule_for_medicine,
)
from medcabinet.core.reminder_state import ActiveSchedule, Clock, ReminderState
from medcabinet.core.timeofday import parse_time_of_day


def reminder_content(med: Medicine) -> Dict[str, Any]:
    body_key = "reminder_body_dosage" if med.dosage else "reminder_body"
    return {
        "title": fmt("reminder_title", name=med.name),
        "body": fmt(body_key, name=med.name, dosage=med.dosage),
        "sound": fmt("reminder_sound"),
        "data": {
            "medicineId": med.id,
            "medicineName": med.name,
            "scheduledTime": med.time_to_take,
        },
    }


class ReminderManager:
    """
    Keeps the notifier in sync with medicine records.

    Every (re)schedule cancels the handles already known for the medicine before
    registering new triggers, so each medicine has at most one active set of
    notifications. The notifier is any object with schedule_at / schedule_recurring /
    cancel / cancel_all.
    """

    def __init__(
        self,
        notifier: Any,
        clock: Optional[Clock] = None,
        *,
        tz: Optional[ZoneInfo] = None,
        strict_time: bool = False,
    ) -> None:
        self.notifier = notifier
        self.clock = clock or Clock(tz or ZoneInfo("UTC"))
        self.strict_time = strict_time
        self.state = ReminderState()
        self.log = logging.getLogger("medcabinet.reminders")

    @classmethod
    def from_config(cls, cfg: Any, notifier: Any, clock: Optional[Clock] = None) -> "ReminderManager":
        return cls(
            notifier,
            clock,
            tz=getattr(cfg, "TZ", None),
            strict_time=bool(getattr(cfg, "STRICT_TIME_PARSING", False)),
        )

    # -- public API ----------------------------------------------------
    def reschedule(self, med: Medicine) -> Medicine:
        """
        Cancel whatever is registered for `med`, then register its current schedule.
        Returns the medicine with its new notification handles (empty if unscheduled).
        """
        now = self.clock.now()
        rule = rule_for_medicine(med, now.date())
        if isinstance(rule, Unscheduled):
            self._cancel_known(med)
            self.log.info("reminder.skip " + kv(medicine_id=med.id, reason="no time"))
            return dataclasses.replace(med, notification_handles=())

        # Strict mode raises here, before anything already registered is touched
        time = parse_time_of_day(med.time_to_take, strict=self.strict_time)
        self._cancel_known(med)
        content = reminder_content(med)

        handles: List[str] = []
        for trig in compute_schedule(rule, time, now):
            if isinstance(trig, OneShotTrigger):
                handle = self.notifier.schedule_at(trig.at, content)
            else:
                handle = self.notifier.schedule_recurring(trig, content)
            handles.append(handle)

        self.state.put(ActiveSchedule(med.id, time, rule, tuple(handles)))
        self.log.info(
            "reminder.scheduled "
            + kv(
                medicine_id=med.id,
                rule=type(rule).__name__,
                hour=time.hour,
                minute=time.minute,
                handles=handles,
            )
        )
        return dataclasses.replace(med, notification_handles=tuple(handles))

    def unschedule(self, med: Medicine) -> Medicine:
        self._cancel_known(med)
        return dataclasses.replace(med, notification_handles=())

    def reschedule_all(self, meds: Iterable[Medicine]) -> List[Medicine]:
        return [self.reschedule(m) for m in meds]

    def cancel_all(self) -> None:
        self.notifier.cancel_all()
        self.state.clear()
        self.log.info("reminder.cancel_all")

    # -- internals -----------------------------------------------------
    def _cancel_known(self, med: Medicine) -> None:
        handles: List[str] = list(med.notification_handles)
        active = self.state.pop(med.id)
        if active is not None:
            handles.extend(h for h in active.handles if h not in handles)
        for h in handles:
            cancelled = self.notifier.cancel(h)
            self.log.debug(
                "reminder.cancel " + kv(medicine_id=med.id, handle=h, cancelled=cancelled)
            )
