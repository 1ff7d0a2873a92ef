# medcabinet/app.py
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from medcabinet import config as cfg
from medcabinet.adapters.memory_store import InMemoryDocumentStore
from medcabinet.adapters.scheduler_notifier import SchedulerNotifier
from medcabinet.core.config_validation import validate_catalog, validate_config
from medcabinet.core.logging_utils import kv, setup_logging
from medcabinet.core.medicine_records import MedicineRecords
from medcabinet.core.questions import load_catalog
from medcabinet.core.reminder_engine import ReminderManager

log = logging.getLogger("medcabinet.app")


async def deliver(content: Dict[str, Any]) -> None:
    """Reminder fired: the local notification surface is the log."""
    log.info(
        "reminder.fire "
        + kv(
            title=content.get("title"),
            body=content.get("body"),
            medicine_id=(content.get("data") or {}).get("medicineId"),
        )
    )


async def seed_store(store: InMemoryDocumentStore) -> None:
    for m in cfg.MEDICINES:
        doc = {k: v for k, v in m.items() if k != "id"}
        doc["userId"] = cfg.USER_ID
        await store.set(cfg.MEDICINES_COLLECTION, m["id"], doc)
    await store.set(cfg.USERS_COLLECTION, cfg.USER_ID, {"medicationNotifications": True})


async def main() -> None:
    setup_logging(cfg)
    validate_config(cfg)
    catalog = load_catalog(cfg.QUESTIONS_FILE)
    validate_catalog(catalog)

    sched = AsyncIOScheduler(timezone=cfg.TZ)
    notifier = SchedulerNotifier(sched, deliver, tz=cfg.TZ)
    reminders = ReminderManager.from_config(cfg, notifier)

    store = InMemoryDocumentStore()
    await seed_store(store)
    records = MedicineRecords(
        store,
        reminders,
        medicines_collection=cfg.MEDICINES_COLLECTION,
        users_collection=cfg.USERS_COLLECTION,
    )

    if await records.notifications_enabled(cfg.USER_ID):
        await records.schedule_all(cfg.USER_ID)

    sched.start()
    log.info(
        "startup.ready "
        + kv(questions=len(catalog), reminders=len(reminders.state), tz=cfg.TIMEZONE)
    )

    try:
        await asyncio.Event().wait()
    finally:
        sched.shutdown(wait=False)


if __name__ == "__main__":
    asyncio.run(main())
