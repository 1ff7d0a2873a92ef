# medcabinet/core/medicine_records.py
from __future__ import annotations

import dataclasses
import logging
from typing import Any, List, Optional

from medcabinet.core.logging_utils import kv
from medcabinet.core.medicines import Medicine
from medcabinet.core.reminder_engine import ReminderManager


class MedicineRecords:
    """
    Medicine cabinet persistence with reminders kept in step.

    Order on every write: cancel old notifications, register new ones, then persist
    the new handles on the record.
    """

    def __init__(
        self,
        store: Any,
        reminders: ReminderManager,
        *,
        medicines_collection: str = "medicines",
        users_collection: str = "users",
    ) -> None:
        self.store = store
        self.reminders = reminders
        self.medicines_collection = medicines_collection
        self.users_collection = users_collection
        self.log = logging.getLogger("medcabinet.records")

    async def get(self, med_id: str) -> Optional[Medicine]:
        data = await self.store.get(self.medicines_collection, med_id)
        return Medicine.from_document(med_id, data) if data is not None else None

    async def list_for_user(self, user_id: str) -> List[Medicine]:
        rows = await self.store.query(self.medicines_collection, {"userId": user_id})
        return [Medicine.from_document(doc_id, data) for doc_id, data in rows]

    async def save(self, med: Medicine, *, notify: bool = True) -> Medicine:
        """Persist `med`; with notify, its reminders are rescheduled first."""
        if notify:
            med = self.reminders.reschedule(med)
        await self.store.set(self.medicines_collection, med.id, med.to_document(), merge=True)
        self.log.info(
            "records.save "
            + kv(medicine_id=med.id, handles=list(med.notification_handles))
        )
        return med

    async def delete(self, med_id: str) -> bool:
        med = await self.get(med_id)
        if med is not None:
            self.reminders.unschedule(med)
        deleted = await self.store.delete(self.medicines_collection, med_id)
        self.log.info("records.delete " + kv(medicine_id=med_id, deleted=deleted))
        return deleted

    async def schedule_all(self, user_id: str) -> List[Medicine]:
        """Reschedule every medicine of the user that has a time to take."""
        out: List[Medicine] = []
        for med in await self.list_for_user(user_id):
            if not med.time_to_take.strip():
                continue
            out.append(await self.save(med))
        return out

    async def notifications_enabled(self, user_id: str) -> bool:
        doc = await self.store.get(self.users_collection, user_id) or {}
        return bool(doc.get("medicationNotifications", False))

    async def set_notifications_enabled(self, user_id: str, enabled: bool) -> None:
        await self.store.set(
            self.users_collection,
            user_id,
            {"medicationNotifications": enabled},
            merge=True,
        )
        if enabled:
            await self.schedule_all(user_id)
            return
        self.reminders.cancel_all()
        for med in await self.list_for_user(user_id):
            if med.notification_handles:
                await self.save(dataclasses.replace(med, notification_handles=()), notify=False)
