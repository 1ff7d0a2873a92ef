# medcabinet/core/medicines.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Medicine:
    """One medicine record as stored in the `medicines` collection."""

    id: str
    name: str
    user_id: str = ""
    dosage: str = ""
    time_to_take: str = ""
    date: Optional[str] = None  # YYYY-MM-DD, one-time reminder
    days_of_week: Tuple[int, ...] = ()  # 1 = Sunday ... 7 = Saturday
    frequency: Optional[str] = None
    notification_handles: Tuple[str, ...] = field(default=())

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "Medicine":
        return cls(
            id=doc_id,
            name=str(data.get("name") or ""),
            user_id=str(data.get("userId") or ""),
            dosage=str(data.get("dosage") or ""),
            time_to_take=str(data.get("timeToTake") or ""),
            date=data.get("date") or None,
            days_of_week=_weekdays(data.get("daysOfWeek")),
            frequency=data.get("frequency") or None,
            notification_handles=_handles(data),
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "userId": self.user_id,
            "dosage": self.dosage,
            "timeToTake": self.time_to_take,
            "date": self.date,
            "daysOfWeek": list(self.days_of_week),
            "frequency": self.frequency,
            "notificationIds": list(self.notification_handles),
        }


def _weekdays(raw: Any) -> Tuple[int, ...]:
    if not isinstance(raw, (list, tuple)):
        return ()
    out: List[int] = []
    for x in raw:
        try:
            out.append(int(x))
        except (TypeError, ValueError):
            continue
    return tuple(out)


def _handles(data: Dict[str, Any]) -> Tuple[str, ...]:
    """Read `notificationIds` (list) or the older comma-joined `notificationId` string."""
    ids = data.get("notificationIds")
    if isinstance(ids, (list, tuple)):
        return tuple(str(x) for x in ids if str(x).strip())
    legacy = data.get("notificationId")
    if not legacy:
        return ()
    return tuple(part.strip() for part in str(legacy).split(",") if part.strip())


__all__ = ["Medicine"]
