# medcabinet/core/answer_sync.py
from __future__ import annotations

import logging
from typing import Any, List, Optional

from medcabinet.core.answers import (
    AnswerSlot,
    Answers,
    answers_from_document,
    answers_to_document,
    merge_answers,
)
from medcabinet.core.logging_utils import kv
from medcabinet.core.questions import QuestionCatalog
from medcabinet.core.reminder_state import Clock

# Fields push() owns on the user document
RESERVED_FIELDS = frozenset({"answers", "updatedAt"})


class AnswerSync:
    """
    Reconciles the local questionnaire draft with the user's stored record.

    Both directions use merge_answers: whatever the draft has filled in wins, blanks
    are taken from the store. Store errors propagate to the caller.
    """

    def __init__(
        self,
        store: Any,
        catalog: QuestionCatalog,
        clock: Clock,
        collection: str = "users",
    ) -> None:
        self.store = store
        self.catalog = catalog
        self.clock = clock
        self.collection = collection
        self.log = logging.getLogger("medcabinet.sync")

    async def fetch_remote(self, user_id: str) -> List[AnswerSlot]:
        doc = await self.store.get(self.collection, user_id)
        return answers_from_document(doc)

    async def pull(self, user_id: str, local: Answers) -> List[AnswerSlot]:
        """Initial load: fill the draft's blanks from the stored record."""
        remote = await self.fetch_remote(user_id)
        merged = merge_answers(len(self.catalog), local, remote)
        self.log.debug(
            "sync.pull " + kv(user_id=user_id, remote=len(remote), filled=_filled(merged))
        )
        return merged

    async def push(self, user_id: str, local: Answers, *, extra: Optional[dict] = None) -> List[AnswerSlot]:
        """
        Merge the draft over the stored record and write it back.
        `extra` adds sibling fields; it may not carry the answers or the timestamp.
        """
        clash = sorted(RESERVED_FIELDS.intersection(extra or {}))
        if clash:
            raise ValueError(f"extra may not set {', '.join(clash)}")
        remote = await self.fetch_remote(user_id)
        merged = merge_answers(len(self.catalog), local, remote)
        fields = dict(extra or {})
        fields["answers"] = answers_to_document(merged)
        fields["updatedAt"] = self.clock.now().isoformat()
        await self.store.set(self.collection, user_id, fields, merge=True)
        self.log.info("sync.push " + kv(user_id=user_id, filled=_filled(merged)))
        return merged


def _filled(slots: List[AnswerSlot]) -> int:
    return sum(1 for s in slots if not s.is_blank)
