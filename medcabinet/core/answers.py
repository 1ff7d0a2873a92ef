# medcabinet/core/answers.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union


@dataclass(frozen=True)
class AnswerSlot:
    """One question's stored answer plus its short human-readable summary."""

    answer: str = ""
    summary: str = ""

    @property
    def is_blank(self) -> bool:
        return self.answer.strip() == ""


EMPTY = AnswerSlot()

# Either {index: slot} or the dense/short array stored in the user document
Answers = Union[Mapping[int, Any], Sequence[Any], None]


def _text(v: Any) -> str:
    return v if isinstance(v, str) else ""


def coerce_slot(raw: Any) -> AnswerSlot:
    """Accept AnswerSlot, a stored dict, or anything else (treated as empty)."""
    if isinstance(raw, AnswerSlot):
        return raw
    if isinstance(raw, Mapping):
        summary = raw.get("summarizedAnswer")
        if summary is None:
            summary = raw.get("summary")
        return AnswerSlot(_text(raw.get("answer")), _text(summary))
    return EMPTY


def slot_at(answers: Answers, index: int) -> AnswerSlot:
    if answers is None:
        return EMPTY
    if isinstance(answers, Mapping):
        return coerce_slot(answers.get(index))
    if isinstance(answers, (str, bytes)):
        return EMPTY
    if 0 <= index < len(answers):
        return coerce_slot(answers[index])
    return EMPTY


def merge_answers(master_length: int, local: Answers, remote: Answers) -> List[AnswerSlot]:
    """
    One slot per master index. A slot whose local answer is non-blank wins as a whole;
    otherwise the remote slot is taken; missing on both sides gives empty strings.

    Local always wins over remote, whatever the remote write time.
    """
    merged: List[AnswerSlot] = []
    for i in range(max(0, master_length)):
        local_slot = slot_at(local, i)
        merged.append(local_slot if not local_slot.is_blank else slot_at(remote, i))
    return merged


# -------------------------------------------------------------------------------------------------
# Document form: {"answer": ..., "summarizedAnswer": ...}
# -------------------------------------------------------------------------------------------------
def slot_to_document(slot: AnswerSlot) -> Dict[str, str]:
    return {"answer": slot.answer, "summarizedAnswer": slot.summary}


def answers_to_document(slots: Sequence[AnswerSlot]) -> List[Dict[str, str]]:
    return [slot_to_document(s) for s in slots]


def answers_from_document(data: Optional[Mapping[str, Any]]) -> List[AnswerSlot]:
    raw = (data or {}).get("answers")
    if not isinstance(raw, list):
        return []
    return [coerce_slot(x) for x in raw]


__all__ = [
    "AnswerSlot",
    "EMPTY",
    "Answers",
    "coerce_slot",
    "slot_at",
    "merge_answers",
    "slot_to_document",
    "answers_to_document",
    "answers_from_document",
]
