# medcabinet/core/summaries.py
from __future__ import annotations

import re
from datetime import date
from typing import Any, Dict, Mapping, Optional

from medcabinet.core.answers import AnswerSlot, slot_at
from medcabinet.core.matcher import NO, YES, Matcher
from medcabinet.core.questions import Question, QuestionCatalog

_DOB_RE = re.compile(r"^\s*(\d{1,2})/(\d{1,2})/(\d{4})\s*$")


def clip(text: str, limit: int) -> str:
    return f"{text[:limit]}..." if len(text) > limit else text


class Summarizer:
    """Builds the one-line summary stored next to each answer."""

    def __init__(self, matcher: Matcher, clip_at: int = 100) -> None:
        self.matcher = matcher
        self.clip_at = clip_at

    @classmethod
    def from_config(cls, cfg: Any) -> "Summarizer":
        return cls(
            Matcher(cfg.YES_PATTERNS, cfg.NO_PATTERNS),
            clip_at=int(getattr(cfg, "SUMMARY_CLIP", 100)),
        )

    def summarize(self, question: Question, answer: str) -> str:
        a = (answer or "").strip()
        if not a:
            return ""

        if question.kind == "yesno":
            verdict = self.matcher.classify(a)
            if verdict == YES and question.summary_yes:
                return question.summary_yes
            if verdict == NO and question.summary_no:
                return question.summary_no
            if question.summary_other:
                return question.summary_other

        if question.summary:
            return question.summary.format(answer=a)

        return clip(a, self.clip_at)

    def set_answer(
        self,
        slots: Mapping[int, AnswerSlot],
        catalog: QuestionCatalog,
        key: str,
        answer: str,
    ) -> Dict[int, AnswerSlot]:
        """Return a new local draft with `key` answered and summarized."""
        q = catalog.get(key)
        out = dict(slots)
        out[q.index] = AnswerSlot(answer, self.summarize(q, answer))
        return out

    def derive_age(
        self,
        slots: Mapping[int, AnswerSlot],
        catalog: QuestionCatalog,
        today: date,
    ) -> Dict[int, AnswerSlot]:
        """
        Fill every question marked `derived_from: date_of_birth` from the DOB slot.
        Unchanged when the DOB is blank/unparseable or the age is already current.
        """
        out = dict(slots)
        for q in catalog:
            if q.derived_from is None:
                continue
            dob_text = slot_at(out, catalog.index_of(q.derived_from)).answer
            age = age_from_dob(dob_text, today)
            if age is None:
                continue
            age_text = str(age)
            if slot_at(out, q.index).answer != age_text:
                out[q.index] = AnswerSlot(age_text, self.summarize(q, age_text))
        return out


def age_from_dob(text: Optional[str], today: date) -> Optional[int]:
    """Whole years since an MM/DD/YYYY birth date; never negative."""
    m = _DOB_RE.match(text or "")
    if not m:
        return None
    mm, dd, yyyy = (int(x) for x in m.groups())
    try:
        dob = date(yyyy, mm, dd)
    except ValueError:
        return None
    age = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        age -= 1
    return max(0, age)


__all__ = ["Summarizer", "age_from_dob", "clip"]
