# medcabinet/core/questions.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

import yaml

KINDS = ("text", "date", "number", "phone", "yesno", "detail")


class QuestionCatalogError(ValueError):
    pass


@dataclass(frozen=True)
class Question:
    index: int
    key: str
    text: str
    kind: str = "text"
    summary: Optional[str] = None
    summary_yes: Optional[str] = None
    summary_no: Optional[str] = None
    summary_other: Optional[str] = None
    depends_on: Optional[str] = None
    derived_from: Optional[str] = None


class QuestionCatalog:
    """
    Ordered, append-only master question list.
    A question's index is its position and is the identity of its answer slot.
    """

    def __init__(self, questions: List[Question]) -> None:
        self._questions = list(questions)
        self._by_key: Dict[str, Question] = {q.key: q for q in self._questions}

    def __len__(self) -> int:
        return len(self._questions)

    def __iter__(self) -> Iterator[Question]:
        return iter(self._questions)

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def __getitem__(self, index: int) -> Question:
        return self._questions[index]

    def get(self, key: str) -> Question:
        try:
            return self._by_key[key]
        except KeyError:
            raise KeyError(f"unknown question key: {key}") from None

    def index_of(self, key: str) -> int:
        return self.get(key).index

    def dependents_of(self, key: str) -> List[Question]:
        return [q for q in self._questions if q.depends_on == key]

    # -- loading --------------------------------------------------------
    @classmethod
    def from_entries(cls, entries: Any) -> "QuestionCatalog":
        if not isinstance(entries, list) or not entries:
            raise QuestionCatalogError("'questions' must be a non-empty list")

        questions: List[Question] = []
        seen: set[str] = set()
        for idx, e in enumerate(entries):
            if not isinstance(e, dict):
                raise QuestionCatalogError(f"question #{idx} must be a mapping")
            key = str(e.get("key") or "").strip()
            text = str(e.get("text") or "").strip()
            if not key:
                raise QuestionCatalogError(f"question #{idx} is missing 'key'")
            if not text:
                raise QuestionCatalogError(f"question '{key}' is missing 'text'")
            if key in seen:
                raise QuestionCatalogError(f"duplicate question key '{key}'")
            seen.add(key)
            kind = e.get("kind", "text")
            if kind not in KINDS:
                raise QuestionCatalogError(f"question '{key}': unknown kind '{kind}'")
            questions.append(
                Question(
                    index=idx,
                    key=key,
                    text=text,
                    kind=kind,
                    summary=e.get("summary"),
                    summary_yes=e.get("summary_yes"),
                    summary_no=e.get("summary_no"),
                    summary_other=e.get("summary_other"),
                    depends_on=e.get("depends_on"),
                    derived_from=e.get("derived_from"),
                )
            )

        for q in questions:
            for ref in (q.depends_on, q.derived_from):
                if ref is not None and ref not in seen:
                    raise QuestionCatalogError(
                        f"question '{q.key}' refers to unknown question '{ref}'"
                    )
        return cls(questions)


def load_catalog(path: str | Path) -> QuestionCatalog:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise QuestionCatalogError(f"{path}: top level must be a mapping")
    return QuestionCatalog.from_entries(data.get("questions"))


__all__ = ["KINDS", "Question", "QuestionCatalog", "QuestionCatalogError", "load_catalog"]
