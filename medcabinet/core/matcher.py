# medcabinet/core/matcher.py
from __future__ import annotations

import re
from typing import Iterable, List, Optional, Pattern

YES = "yes"
NO = "no"


class Matcher:
    """
    Regex-based yes/no classifier for free-text answers (Unicode + case-insensitive).
    All matching semantics live in the provided patterns (see config.YES_PATTERNS).
    """

    def __init__(self, yes_patterns: Iterable[str], no_patterns: Iterable[str]) -> None:
        flags = re.IGNORECASE | re.UNICODE
        self._yes: List[Pattern[str]] = [re.compile(p, flags) for p in yes_patterns]
        self._no: List[Pattern[str]] = [re.compile(p, flags) for p in no_patterns]

    def classify(self, text: str | None) -> Optional[str]:
        """Return YES, NO, or None when the answer is neither (details, "sometimes", ...)."""
        if not text:
            return None
        if any(rx.search(text) for rx in self._yes):
            return YES
        if any(rx.search(text) for rx in self._no):
            return NO
        return None


__all__ = ["Matcher", "YES", "NO"]
