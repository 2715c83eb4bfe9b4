"""Text helpers shared by detector rules and fix transforms."""

from __future__ import annotations

import re


def line_at(text: str, offset: int) -> int:
    """1-based line number of a character offset."""
    return text.count("\n", 0, offset) + 1


def is_referenced(name: str, text: str) -> bool:
    """True if ``name`` occurs in ``text`` as a whole JS identifier."""
    return re.search(rf"(?<![\w$]){re.escape(name)}(?![\w$])", text) is not None
