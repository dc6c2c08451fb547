"""Fuzzy matching of action labels against the typed query.

Skim-style semantics: every query character has to appear in the label in
order, not necessarily next to each other. Matching is smart-case: it ignores
case unless the query contains an uppercase character.
"""

from __future__ import annotations

from typing import Callable

Matcher = Callable[[str, str], "int | None"]

SCORE_MATCH = 16
BONUS_CONSECUTIVE = 8
BONUS_BOUNDARY = 8
BONUS_FIRST_CHAR = 4
PENALTY_GAP = 3


def fuzzy_match(label: str, query: str) -> int | None:
    """Return a score if ``query`` matches ``label``, otherwise ``None``.

    Higher scores are better matches. An empty query matches every label
    with a score of 0.
    """
    if not query:
        return 0

    if any(ch.isupper() for ch in query):
        text, pattern = label, query
    else:
        text, pattern = label.lower(), query.lower()

    score = 0
    last = -1
    pos = 0
    for ch in pattern:
        idx = text.find(ch, pos)
        if idx == -1:
            return None
        score += SCORE_MATCH
        if last >= 0 and idx == last + 1:
            score += BONUS_CONSECUTIVE
        elif last >= 0:
            score -= PENALTY_GAP * (idx - last - 1)
        if idx == 0:
            score += BONUS_FIRST_CHAR + BONUS_BOUNDARY
        elif _is_boundary(text, idx):
            score += BONUS_BOUNDARY
        last = idx
        pos = idx + 1
    return score


def _is_boundary(text: str, idx: int) -> bool:
    prev = text[idx - 1]
    if not prev.isalnum():
        return True
    # camelCase hump
    return prev.islower() and text[idx].isupper()
