from __future__ import annotations

from typing import List

from ..config import FONT_STEP, MIN_FONT_SIZE
from .surface import Measure


def shrink_to_fit(
    text: str,
    max_width: float,
    measure: Measure,
    base_size: float,
    min_size: float = MIN_FONT_SIZE,
    step: float = FONT_STEP,
) -> float:
    """
    Largest font size, stepping down from base_size, at which text fits max_width.

    Stops at min_size even if the text still overflows there; the caller
    draws it at that size anyway (single line, no truncation).
    """
    if step <= 0:
        raise ValueError("step must be positive")
    size = float(base_size)
    floor = min(float(min_size), size)
    while size > floor:
        if measure(text, size) <= max_width:
            return size
        size = max(floor, size - step)
    return floor


def wrap_words(text: str, max_width: float, measure: Measure, size: float) -> List[str]:
    """Greedy word wrap. A single word wider than max_width gets a line of its own."""
    words = (text or "").split()
    if not words:
        return [""]

    lines: List[str] = []
    cur: List[str] = []

    for w in words:
        test = " ".join(cur + [w])
        if measure(test, size) <= max_width:
            cur.append(w)
            continue

        if cur:
            lines.append(" ".join(cur))
            cur = [w]
        else:
            lines.append(w)

    if cur:
        lines.append(" ".join(cur))

    return lines
