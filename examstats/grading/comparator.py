from __future__ import annotations

"""Equivalence between a submitted answer and the canonical one.

All comparisons are case and surrounding-whitespace insensitive. Multi
select answers compare as sorted lists, so pick order does not matter.
"""

from typing import Any, Optional

from .answers import (
    Answer,
    MultiChoice,
    decode_correct,
    decode_selected,
    flat_text,
    normalize,
)


def answers_equal(selected: Optional[Answer], correct: Optional[Answer]) -> bool:
    """Compare two decoded answers. Pure and total."""
    if selected is None or correct is None:
        return False
    if isinstance(correct, MultiChoice):
        if isinstance(selected, MultiChoice):
            picked = selected.items
        else:
            picked = (selected.text,)
        if len(picked) != len(correct.items):
            return False
        return sorted(normalize(x) for x in picked) == sorted(normalize(x) for x in correct.items)
    # Scalar and Wrapped both reduce to a text comparison
    return normalize(flat_text(selected)) == normalize(correct.text)


def equals(selected: Any, correct: Any) -> bool:
    """Compare raw JSON-like answers by decoding both sides first."""
    return answers_equal(decode_selected(selected), decode_correct(correct))
