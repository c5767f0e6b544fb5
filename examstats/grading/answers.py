from __future__ import annotations

"""Answer shapes, decoded once from raw JSON values.

Raw answers arrive in three encodings: a scalar, an ordered list (multi
select), or an object carrying an `answer`/`value` field. They are decoded
into a closed set of frozen dataclasses so comparison never has to look at
raw JSON again.
"""

import json
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple, Union


@dataclass(frozen=True)
class Scalar:
    text: str


@dataclass(frozen=True)
class MultiChoice:
    items: Tuple[str, ...]


@dataclass(frozen=True)
class Wrapped:
    text: str


Answer = Union[Scalar, MultiChoice, Wrapped]


def stringify(v: Any) -> str:
    """Render any JSON-like value as text."""
    if isinstance(v, str):
        return v
    if v is None:
        return "null"
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    if isinstance(v, (list, tuple)):
        return ",".join(stringify(x) for x in v)
    if isinstance(v, Mapping):
        return json.dumps(v, sort_keys=True, separators=(",", ":"), default=str)
    return str(v)


def normalize(v: Any) -> str:
    return stringify(v).strip().lower()


def _unwrap(raw: Mapping) -> Any:
    val = raw.get("answer")
    if val is None:
        val = raw.get("value")
    return val


def decode_correct(raw: Any) -> Optional[Answer]:
    """Decode a canonical correct answer. None means no canonical answer."""
    if raw is None:
        return None
    if isinstance(raw, (list, tuple)):
        return MultiChoice(tuple(stringify(x) for x in raw))
    if isinstance(raw, Mapping):
        val = _unwrap(raw)
        if val is None:
            # neither field present: compare the object as text
            return Scalar(stringify(raw))
        return Wrapped(stringify(val))
    return Scalar(stringify(raw))


def decode_selected(raw: Any) -> Optional[Answer]:
    """Decode a submitted answer. Objects are never unwrapped on this side."""
    if raw is None:
        return None
    if isinstance(raw, (list, tuple)):
        return MultiChoice(tuple(stringify(x) for x in raw))
    return Scalar(stringify(raw))


def flat_text(answer: Answer) -> str:
    if isinstance(answer, MultiChoice):
        return ",".join(answer.items)
    return answer.text


def wrong_answer_key(raw: Any, separator: str = ", ") -> str:
    """Normalized key for the wrong-answer frequency map.

    Multi-select answers are keyed by their sorted, normalized items so that
    the same set picked in a different order counts once.
    """
    if isinstance(raw, (list, tuple)):
        return separator.join(sorted(normalize(x) for x in raw))
    return normalize(raw)


def format_answer(raw: Any, separator: str = ", ") -> str:
    """Human readable rendering of a raw answer."""
    if raw is None or raw == "" or raw == [] or raw == ():
        return "Not answered"
    if isinstance(raw, (list, tuple)):
        return separator.join(stringify(x) for x in raw)
    if isinstance(raw, Mapping):
        val = _unwrap(raw)
        if val is not None:
            return format_answer(val, separator)
    return stringify(raw)
