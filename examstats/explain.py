from __future__ import annotations

"""Opt-in report tracing.

Off by default; `examstats report --explain` turns it on. Each call prints
one `[EXPLAIN] <event> :: <json>` line. Events are the per-record anomalies
the engine skips or degrades (`record_skipped`, `response_orphaned`,
`response_duplicate`, `attempt_duplicate`, `question_missing`,
`grade_fallback`, `answer_type_unknown`, `options_ignored`) and the report
milestones `report_started`, `sessions_segmented` and `report_done`.
"""

import json
from typing import Any, Dict, Optional

_on = False


def enable(flag: bool = True) -> None:
    global _on
    _on = bool(flag)


def enabled() -> bool:
    return _on


def trace(event: str, payload: Optional[Dict[str, Any]] = None) -> None:
    """Print one trace line for `event` when tracing is on."""
    if not _on:
        return
    try:
        body = json.dumps(payload or {}, separators=(",", ":"), sort_keys=True, default=str)
    except (TypeError, ValueError):
        # unserializable keys
        print(f"[EXPLAIN] {event}")
        return
    print(f"[EXPLAIN] {event} :: {body}")
