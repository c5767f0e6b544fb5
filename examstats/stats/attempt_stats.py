from __future__ import annotations

"""Engine-derived per-attempt counts (score, total, time).

Supplied attempt scores are advisory. Whenever an attempt has graded
responses its counts are recomputed from them; attempts without any fall
back to the supplied fields.
"""

from typing import Dict, Iterable

from storage.schema import AttemptRecord

from ..results.schema import AttemptSummary, Classification, GradedResponse


def summarize_attempts(
    attempts: Iterable[AttemptRecord],
    graded: Iterable[GradedResponse],
) -> Dict[str, AttemptSummary]:
    totals: Dict[str, Dict[str, float]] = {}
    for g in graded:
        t = totals.setdefault(g.attempt_id, {"correct": 0, "total": 0, "time": 0.0})
        t["total"] += 1
        t["time"] += float(g.response.time_spent_seconds or 0)
        if g.classification == Classification.CORRECT:
            t["correct"] += 1

    out: Dict[str, AttemptSummary] = {}
    for a in attempts:
        t = totals.get(a.id)
        if t is not None:
            out[a.id] = AttemptSummary(
                attempt_id=a.id,
                correct_count=int(t["correct"]),
                total_questions=int(t["total"]),
                time_spent_seconds=float(t["time"]),
            )
        else:
            out[a.id] = AttemptSummary(
                attempt_id=a.id,
                correct_count=int(a.score or 0),
                total_questions=int(a.total_questions or 0),
                time_spent_seconds=float(a.time_spent_seconds or 0),
                derived=False,
            )
    return out
