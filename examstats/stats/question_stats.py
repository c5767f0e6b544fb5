from __future__ import annotations

"""Per-question stats: counters accumulated over graded responses."""

from typing import Collection, Dict, Iterable, List, Optional

from ..grading.answers import wrong_answer_key
from ..results.schema import Classification, GradedResponse, QuestionStat


def update_stat(stat: QuestionStat, g: GradedResponse, separator: str = ", ") -> None:
    """Update a stat for a single graded response."""
    r = g.response
    stat.total_attempts += 1
    stat.time_sum += float(r.time_spent_seconds or 0)
    if r.is_marked_for_review:
        stat.reviewed_count += 1
    # Unanswered means no selection at all, whatever the grade says
    if r.selected_answer is None:
        stat.unanswered_count += 1
    elif g.classification == Classification.CORRECT:
        stat.correct_count += 1
    else:
        stat.wrong_count += 1
        key = wrong_answer_key(r.selected_answer, separator)
        stat.wrong_answers[key] = stat.wrong_answers.get(key, 0) + 1


def aggregate(
    graded: Iterable[GradedResponse],
    submitted_attempt_ids: Collection[str],
    *,
    question_ids: Optional[Iterable[str]] = None,
    separator: str = ", ",
) -> List[QuestionStat]:
    """Accumulate stats per question over responses of submitted attempts.

    - Responses of attempts not in `submitted_attempt_ids` are ignored.
    - `question_ids` seeds empty stats so unanswered questions still report.
    - Output is sorted by question id.
    """
    stats: Dict[str, QuestionStat] = {}
    for qid in question_ids or ():
        stats.setdefault(qid, QuestionStat(question_id=qid))
    submitted = set(submitted_attempt_ids)
    for g in graded:
        if g.attempt_id not in submitted:
            continue
        stat = stats.setdefault(g.question_id, QuestionStat(question_id=g.question_id))
        update_stat(stat, g, separator)
    return [stats[k] for k in sorted(stats)]
