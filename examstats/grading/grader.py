from __future__ import annotations

"""Per-response grading.

The canonical correct answer always wins. The stored `is_correct` flag is
only read when the question has no canonical answer at all.
"""

from typing import Dict, Iterable, List, Optional

from storage.schema import QuestionRecord, ResponseRecord

from ..explain import trace
from ..results.schema import Classification, GradedResponse
from .answers import decode_correct, decode_selected
from .comparator import answers_equal


def grade(response: ResponseRecord, question: Optional[QuestionRecord]) -> Classification:
    """Classify one response as correct, wrong or unanswered."""
    if response.selected_answer is None:
        return Classification.UNANSWERED
    correct = decode_correct(question.correct_answer) if question is not None else None
    if correct is not None:
        if answers_equal(decode_selected(response.selected_answer), correct):
            return Classification.CORRECT
        return Classification.WRONG
    # Last resort: possibly stale upstream flag
    if response.stored_is_correct:
        return Classification.CORRECT
    return Classification.WRONG


def dedupe_responses(responses: Iterable[ResponseRecord]) -> List[ResponseRecord]:
    """Keep one response per (attempt, question); the later one wins."""
    latest: Dict[tuple, ResponseRecord] = {}
    for r in responses:
        k = (r.attempt_id, r.question_id)
        if k in latest:
            trace("response_duplicate", {"attempt_id": r.attempt_id, "question_id": r.question_id, "kept": r.id})
            # re-insert so order follows the winning record
            del latest[k]
        latest[k] = r
    return list(latest.values())


def grade_all(
    responses: Iterable[ResponseRecord],
    questions: Iterable[QuestionRecord],
) -> List[GradedResponse]:
    """Grade every response against its question. Never raises per record."""
    by_id = {q.id: q for q in questions}
    out: List[GradedResponse] = []
    for r in responses:
        q = by_id.get(r.question_id)
        if q is None:
            trace("question_missing", {"response_id": r.id, "question_id": r.question_id})
        elif q.correct_answer is None and r.selected_answer is not None:
            trace("grade_fallback", {"response_id": r.id, "question_id": r.question_id})
        out.append(GradedResponse(response=r, classification=grade(r, q)))
    return out
