from __future__ import annotations

"""Record builders shared by the test modules."""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from storage.schema import AttemptRecord, QuestionRecord, ResponseRecord

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def at(hours: float = 0, minutes: float = 0) -> datetime:
    return T0 + timedelta(hours=hours, minutes=minutes)


def question(qid: str, correct: Any = "A", answer_type: str = "single", section_id: Optional[str] = None) -> QuestionRecord:
    return QuestionRecord(id=qid, correct_answer=correct, answer_type=answer_type, section_id=section_id)


def attempt(
    aid: str,
    *,
    user: str = "u1",
    section: str = "S1",
    exam: str = "E",
    created: Optional[datetime] = None,
    submitted: bool = True,
    **kw: Any,
) -> AttemptRecord:
    created = created or T0
    return AttemptRecord(
        id=aid,
        user_id=user,
        section_id=section,
        exam_id=exam,
        created_at=created,
        submitted_at=(created + timedelta(minutes=30)) if submitted else None,
        **kw,
    )


def response(
    rid: str,
    qid: str,
    attempt_id: str,
    selected: Any,
    *,
    seconds: float = 10,
    review: bool = False,
    stored: Optional[bool] = None,
) -> ResponseRecord:
    return ResponseRecord(
        id=rid,
        question_id=qid,
        attempt_id=attempt_id,
        selected_answer=selected,
        time_spent_seconds=seconds,
        is_marked_for_review=review,
        stored_is_correct=stored,
    )
