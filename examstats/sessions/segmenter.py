from __future__ import annotations

"""Session segmentation: fold per-section attempts into logical sittings.

Attempts are processed per user in ascending `created_at` order. An open
accumulator is closed and a new one started when the incoming attempt
1. revisits a section already in the sitting,
2. starts more than `gap` after the previous attempt, or
3. belongs to a different exam.
The checks run in that order; the first that fires is recorded as the
session's `closed_by`.

Users never share state, so `segment` shards by user and takes any `map`
(e.g. `ThreadPoolExecutor.map`) to run the shards. Within one user the fold
is strictly sequential.
"""

from dataclasses import dataclass, replace
from functools import partial
from datetime import datetime, timedelta
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from storage.schema import AttemptRecord

from ..results.schema import AttemptSummary, Boundary, Session

SESSION_GAP = timedelta(hours=6)


@dataclass(frozen=True)
class Accumulator:
    user_id: str
    exam_id: str
    section_ids: frozenset
    start_time: datetime
    last_time: datetime
    correct_count: int
    total_questions: int
    is_submitted: bool
    attempt_ids: Tuple[str, ...]

    def close(self, closed_by: Optional[Boundary] = None) -> Session:
        return Session(
            user_id=self.user_id,
            exam_id=self.exam_id,
            section_ids=self.section_ids,
            start_time=self.start_time,
            last_time=self.last_time,
            correct_count=self.correct_count,
            total_questions=self.total_questions,
            is_submitted=self.is_submitted,
            attempt_ids=self.attempt_ids,
            closed_by=closed_by,
        )


def _counts(a: AttemptRecord, summaries: Mapping[str, AttemptSummary]) -> Tuple[int, int]:
    s = summaries.get(a.id)
    if s is not None:
        return s.correct_count, s.total_questions
    return int(a.score or 0), int(a.total_questions or 0)


def open_accumulator(a: AttemptRecord, summaries: Mapping[str, AttemptSummary]) -> Accumulator:
    correct, total = _counts(a, summaries)
    return Accumulator(
        user_id=a.user_id,
        exam_id=a.exam_id,
        section_ids=frozenset([a.section_id]),
        start_time=a.created_at,
        last_time=a.created_at,
        correct_count=correct,
        total_questions=total,
        is_submitted=a.is_submitted,
        attempt_ids=(a.id,),
    )


def boundary(acc: Accumulator, a: AttemptRecord, gap: timedelta = SESSION_GAP) -> Optional[Boundary]:
    """Return the first trigger that starts a new session, if any."""
    if a.section_id in acc.section_ids:
        return Boundary.SECTION_REVISIT
    if a.created_at - acc.last_time > gap:
        return Boundary.TIME_GAP
    if a.exam_id != acc.exam_id:
        return Boundary.EXAM_SWITCH
    return None


def absorb(acc: Accumulator, a: AttemptRecord, summaries: Mapping[str, AttemptSummary]) -> Accumulator:
    # Totals add up per attempt, even for repeated question ids
    correct, total = _counts(a, summaries)
    return replace(
        acc,
        section_ids=acc.section_ids | {a.section_id},
        last_time=a.created_at,
        correct_count=acc.correct_count + correct,
        total_questions=acc.total_questions + total,
        is_submitted=acc.is_submitted or a.is_submitted,
        attempt_ids=acc.attempt_ids + (a.id,),
    )


def step(
    state: Mapping[str, Accumulator],
    a: AttemptRecord,
    summaries: Mapping[str, AttemptSummary],
    gap: timedelta = SESSION_GAP,
) -> Tuple[Dict[str, Accumulator], Optional[Session]]:
    """Fold one attempt into the per-user state.

    Returns the new state and the session closed by this attempt, if any.
    The input mapping is left untouched.
    """
    new_state = dict(state)
    acc = state.get(a.user_id)
    if acc is None:
        new_state[a.user_id] = open_accumulator(a, summaries)
        return new_state, None
    trigger = boundary(acc, a, gap)
    if trigger is None:
        new_state[a.user_id] = absorb(acc, a, summaries)
        return new_state, None
    new_state[a.user_id] = open_accumulator(a, summaries)
    return new_state, acc.close(trigger)


def _by_time(attempts: Iterable[AttemptRecord]) -> List[AttemptRecord]:
    # stable: equal timestamps keep input order
    return sorted(attempts, key=lambda a: a.created_at)


def segment_user(
    attempts: Iterable[AttemptRecord],
    summaries: Optional[Mapping[str, AttemptSummary]] = None,
    gap: timedelta = SESSION_GAP,
) -> List[Session]:
    """Segment one user's attempts. Sequential by construction."""
    state, emitted = segment_stream(attempts, summaries, gap)
    return emitted + flush(state)


def shard_by_user(attempts: Iterable[AttemptRecord]) -> Dict[str, List[AttemptRecord]]:
    shards: Dict[str, List[AttemptRecord]] = {}
    for a in attempts:
        shards.setdefault(a.user_id, []).append(a)
    return shards


def segment(
    attempts: Iterable[AttemptRecord],
    summaries: Optional[Mapping[str, AttemptSummary]] = None,
    *,
    gap: timedelta = SESSION_GAP,
    map_fn: Callable = map,
) -> List[Session]:
    """Segment all attempts into sessions, one independent fold per user."""
    summaries = summaries or {}
    shards = list(shard_by_user(attempts).values())
    out: List[Session] = []
    for sessions in map_fn(partial(segment_user, summaries=summaries, gap=gap), shards):
        out.extend(sessions)
    return out


def segment_stream(
    attempts: Iterable[AttemptRecord],
    summaries: Optional[Mapping[str, AttemptSummary]] = None,
    gap: timedelta = SESSION_GAP,
) -> Tuple[Dict[str, Accumulator], List[Session]]:
    """Single pass over the whole time-ordered stream with a keyed state map.

    Returns the still-open accumulators and the sessions emitted so far; the
    open ones are not flushed so callers can keep folding.
    """
    summaries = summaries or {}
    state: Dict[str, Accumulator] = {}
    emitted: List[Session] = []
    for a in _by_time(attempts):
        state, closed = step(state, a, summaries, gap)
        if closed is not None:
            emitted.append(closed)
    return state, emitted


def flush(state: Mapping[str, Accumulator]) -> List[Session]:
    return [acc.close() for acc in state.values()]
