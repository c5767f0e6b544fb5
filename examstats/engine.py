from __future__ import annotations

"""Report computation: raw records in, one Report out.

grade responses -> derive per-attempt counts -> segment sessions
-> per-question stats (submitted attempts only) -> section/distribution/trend.

Pure and synchronous. Holds no state between calls; a bad record is traced
and skipped instead of failing the report.
"""

from datetime import timedelta
from typing import Any, Callable, Dict, Iterable, List, Optional

from analytics.config import AnalyticsConfig
from analytics.prepare import prepare_attempts
from analytics.report import assemble_report
from storage.schema import AttemptRecord, QuestionRecord, ResponseRecord, Scope, parse_records
from storage.store import RecordStore

from .explain import trace
from .grading.grader import dedupe_responses, grade_all
from .results.schema import Report
from .sessions.segmenter import segment
from .stats.attempt_stats import summarize_attempts
from .stats.question_stats import aggregate


def unique_attempts(attempts: Iterable[AttemptRecord]) -> List[AttemptRecord]:
    """Drop repeated attempt ids; the later record wins."""
    by_id: Dict[str, AttemptRecord] = {}
    for a in attempts:
        if a.id in by_id:
            trace("attempt_duplicate", {"attempt_id": a.id})
        by_id[a.id] = a
    return list(by_id.values())


def _owned_responses(responses: Iterable[ResponseRecord], attempt_ids: set[str]) -> List[ResponseRecord]:
    out = []
    for r in responses:
        if r.attempt_id not in attempt_ids:
            trace("response_orphaned", {"response_id": r.id, "attempt_id": r.attempt_id})
            continue
        out.append(r)
    return out


def compute_report(
    questions: Iterable[Any],
    attempts: Iterable[Any],
    responses: Iterable[Any],
    cfg: Optional[AnalyticsConfig] = None,
    *,
    map_fn: Callable = map,
) -> Report:
    """Compute a Report from raw question, attempt and response rows.

    Rows may be model instances or plain mappings. `map_fn` runs the
    per-user segmentation shards (pass an executor's `map` to parallelize).
    """
    cfg = cfg or AnalyticsConfig()
    qs = parse_records(QuestionRecord, list(questions))
    ats = unique_attempts(parse_records(AttemptRecord, list(attempts)))
    attempt_ids = {a.id for a in ats}
    rs = dedupe_responses(_owned_responses(parse_records(ResponseRecord, list(responses)), attempt_ids))
    trace("report_started", {"questions": len(qs), "attempts": len(ats), "responses": len(rs)})

    graded = grade_all(rs, qs)
    summaries = summarize_attempts(ats, graded)

    sessions = segment(ats, summaries, gap=timedelta(hours=cfg.session_gap_hours), map_fn=map_fn)
    trace("sessions_segmented", {"sessions": len(sessions)})

    submitted = {a.id for a in ats if a.is_submitted}
    question_stats = aggregate(
        graded,
        submitted,
        question_ids=[q.id for q in qs],
        separator=cfg.wrong_answer_separator,
    )

    df = prepare_attempts(ats, summaries)
    report = assemble_report(sessions, question_stats, df, summaries, cfg)
    trace("report_done", {"sessions": len(report.sessions), "questions": len(report.question_stats)})
    return report


def report_from_store(
    store: RecordStore,
    scope: Optional[Scope] = None,
    cfg: Optional[AnalyticsConfig] = None,
    *,
    map_fn: Callable = map,
) -> Report:
    """Fetch one snapshot from `store` and compute its Report."""
    scope = scope or Scope()
    attempts = store.fetch_attempts(scope)
    questions = store.fetch_questions(scope)
    responses = store.fetch_responses([a.id for a in attempts])
    return compute_report(questions, attempts, responses, cfg, map_fn=map_fn)
