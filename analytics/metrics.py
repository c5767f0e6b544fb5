from __future__ import annotations

"""Report views computed from the attempt frame and the session list."""

from typing import Iterable, List, Tuple

import numpy as np
import pandas as pd

from examstats.results.schema import Overview, SectionStat, Session, TrendPoint, pct

from .prepare import submitted_only

# Inclusive upper edges: [0,20], (20,40], (40,60], (60,80], (80,100]
SCORE_BINS = [0.0, 20.0, 40.0, 60.0, 80.0, 100.0]


def section_stats(df: pd.DataFrame) -> List[SectionStat]:
    """Per-section stats over submitted attempts.

    avg_accuracy is the arithmetic mean of per-attempt accuracy, so every
    attempt weighs the same regardless of its question count. With unequal
    section lengths this differs from pooled correct/total.
    """
    sub = submitted_only(df)
    if sub.empty:
        return []
    g = sub.groupby("section_id", sort=True, observed=True)
    agg = g.agg(
        attempt_count=("attempt_id", "count"),
        avg_accuracy=("accuracy", "mean"),
        total_time_seconds=("time_spent_seconds", "sum"),
        avg_time_seconds=("time_spent_seconds", "mean"),
        section_name=("section_name", "first"),
    )
    out = []
    for section_id, row in agg.iterrows():
        name = row["section_name"]
        out.append(
            SectionStat(
                section_id=str(section_id),
                attempt_count=int(row["attempt_count"]),
                avg_accuracy=float(row["avg_accuracy"]),
                total_time_seconds=float(row["total_time_seconds"]),
                avg_time_seconds=float(row["avg_time_seconds"]),
                section_name=None if pd.isna(name) else str(name),
            )
        )
    return out


def score_distribution(sessions: Iterable[Session]) -> Tuple[int, int, int, int, int]:
    """Bucket submitted sessions' accuracy into five inclusive-upper ranges."""
    acc = [s.accuracy for s in sessions if s.is_submitted]
    if not acc:
        return (0, 0, 0, 0, 0)
    values = pd.Series(np.clip(np.asarray(acc, dtype="float64"), 0.0, 100.0))
    buckets = pd.cut(values, bins=SCORE_BINS, right=True, include_lowest=True)
    counts = buckets.value_counts(sort=False).tolist()
    return tuple(int(c) for c in counts)  # type: ignore[return-value]


def accuracy_trend(df: pd.DataFrame, tz: str = "UTC") -> List[TrendPoint]:
    """Per-day accuracy and time-per-question means over submitted attempts.

    Days are calendar dates of submission in `tz`.
    """
    sub = submitted_only(df)
    if sub.empty:
        return []
    days = sub["submitted_at"].dt.tz_convert(tz).dt.date
    agg = (
        sub.assign(day=days)
        .groupby("day", sort=True)
        .agg(
            attempt_count=("attempt_id", "count"),
            mean_accuracy=("accuracy", "mean"),
            mean_avg_time_per_question=("avg_time_per_question", "mean"),
        )
    )
    return [
        TrendPoint(
            date=day,
            attempt_count=int(row["attempt_count"]),
            mean_accuracy=float(row["mean_accuracy"]),
            mean_avg_time_per_question=float(row["mean_avg_time_per_question"]),
        )
        for day, row in agg.iterrows()
    ]


def overview(df: pd.DataFrame, sessions: List[Session]) -> Overview:
    """Headline numbers for dashboards. Zeroes on empty input."""
    sub = submitted_only(df)
    submitted_sessions = sum(1 for s in sessions if s.is_submitted)
    if sub.empty:
        return Overview(
            total_sessions=len(sessions),
            submitted_sessions=submitted_sessions,
            completion_rate=pct(submitted_sessions, len(sessions)),
        )
    return Overview(
        total_sessions=len(sessions),
        submitted_sessions=submitted_sessions,
        completion_rate=pct(submitted_sessions, len(sessions)),
        total_attempts=int(len(sub)),
        avg_accuracy=float(sub["accuracy"].mean()),
        avg_time_per_question=float(sub["avg_time_per_question"].mean()),
        best_score=float(sub["accuracy"].max()),
    )
