from __future__ import annotations

"""Build the per-attempt frame that section, trend and overview stats read."""

from typing import Iterable, Mapping

import numpy as np
import pandas as pd

from examstats.results.schema import AttemptSummary
from storage.schema import AttemptRecord

ATTEMPT_STATS_DTYPES = {
    "attempt_id": "string",
    "user_id": "string",
    "exam_id": "string",
    "section_id": "string",
    "exam_name": "string",
    "section_name": "string",
    "created_at": pd.DatetimeTZDtype(tz="UTC"),
    "submitted_at": pd.DatetimeTZDtype(tz="UTC"),
    "is_submitted": "bool",
    "correct": "int64",
    "total": "int64",
    "time_spent_seconds": "float64",
}


def _empty_df() -> pd.DataFrame:
    df = pd.DataFrame({k: pd.Series(dtype=v) for k, v in ATTEMPT_STATS_DTYPES.items()})
    return df.assign(
        accuracy=pd.Series(dtype="float64"),
        avg_time_per_question=pd.Series(dtype="float64"),
    )


def prepare_attempts(
    attempts: Iterable[AttemptRecord],
    summaries: Mapping[str, AttemptSummary],
) -> pd.DataFrame:
    """One row per attempt with engine-derived counts.

    Adds:
    - accuracy: float64 = correct / total * 100 (0 when total is 0)
    - avg_time_per_question: float64 = time / total (0 when total is 0)
    """
    rows = []
    for a in attempts:
        s = summaries.get(a.id)
        rows.append(
            {
                "attempt_id": a.id,
                "user_id": a.user_id,
                "exam_id": a.exam_id,
                "section_id": a.section_id,
                "exam_name": a.exam_name,
                "section_name": a.section_name,
                "created_at": a.created_at,
                "submitted_at": a.submitted_at,
                "is_submitted": a.is_submitted,
                "correct": s.correct_count if s else int(a.score or 0),
                "total": s.total_questions if s else int(a.total_questions or 0),
                "time_spent_seconds": s.time_spent_seconds if s else float(a.time_spent_seconds or 0),
            }
        )
    if not rows:
        return _empty_df()
    df = pd.DataFrame(rows)
    for col, dt in ATTEMPT_STATS_DTYPES.items():
        if isinstance(dt, pd.DatetimeTZDtype):
            df[col] = pd.to_datetime(df[col], utc=True)
        else:
            df[col] = df[col].astype(dt)
    total = df["total"].to_numpy(dtype="float64")
    # Avoid divide by zero; ratios are 0 when there are no questions
    safe = np.where(total > 0, total, 1.0)
    df["accuracy"] = np.where(total > 0, df["correct"].to_numpy(dtype="float64") / safe * 100.0, 0.0)
    df["avg_time_per_question"] = np.where(total > 0, df["time_spent_seconds"].to_numpy() / safe, 0.0)
    return df


def submitted_only(df: pd.DataFrame) -> pd.DataFrame:
    return df[df["is_submitted"]]
