from __future__ import annotations

"""Tabular views of a Report and CSV / NDJSON export."""

from pathlib import Path
from typing import Dict, List

import pandas as pd

from examstats.results.schema import Report

ATTEMPT_CSV_COLUMNS = {
    "submitted_at": "Date",
    "exam_name": "Exam",
    "section_name": "Section",
    "correct": "Score",
    "total": "Total Questions",
    "accuracy": "Accuracy %",
    "avg_time_per_question": "Avg Time/Question (s)",
    "time_spent_seconds": "Total Time (s)",
}


def _sessions_df(report: Report) -> pd.DataFrame:
    rows = [
        {
            "user_id": s.user_id,
            "exam_id": s.exam_id,
            "sections": ",".join(sorted(s.section_ids)),
            "start_time": s.start_time,
            "last_time": s.last_time,
            "correct": s.correct_count,
            "total": s.total_questions,
            "accuracy": s.accuracy,
            "is_submitted": s.is_submitted,
            "attempts": len(s.attempt_ids),
            "closed_by": s.closed_by.value if s.closed_by else None,
        }
        for s in report.sessions
    ]
    return pd.DataFrame(rows, columns=[
        "user_id", "exam_id", "sections", "start_time", "last_time", "correct",
        "total", "accuracy", "is_submitted", "attempts", "closed_by",
    ])


def _questions_df(report: Report) -> pd.DataFrame:
    rows = [
        {
            "question_id": q.question_id,
            "total_attempts": q.total_attempts,
            "correct": q.correct_count,
            "wrong": q.wrong_count,
            "unanswered": q.unanswered_count,
            "reviewed": q.reviewed_count,
            "accuracy": q.accuracy,
            "avg_time": q.avg_time,
            "review_rate": q.review_rate,
            "most_common_wrong": q.most_common_wrong,
        }
        for q in report.question_stats
    ]
    return pd.DataFrame(rows, columns=[
        "question_id", "total_attempts", "correct", "wrong", "unanswered",
        "reviewed", "accuracy", "avg_time", "review_rate", "most_common_wrong",
    ])


def report_frames(report: Report) -> Dict[str, pd.DataFrame]:
    """One DataFrame per report view."""
    sections = pd.DataFrame(
        [vars(s) for s in report.section_stats],
        columns=["section_id", "section_name", "attempt_count", "avg_accuracy", "total_time_seconds", "avg_time_seconds"],
    )
    trend = pd.DataFrame(
        [vars(t) for t in report.trend],
        columns=["date", "attempt_count", "mean_accuracy", "mean_avg_time_per_question"],
    )
    distribution = pd.DataFrame(
        {"bucket": ["0-20", "20-40", "40-60", "60-80", "80-100"], "sessions": list(report.distribution)}
    )
    return {
        "sessions": _sessions_df(report),
        "questions": _questions_df(report),
        "sections": sections,
        "trend": trend,
        "distribution": distribution,
    }


def export_csv(report: Report, outdir: Path, decimals: int = 2) -> List[Path]:
    """Write each report frame as `<name>.csv` under outdir. Returns the paths."""
    outdir = Path(outdir)
    outdir.mkdir(parents=True, exist_ok=True)
    written = []
    for name, df in report_frames(report).items():
        p = outdir / f"{name}.csv"
        df.round(decimals).to_csv(p, index=False)
        written.append(p)
    return written


def attempts_csv(attempts_df: pd.DataFrame, out_path: Path, decimals: int = 2) -> None:
    """Write submitted attempts, newest first, with display headers."""
    sub = attempts_df[attempts_df["is_submitted"]].sort_values("submitted_at", ascending=False)
    out = sub[list(ATTEMPT_CSV_COLUMNS)].rename(columns=ATTEMPT_CSV_COLUMNS)
    out["Date"] = sub["submitted_at"].dt.date
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    out.round(decimals).to_csv(out_path, index=False)


def export_ndjson(df: pd.DataFrame, out_path: Path) -> None:
    """Export a DataFrame to line-delimited JSON (NDJSON) for quick inspection."""
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    df.to_json(out_path, orient="records", lines=True, date_format="iso")
