from __future__ import annotations

"""Compose sessions and question stats into the final Report."""

from typing import Dict, List, Optional

import pandas as pd

from examstats.results.schema import AttemptSummary, QuestionStat, Report, Session

from .config import AnalyticsConfig
from .metrics import accuracy_trend, overview, score_distribution, section_stats


def assemble_report(
    sessions: List[Session],
    question_stats: List[QuestionStat],
    attempts_df: pd.DataFrame,
    summaries: Optional[Dict[str, AttemptSummary]] = None,
    cfg: Optional[AnalyticsConfig] = None,
) -> Report:
    cfg = cfg or AnalyticsConfig()
    return Report(
        sessions=list(sessions),
        question_stats=list(question_stats),
        section_stats=section_stats(attempts_df),
        distribution=score_distribution(sessions),
        trend=accuracy_trend(attempts_df, cfg.trend_timezone),
        overview=overview(attempts_df, list(sessions)),
        attempt_summaries=dict(summaries or {}),
    )
