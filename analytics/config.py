from __future__ import annotations

"""Analytics configuration (hyperparameters) using Pydantic."""

from pydantic import BaseModel, Field


class AnalyticsConfig(BaseModel):
    """Knobs for one report computation.

    - session_gap_hours: idle gap that starts a new session (>0)
    - wrong_answer_separator: joins multi-select wrong answers
    - trend_timezone: calendar used to bucket the accuracy trend by day
    - accuracy_decimals: rounding for display/export only (>=0)
    """

    session_gap_hours: float = Field(6.0, gt=0)
    wrong_answer_separator: str = ", "
    trend_timezone: str = "UTC"
    accuracy_decimals: int = Field(2, ge=0)
