from .schema import (
    AttemptSummary,
    Boundary,
    Classification,
    GradedResponse,
    Overview,
    QuestionStat,
    Report,
    SectionStat,
    Session,
    TrendPoint,
)

__all__ = [
    "AttemptSummary",
    "Boundary",
    "Classification",
    "GradedResponse",
    "Overview",
    "QuestionStat",
    "Report",
    "SectionStat",
    "Session",
    "TrendPoint",
]
