from __future__ import annotations

"""Result dataclasses produced by one report computation.

None of these are persisted; they live for the duration of a single
`compute_report` call.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple

from storage.schema import ResponseRecord


class Classification(str, Enum):
    CORRECT = "correct"
    WRONG = "wrong"
    UNANSWERED = "unanswered"


class Boundary(str, Enum):
    SECTION_REVISIT = "section_revisit"
    TIME_GAP = "time_gap"
    EXAM_SWITCH = "exam_switch"


def pct(num: float, den: float) -> float:
    """num/den*100, or 0 when den is 0."""
    if not den:
        return 0.0
    return float(num) / float(den) * 100.0


@dataclass(frozen=True)
class GradedResponse:
    response: ResponseRecord
    classification: Classification

    @property
    def question_id(self) -> str:
        return self.response.question_id

    @property
    def attempt_id(self) -> str:
        return self.response.attempt_id


@dataclass(frozen=True)
class AttemptSummary:
    attempt_id: str
    correct_count: int
    total_questions: int
    time_spent_seconds: float
    # False when counts came from the advisory attempt fields
    derived: bool = True

    @property
    def accuracy(self) -> float:
        return pct(self.correct_count, self.total_questions)

    @property
    def avg_time_per_question(self) -> float:
        if not self.total_questions:
            return 0.0
        return float(self.time_spent_seconds) / self.total_questions


@dataclass(frozen=True)
class Session:
    user_id: str
    exam_id: str
    section_ids: FrozenSet[str]
    start_time: datetime
    last_time: datetime
    correct_count: int
    total_questions: int
    is_submitted: bool
    attempt_ids: Tuple[str, ...] = ()
    closed_by: Optional[Boundary] = None

    @property
    def accuracy(self) -> float:
        return pct(self.correct_count, self.total_questions)


@dataclass
class QuestionStat:
    question_id: str
    total_attempts: int = 0
    correct_count: int = 0
    wrong_count: int = 0
    unanswered_count: int = 0
    reviewed_count: int = 0
    time_sum: float = 0.0
    wrong_answers: Dict[str, int] = field(default_factory=dict)

    @property
    def accuracy(self) -> float:
        return pct(self.correct_count, self.total_attempts)

    @property
    def avg_time(self) -> float:
        if not self.total_attempts:
            return 0.0
        return self.time_sum / self.total_attempts

    @property
    def review_rate(self) -> float:
        return pct(self.reviewed_count, self.total_attempts)

    @property
    def most_common_wrong(self) -> Optional[str]:
        """Highest count wrong answer; ties go to the lexicographically smallest."""
        if not self.wrong_answers:
            return None
        return min(self.wrong_answers.items(), key=lambda kv: (-kv[1], kv[0]))[0]


@dataclass(frozen=True)
class SectionStat:
    section_id: str
    attempt_count: int
    # mean of per-attempt accuracy, not pooled correct/total
    avg_accuracy: float
    total_time_seconds: float
    avg_time_seconds: float
    section_name: Optional[str] = None


@dataclass(frozen=True)
class TrendPoint:
    date: date
    attempt_count: int
    mean_accuracy: float
    mean_avg_time_per_question: float = 0.0


@dataclass(frozen=True)
class Overview:
    total_sessions: int = 0
    submitted_sessions: int = 0
    completion_rate: float = 0.0
    total_attempts: int = 0
    avg_accuracy: float = 0.0
    avg_time_per_question: float = 0.0
    best_score: float = 0.0


@dataclass(frozen=True)
class Report:
    sessions: List[Session] = field(default_factory=list)
    question_stats: List[QuestionStat] = field(default_factory=list)
    section_stats: List[SectionStat] = field(default_factory=list)
    distribution: Tuple[int, int, int, int, int] = (0, 0, 0, 0, 0)
    trend: List[TrendPoint] = field(default_factory=list)
    overview: Overview = field(default_factory=Overview)
    attempt_summaries: Dict[str, AttemptSummary] = field(default_factory=dict)
