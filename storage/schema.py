from __future__ import annotations

"""Schema constants and Pydantic models for the raw exam records.

These are the rows the engine reads from the external store. Everything
downstream works on validated instances of these models.
"""

from datetime import datetime, timezone
from typing import Any, Iterable, List, Literal, Optional, Type, TypeVar

import pandas as pd
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from examstats.explain import trace

# --- Constants ---

AnswerType = Literal["single", "multi", "numeric", "text"]
ANSWER_TYPES = {"single", "multi", "numeric", "text"}
ANSWER_TYPE_ALIASES = {
    "multiple": "multi",
    "multiple_choice": "multi",
    "multi_select": "multi",
    "true_false": "single",
    "mcq": "single",
    "integer": "numeric",
    "number": "numeric",
}

QUESTION_DTYPES = {
    "id": "string",
    "section_id": "string",
    "answer_type": "string",
    # polymorphic answers travel as JSON text
    "correct_answer_json": "string",
    "options_json": "string",
}

RESPONSE_DTYPES = {
    "id": "string",
    "question_id": "string",
    "attempt_id": "string",
    "selected_answer_json": "string",
    "time_spent_seconds": "float64",
    "is_marked_for_review": "boolean",
    "stored_is_correct": "boolean",
}

ATTEMPT_DTYPES = {
    "id": "string",
    "user_id": "string",
    "section_id": "string",
    "exam_id": "string",
    # timezone-aware UTC timestamps
    "created_at": pd.DatetimeTZDtype(tz="UTC"),
    "submitted_at": pd.DatetimeTZDtype(tz="UTC"),
    "score": "Int32",
    "total_questions": "Int32",
    "time_spent_seconds": "Float64",
    "section_name": "string",
    "exam_name": "string",
}


def _as_utc(v: datetime) -> datetime:
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v.astimezone(timezone.utc)


def _id_str(v: Any) -> Any:
    # Store ids may arrive as ints (sqlite/parquet) or uuids
    if v is None or isinstance(v, str):
        return v
    return str(v)


# --- Pydantic models ---

class QuestionRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    answer_type: AnswerType = "single"
    correct_answer: Any = None
    options: Optional[List[str]] = None
    section_id: Optional[str] = None

    @field_validator("id", "section_id", mode="before")
    @classmethod
    def _coerce_ids(cls, v: Any) -> Any:
        return _id_str(v)

    @field_validator("answer_type", mode="before")
    @classmethod
    def _answer_type(cls, v: Any) -> Any:
        if v is None:
            return "single"
        t = str(v).strip().lower()
        t = ANSWER_TYPE_ALIASES.get(t, t)
        if t not in ANSWER_TYPES:
            # grading never reads the type, keep the row
            trace("answer_type_unknown", {"answer_type": v})
            return "single"
        return t

    @field_validator("options", mode="before")
    @classmethod
    def _options(cls, v: Any) -> Any:
        if v is None:
            return None
        if not isinstance(v, (list, tuple)):
            trace("options_ignored", {"options": v})
            return None
        return [str(o) for o in v]


class ResponseRecord(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    question_id: str
    attempt_id: str
    selected_answer: Any = None
    time_spent_seconds: float = Field(default=0, ge=0)
    is_marked_for_review: bool = False
    # Precomputed upstream and possibly stale
    stored_is_correct: Optional[bool] = Field(
        default=None,
        validation_alias=AliasChoices("stored_is_correct", "is_correct"),
    )

    @field_validator("id", "question_id", "attempt_id", mode="before")
    @classmethod
    def _coerce_ids(cls, v: Any) -> Any:
        return _id_str(v)

    @field_validator("time_spent_seconds", mode="before")
    @classmethod
    def _time_default(cls, v: Any) -> Any:
        return 0 if v is None else v

    @field_validator("is_marked_for_review", mode="before")
    @classmethod
    def _review_default(cls, v: Any) -> Any:
        return False if v is None else v


class AttemptRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    section_id: str
    exam_id: str
    created_at: datetime
    submitted_at: Optional[datetime] = None
    # Advisory only; the engine recomputes these from responses
    score: Optional[int] = Field(default=None, ge=0)
    total_questions: Optional[int] = Field(default=None, ge=0)
    time_spent_seconds: Optional[float] = Field(default=None, ge=0)
    section_name: Optional[str] = None
    exam_name: Optional[str] = None

    @field_validator("id", "user_id", "section_id", "exam_id", mode="before")
    @classmethod
    def _coerce_ids(cls, v: Any) -> Any:
        return _id_str(v)

    @field_validator("created_at")
    @classmethod
    def _created_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)

    @field_validator("submitted_at")
    @classmethod
    def _submitted_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(v) if v is not None else None

    @property
    def is_submitted(self) -> bool:
        return self.submitted_at is not None


class Scope(BaseModel):
    """Filter for a snapshot fetch. Unset fields do not filter."""

    exam_id: Optional[str] = None
    user_id: Optional[str] = None
    section_ids: Optional[List[str]] = None

    @field_validator("exam_id", "user_id", mode="before")
    @classmethod
    def _coerce_ids(cls, v: Any) -> Any:
        return _id_str(v)

    def matches(self, attempt: AttemptRecord) -> bool:
        if self.exam_id is not None and attempt.exam_id != self.exam_id:
            return False
        if self.user_id is not None and attempt.user_id != self.user_id:
            return False
        if self.section_ids is not None and attempt.section_id not in self.section_ids:
            return False
        return True


M = TypeVar("M", bound=BaseModel)


def parse_records(model: Type[M], rows: Iterable[Any]) -> List[M]:
    """Validate rows into `model` instances, skipping the ones that fail.

    - Instances of `model` pass through unchanged.
    - A row that fails validation is traced as `record_skipped` and dropped.
    """
    if rows is None or isinstance(rows, (str, bytes)) or not hasattr(rows, "__iter__"):
        raise TypeError(f"rows must be an iterable of {model.__name__} or mappings")
    out: List[M] = []
    for i, row in enumerate(rows):
        if isinstance(row, model):
            out.append(row)
            continue
        try:
            out.append(model.model_validate(row))
        except ValidationError as e:
            rid = row.get("id") if isinstance(row, dict) else None
            trace(
                "record_skipped",
                {"model": model.__name__, "index": i, "id": rid, "errors": e.error_count()},
            )
    return out
