from __future__ import annotations

"""Record stores that feed the engine a finite snapshot.

Two implementations of the same three fetches:
- MemoryStore: records already held by the caller.
- ParquetStore: a directory of Parquet tables (pandas + pyarrow), one per
  record kind. Polymorphic answers are kept as JSON text columns.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence

import pandas as pd

from .schema import (
    ATTEMPT_DTYPES,
    QUESTION_DTYPES,
    RESPONSE_DTYPES,
    AttemptRecord,
    QuestionRecord,
    ResponseRecord,
    Scope,
    parse_records,
)


QUESTIONS_FILE = "questions.parquet"
ATTEMPTS_FILE = "attempts.parquet"
RESPONSES_FILE = "responses.parquet"


class RecordStore(Protocol):
    def fetch_questions(self, scope: Scope) -> List[QuestionRecord]: ...

    def fetch_attempts(self, scope: Scope) -> List[AttemptRecord]: ...

    def fetch_responses(self, attempt_ids: Sequence[str]) -> List[ResponseRecord]: ...


def _scope_sections(scope: Scope, attempts: Iterable[AttemptRecord]) -> set[str]:
    if scope.section_ids is not None:
        return set(scope.section_ids)
    return {a.section_id for a in attempts}


def _filter_questions(questions: List[QuestionRecord], sections: set[str]) -> List[QuestionRecord]:
    # Questions without a section are never filtered out
    return [q for q in questions if q.section_id is None or q.section_id in sections]


class MemoryStore:
    """Store over in-memory rows (models or plain mappings)."""

    def __init__(
        self,
        questions: Iterable[Any] = (),
        attempts: Iterable[Any] = (),
        responses: Iterable[Any] = (),
    ) -> None:
        self._questions = parse_records(QuestionRecord, list(questions))
        self._attempts = parse_records(AttemptRecord, list(attempts))
        self._responses = parse_records(ResponseRecord, list(responses))

    def fetch_attempts(self, scope: Scope) -> List[AttemptRecord]:
        return [a for a in self._attempts if scope.matches(a)]

    def fetch_questions(self, scope: Scope) -> List[QuestionRecord]:
        sections = _scope_sections(scope, self.fetch_attempts(scope))
        return _filter_questions(self._questions, sections)

    def fetch_responses(self, attempt_ids: Sequence[str]) -> List[ResponseRecord]:
        wanted = set(attempt_ids)
        return [r for r in self._responses if r.attempt_id in wanted]


# --- Parquet snapshot ---

def _json_or_na(v: Any) -> Any:
    if v is None:
        return pd.NA
    return json.dumps(v, separators=(",", ":"), ensure_ascii=False)


def _from_json(v: Any) -> Any:
    if v is None or v is pd.NA:
        return None
    return json.loads(v)


def _clean(v: Any) -> Any:
    """Turn pandas scalars back into plain Python values."""
    if v is pd.NA or v is pd.NaT or v is None:
        return None
    if isinstance(v, pd.Timestamp):
        return v.to_pydatetime()
    if isinstance(v, float) and v != v:
        return None
    if hasattr(v, "item"):
        return v.item()
    return v


def _cast(df: pd.DataFrame, dtypes: Dict[str, Any]) -> pd.DataFrame:
    for col, dt in dtypes.items():
        if col not in df.columns:
            df[col] = pd.Series(index=df.index, dtype=dt)
        elif isinstance(dt, pd.DatetimeTZDtype):
            df[col] = pd.to_datetime(df[col], utc=True)
        else:
            df[col] = df[col].astype(dt)
    return df[list(dtypes.keys())]


def _empty(dtypes: Dict[str, Any]) -> pd.DataFrame:
    return pd.DataFrame({k: pd.Series(dtype=v) for k, v in dtypes.items()})


def questions_frame(questions: Iterable[QuestionRecord]) -> pd.DataFrame:
    rows = [
        {
            "id": q.id,
            "section_id": q.section_id,
            "answer_type": q.answer_type,
            "correct_answer_json": _json_or_na(q.correct_answer),
            "options_json": _json_or_na(q.options),
        }
        for q in questions
    ]
    return _cast(pd.DataFrame(rows), QUESTION_DTYPES) if rows else _empty(QUESTION_DTYPES)


def responses_frame(responses: Iterable[ResponseRecord]) -> pd.DataFrame:
    rows = []
    for r in responses:
        d = r.model_dump(exclude={"selected_answer"})
        d["selected_answer_json"] = _json_or_na(r.selected_answer)
        rows.append(d)
    return _cast(pd.DataFrame(rows), RESPONSE_DTYPES) if rows else _empty(RESPONSE_DTYPES)


def attempts_frame(attempts: Iterable[AttemptRecord]) -> pd.DataFrame:
    rows = [a.model_dump() for a in attempts]
    return _cast(pd.DataFrame(rows), ATTEMPT_DTYPES) if rows else _empty(ATTEMPT_DTYPES)


def write_snapshot(
    data_dir: Path,
    questions: Iterable[Any],
    attempts: Iterable[Any],
    responses: Iterable[Any],
) -> None:
    """Validate and write the three record tables as zstd Parquet files."""
    data_dir = Path(data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    frames = {
        QUESTIONS_FILE: questions_frame(parse_records(QuestionRecord, list(questions))),
        ATTEMPTS_FILE: attempts_frame(parse_records(AttemptRecord, list(attempts))),
        RESPONSES_FILE: responses_frame(parse_records(ResponseRecord, list(responses))),
    }
    for name, df in frames.items():
        df.to_parquet(data_dir / name, engine="pyarrow", compression="zstd", index=False)


class ParquetStore:
    """Read-only store over a snapshot directory written by `write_snapshot`."""

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)
        if not self.data_dir.is_dir():
            raise FileNotFoundError(f"Snapshot directory not found: {self.data_dir}")
        self._cache: Dict[str, pd.DataFrame] = {}

    def _table(self, name: str, dtypes: Dict[str, Any]) -> pd.DataFrame:
        if name not in self._cache:
            f = self.data_dir / name
            if f.exists():
                df = _cast(pd.read_parquet(f, engine="pyarrow"), dtypes)
            else:
                df = _empty(dtypes)
            self._cache[name] = df
        return self._cache[name]

    @staticmethod
    def _rows(df: pd.DataFrame) -> List[Dict[str, Any]]:
        return [{k: _clean(v) for k, v in row.items()} for row in df.to_dict("records")]

    def fetch_attempts(self, scope: Scope) -> List[AttemptRecord]:
        df = self._table(ATTEMPTS_FILE, ATTEMPT_DTYPES)
        attempts = parse_records(AttemptRecord, self._rows(df))
        return [a for a in attempts if scope.matches(a)]

    def fetch_questions(self, scope: Scope) -> List[QuestionRecord]:
        df = self._table(QUESTIONS_FILE, QUESTION_DTYPES)
        rows = []
        for row in self._rows(df):
            rows.append(
                {
                    "id": row["id"],
                    "section_id": row["section_id"],
                    "answer_type": row["answer_type"],
                    "correct_answer": _from_json(row["correct_answer_json"]),
                    "options": _from_json(row["options_json"]),
                }
            )
        questions = parse_records(QuestionRecord, rows)
        return _filter_questions(questions, _scope_sections(scope, self.fetch_attempts(scope)))

    def fetch_responses(self, attempt_ids: Sequence[str]) -> List[ResponseRecord]:
        df = self._table(RESPONSES_FILE, RESPONSE_DTYPES)
        df = df[df["attempt_id"].isin(list(attempt_ids))]
        rows = []
        for row in self._rows(df):
            row["selected_answer"] = _from_json(row.pop("selected_answer_json"))
            rows.append(row)
        return parse_records(ResponseRecord, rows)


def open_store(data_dir: Optional[Path] = None, **records: Iterable[Any]) -> RecordStore:
    """Parquet store when given a directory, otherwise an in-memory one."""
    if data_dir is not None:
        return ParquetStore(data_dir)
    return MemoryStore(**records)
