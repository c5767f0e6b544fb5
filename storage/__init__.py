from .schema import (
    ANSWER_TYPES,
    ATTEMPT_DTYPES,
    QUESTION_DTYPES,
    RESPONSE_DTYPES,
    AttemptRecord,
    QuestionRecord,
    ResponseRecord,
    Scope,
    parse_records,
)
from .store import (
    MemoryStore,
    ParquetStore,
    RecordStore,
    open_store,
    write_snapshot,
)

__all__ = [
    "ANSWER_TYPES",
    "ATTEMPT_DTYPES",
    "QUESTION_DTYPES",
    "RESPONSE_DTYPES",
    "AttemptRecord",
    "QuestionRecord",
    "ResponseRecord",
    "Scope",
    "parse_records",
    "MemoryStore",
    "ParquetStore",
    "RecordStore",
    "open_store",
    "write_snapshot",
]
