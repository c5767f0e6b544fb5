import tempfile
import unittest
from pathlib import Path

from storage.schema import AttemptRecord, QuestionRecord, ResponseRecord, Scope, parse_records
from storage.store import MemoryStore, ParquetStore, open_store, write_snapshot

from tests.fixtures import T0, attempt, question, response


class SchemaTests(unittest.TestCase):
    def test_parse_records_skips_invalid_rows(self) -> None:
        rows = [
            {"id": 1, "user_id": 7, "section_id": "S1", "exam_id": "E", "created_at": "2024-03-01T09:00:00"},
            {"id": "2", "user_id": "u"},
        ]
        (a,) = parse_records(AttemptRecord, rows)
        self.assertEqual((a.id, a.user_id), ("1", "7"))
        # naive timestamps are read as UTC
        self.assertEqual(a.created_at, T0)
        self.assertFalse(a.is_submitted)

    def test_parse_records_rejects_non_iterables(self) -> None:
        with self.assertRaises(TypeError):
            parse_records(AttemptRecord, None)
        with self.assertRaises(TypeError):
            parse_records(AttemptRecord, "rows")

    def test_answer_type_aliases(self) -> None:
        self.assertEqual(QuestionRecord(id="q", answer_type="multiple_choice").answer_type, "multi")
        self.assertEqual(QuestionRecord(id="q", answer_type="True_False").answer_type, "single")
        (essay,) = parse_records(QuestionRecord, [{"id": "q", "answer_type": "essay", "correct_answer": "x"}])
        self.assertEqual((essay.answer_type, essay.correct_answer), ("single", "x"))

    def test_non_list_options_are_dropped(self) -> None:
        self.assertIsNone(QuestionRecord(id="q", options=5).options)
        self.assertIsNone(QuestionRecord(id="q", options="A").options)
        self.assertEqual(QuestionRecord(id="q", options=("A", 2)).options, ["A", "2"])

    def test_response_accepts_is_correct_column(self) -> None:
        r = ResponseRecord.model_validate(
            {"id": "r", "question_id": "q", "attempt_id": "a", "is_correct": True, "time_spent_seconds": None}
        )
        self.assertTrue(r.stored_is_correct)
        self.assertEqual(r.time_spent_seconds, 0)


class ParquetStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.data_dir = Path(self._tmp.name) / "snap"
        write_snapshot(
            self.data_dir,
            [
                question("Q1", ["A", "C"], "multi", section_id="S1"),
                question("Q2", {"answer": "x"}, "text", section_id="S2"),
                question("Q3", None),
            ],
            [attempt("a1", section="S1", exam_name="Mock 1"), attempt("a2", user="u2", section="S2", submitted=False)],
            [
                response("r1", "Q1", "a1", ["C", "A"], seconds=12.5, stored=True),
                response("r2", "Q2", "a2", None, review=True),
            ],
        )

    def test_snapshot_preserves_records(self) -> None:
        store = ParquetStore(self.data_dir)
        attempts = {a.id: a for a in store.fetch_attempts(Scope())}
        self.assertEqual(set(attempts), {"a1", "a2"})
        self.assertEqual(attempts["a1"].created_at, T0)
        self.assertEqual(attempts["a1"].exam_name, "Mock 1")
        self.assertIsNone(attempts["a2"].submitted_at)

        questions = {q.id: q for q in store.fetch_questions(Scope())}
        self.assertEqual(questions["Q1"].correct_answer, ["A", "C"])
        self.assertEqual(questions["Q2"].correct_answer, {"answer": "x"})
        self.assertIsNone(questions["Q3"].correct_answer)

        responses = {r.id: r for r in store.fetch_responses(["a1", "a2"])}
        self.assertEqual(responses["r1"].selected_answer, ["C", "A"])
        self.assertEqual(responses["r1"].time_spent_seconds, 12.5)
        self.assertTrue(responses["r1"].stored_is_correct)
        self.assertIsNone(responses["r2"].selected_answer)
        self.assertIsNone(responses["r2"].stored_is_correct)
        self.assertTrue(responses["r2"].is_marked_for_review)

    def test_scope_filters(self) -> None:
        store = open_store(self.data_dir)
        scope = Scope(user_id="u2")
        self.assertEqual([a.id for a in store.fetch_attempts(scope)], ["a2"])
        self.assertEqual(sorted(q.id for q in store.fetch_questions(scope)), ["Q2", "Q3"])
        self.assertEqual([r.id for r in store.fetch_responses(["a1"])], ["r1"])

    def test_missing_directory(self) -> None:
        with self.assertRaises(FileNotFoundError):
            ParquetStore(Path(self._tmp.name) / "missing")

    def test_empty_snapshot(self) -> None:
        empty = Path(self._tmp.name) / "empty"
        write_snapshot(empty, [], [], [])
        store = ParquetStore(empty)
        self.assertEqual(store.fetch_attempts(Scope()), [])
        self.assertEqual(store.fetch_questions(Scope()), [])
        self.assertEqual(store.fetch_responses([]), [])


class MemoryStoreTests(unittest.TestCase):
    def test_accepts_mappings(self) -> None:
        store = MemoryStore(
            questions=[{"id": "Q1", "correct_answer": "A"}],
            attempts=[{"id": "a1", "user_id": "u", "section_id": "S", "exam_id": "E", "created_at": T0}],
            responses=[{"id": "r1", "question_id": "Q1", "attempt_id": "a1", "selected_answer": "A"}],
        )
        self.assertEqual(len(store.fetch_attempts(Scope(exam_id="E"))), 1)
        self.assertEqual(len(store.fetch_questions(Scope())), 1)
        self.assertEqual(len(store.fetch_responses(["a1"])), 1)


if __name__ == "__main__":
    unittest.main()
