import unittest

from examstats.grading.grader import dedupe_responses, grade, grade_all
from examstats.results.schema import Classification

from tests.fixtures import question, response


class GradeTests(unittest.TestCase):
    def test_unanswered_when_nothing_selected(self) -> None:
        q = question("q1", correct="A")
        self.assertEqual(grade(response("r1", "q1", "a1", None, stored=True), q), Classification.UNANSWERED)

    def test_correct_and_wrong(self) -> None:
        q = question("q1", correct=["A", "C"], answer_type="multi")
        self.assertEqual(grade(response("r1", "q1", "a1", ["c", "a"]), q), Classification.CORRECT)
        self.assertEqual(grade(response("r2", "q1", "a1", ["A"]), q), Classification.WRONG)

    def test_canonical_answer_always_beats_stored_flag(self) -> None:
        q = question("q1", correct="A")
        cases = [("A", False, Classification.CORRECT), ("B", True, Classification.WRONG), ("a", None, Classification.CORRECT)]
        for selected, stored, expected in cases:
            with self.subTest(selected=selected, stored=stored):
                self.assertEqual(grade(response("r", "q1", "a1", selected, stored=stored), q), expected)

    def test_falls_back_to_stored_flag_without_canonical_answer(self) -> None:
        q = question("q1", correct=None)
        self.assertEqual(grade(response("r1", "q1", "a1", "X", stored=True), q), Classification.CORRECT)
        self.assertEqual(grade(response("r2", "q1", "a1", "X", stored=False), q), Classification.WRONG)
        self.assertEqual(grade(response("r3", "q1", "a1", "X", stored=None), q), Classification.WRONG)
        self.assertEqual(grade(response("r4", "zz", "a1", "X", stored=True), None), Classification.CORRECT)

    def test_idempotent_and_does_not_mutate(self) -> None:
        q = question("q1", correct={"answer": "B"})
        r = response("r1", "q1", "a1", ["b"])
        before = (r.model_dump(), q.model_dump())
        first = grade(r, q)
        second = grade(r, q)
        self.assertEqual(first, second)
        self.assertEqual(before, (r.model_dump(), q.model_dump()))


class GradeAllTests(unittest.TestCase):
    def test_grades_against_matching_question(self) -> None:
        qs = [question("q1", "A"), question("q2", "B")]
        rs = [response("r1", "q1", "a1", "A"), response("r2", "q2", "a1", "A"), response("r3", "q3", "a1", "A", stored=True)]
        graded = grade_all(rs, qs)
        self.assertEqual(
            [g.classification for g in graded],
            [Classification.CORRECT, Classification.WRONG, Classification.CORRECT],
        )
        self.assertEqual(graded[0].question_id, "q1")
        self.assertEqual(graded[0].attempt_id, "a1")

    def test_dedupe_keeps_latest_per_attempt_and_question(self) -> None:
        rs = [
            response("r1", "q1", "a1", "A"),
            response("r2", "q2", "a1", "B"),
            response("r3", "q1", "a1", "C"),
            response("r4", "q1", "a2", "D"),
        ]
        kept = dedupe_responses(rs)
        self.assertEqual([r.id for r in kept], ["r2", "r3", "r4"])


if __name__ == "__main__":
    unittest.main()
