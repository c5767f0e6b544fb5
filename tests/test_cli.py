import io
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

import pandas as pd

from examstats.main import cli
from storage.store import write_snapshot

from tests.fixtures import at, attempt, question, response


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name)
        write_snapshot(
            self.root / "snap",
            [question("Q1", "A", section_id="S1"), question("Q2", "B", section_id="S2")],
            [
                attempt("a1", section="S1", created=at(0), section_name="Quant", exam_name="Mock"),
                attempt("a2", section="S2", created=at(1), section_name="Verbal", exam_name="Mock"),
            ],
            [response("r1", "Q1", "a1", "A"), response("r2", "Q2", "a2", "C")],
        )

    def _run(self, *argv: str) -> tuple:
        buf = io.StringIO()
        with redirect_stdout(buf):
            code = cli(list(argv))
        return code, buf.getvalue()

    def test_report_prints_summary_and_writes_csv(self) -> None:
        out = self.root / "reports"
        code, text = self._run("report", "--data-dir", str(self.root / "snap"), "--out", str(out))
        self.assertEqual(code, 0)
        self.assertIn("Sessions: 1 (1 submitted", text)
        self.assertIn("Quant: 100.0%", text)
        for name in ("sessions", "questions", "sections", "trend", "distribution", "attempts"):
            self.assertTrue((out / f"{name}.csv").exists(), name)
        questions = pd.read_csv(out / "questions.csv")
        self.assertEqual(questions["question_id"].tolist(), ["Q1", "Q2"])
        attempts = pd.read_csv(out / "attempts.csv")
        self.assertEqual(attempts["Section"].tolist(), ["Verbal", "Quant"])

    def test_missing_data_dir(self) -> None:
        err = io.StringIO()
        with redirect_stderr(err):
            code, text = self._run("report", "--data-dir", str(self.root / "nope"))
        self.assertEqual(code, 2)
        self.assertEqual(text, "")
        self.assertIn("Snapshot directory not found", err.getvalue())

    def test_repeated_attempt_id_gives_one_csv_row(self) -> None:
        write_snapshot(
            self.root / "dup",
            [question("Q1", "A", section_id="S1")],
            [
                attempt("a1", section="S1", created=at(0), exam_name="Mock"),
                attempt("a1", section="S1", created=at(0), exam_name="Mock retake"),
            ],
            [response("r1", "Q1", "a1", "A")],
        )
        out = self.root / "dup-reports"
        code, _ = self._run("report", "--data-dir", str(self.root / "dup"), "--out", str(out))
        self.assertEqual(code, 0)
        attempts = pd.read_csv(out / "attempts.csv")
        self.assertEqual(attempts["Exam"].tolist(), ["Mock retake"])

    def test_version(self) -> None:
        code, text = self._run("--version")
        self.assertEqual(code, 0)
        self.assertTrue(text.startswith("examstats "))


if __name__ == "__main__":
    unittest.main()
