import io
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from analytics.config import AnalyticsConfig
from examstats.config.config import analytics_config, load_config, validate_config


class ConfigTests(unittest.TestCase):
    def test_packaged_defaults(self) -> None:
        cfg = analytics_config()
        self.assertEqual(cfg, AnalyticsConfig())
        self.assertEqual(cfg.session_gap_hours, 6)

    def test_yaml_overrides(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            p = Path(tmp) / "cfg.yml"
            p.write_text("analytics:\n  session_gap_hours: 3\n  wrong_answer_separator: ' | '\n", encoding="utf-8")
            cfg = validate_config(load_config(str(p)))
        self.assertEqual(cfg["analytics"].session_gap_hours, 3)
        self.assertEqual(cfg["analytics"].wrong_answer_separator, " | ")
        self.assertTrue(cfg["export"]["attempts_csv"])

    def test_invalid_values_fall_back_with_warning(self) -> None:
        buf = io.StringIO()
        with redirect_stdout(buf):
            cfg = validate_config({"analytics": {"session_gap_hours": -1, "trend_timezone": "Mars/Olympus"}})
        self.assertEqual(cfg["analytics"].session_gap_hours, 6)
        self.assertEqual(cfg["analytics"].trend_timezone, "UTC")
        self.assertIn("WARNING: Unknown trend_timezone", buf.getvalue())
        self.assertIn("WARNING: Invalid analytics.session_gap_hours", buf.getvalue())

    def test_empty_sections(self) -> None:
        cfg = validate_config({"analytics": None, "export": None})
        self.assertEqual(cfg["analytics"], AnalyticsConfig())

    def test_missing_file_exits(self) -> None:
        with redirect_stderr(io.StringIO()), self.assertRaises(SystemExit) as ctx:
            load_config("/nonexistent/examstats.yml")
        self.assertEqual(ctx.exception.code, 1)


if __name__ == "__main__":
    unittest.main()
