from .config import AnalyticsConfig
from .prepare import prepare_attempts
from .metrics import accuracy_trend, overview, score_distribution, section_stats
from .report import assemble_report
from .export import attempts_csv, export_csv, export_ndjson, report_frames

__all__ = [
    "AnalyticsConfig",
    "prepare_attempts",
    "accuracy_trend",
    "overview",
    "score_distribution",
    "section_stats",
    "assemble_report",
    "attempts_csv",
    "export_csv",
    "export_ndjson",
    "report_frames",
]
