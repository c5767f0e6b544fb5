"""ExamStats package initialization.

Grading and analytics aggregation for sectioned, timed exams. The entry
point for callers is `examstats.engine.compute_report`.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
