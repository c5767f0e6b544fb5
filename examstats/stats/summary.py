from __future__ import annotations

"""Human-readable report summary."""

from ..results.schema import Report

BUCKET_LABELS = ["0-20", "20-40", "40-60", "60-80", "80-100"]


def format_summary(report: Report, decimals: int = 1) -> str:
    """Return a human-readable summary of a report."""
    o = report.overview
    lines = [
        f"Sessions: {o.total_sessions} ({o.submitted_sessions} submitted, {o.completion_rate:.{decimals}f}% completion)",
        f"Attempts: {o.total_attempts}",
        f"Average accuracy: {o.avg_accuracy:.{decimals}f}%  Best: {o.best_score:.{decimals}f}%",
        f"Average time/question: {o.avg_time_per_question:.{decimals}f}s",
    ]
    if report.section_stats:
        lines.append("Sections:")
        for s in report.section_stats:
            label = s.section_name or s.section_id
            lines.append(f"  {label}: {s.avg_accuracy:.{decimals}f}% over {s.attempt_count} attempt(s)")
    dist = ", ".join(f"{b}: {n}" for b, n in zip(BUCKET_LABELS, report.distribution))
    lines.append(f"Score distribution: {dist}")
    hardest = sorted(
        (q for q in report.question_stats if q.total_attempts),
        key=lambda q: (q.accuracy, q.question_id),
    )[:5]
    if hardest:
        lines.append("Hardest questions:")
        for q in hardest:
            wrong = f", most common wrong: {q.most_common_wrong}" if q.most_common_wrong else ""
            lines.append(f"  {q.question_id}: {q.correct_count}/{q.total_attempts} correct{wrong}")
    return "\n".join(lines)
