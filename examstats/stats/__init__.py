from .attempt_stats import summarize_attempts
from .question_stats import aggregate, update_stat

__all__ = ["summarize_attempts", "aggregate", "update_stat"]
