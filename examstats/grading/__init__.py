from .answers import Answer, MultiChoice, Scalar, Wrapped, decode_correct, decode_selected, format_answer
from .comparator import answers_equal, equals
from .grader import grade, grade_all

__all__ = [
    "Answer",
    "MultiChoice",
    "Scalar",
    "Wrapped",
    "decode_correct",
    "decode_selected",
    "format_answer",
    "answers_equal",
    "equals",
    "grade",
    "grade_all",
]
