"""
Exercise generation, grading and practice sessions.

- question_generator: Seven per-type question strategies
- crossword_planner: Best-effort crossword grid placement
- answer_validator: Per-type correctness checks
- session: Practice run state machine with scoring, streaks and timed advance
"""

from .crossword_planner import CrosswordLayoutPlanner, find_intersection, normalize_answer
from .question_generator import QuestionGenerator, generate_questions
from .answer_validator import ValidationOutcome, is_correct, validate_answer
from .session import ExerciseSessionMachine

__all__ = [
    "CrosswordLayoutPlanner",
    "find_intersection",
    "normalize_answer",
    "QuestionGenerator",
    "generate_questions",
    "ValidationOutcome",
    "is_correct",
    "validate_answer",
    "ExerciseSessionMachine",
]
