"""
Exercise Session - Progress records for one vocabulary practice run.

Holds the per-question results, the running score and streak, and the
per-attempt input workspace. The state machine driving a run lives in
src/exercises/session.py.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional


def serialize_answer(answer: Any) -> str:
    """
    Render a raw answer as the string stored on an ExerciseResult.

    Booleans become "true"/"false"; match maps and crossword entries become
    JSON with sorted keys.
    """
    if answer is None:
        return ""
    if isinstance(answer, bool):
        return "true" if answer else "false"
    if isinstance(answer, str):
        return answer
    if isinstance(answer, Mapping):
        return json.dumps(
            {str(key): value for key, value in answer.items()},
            sort_keys=True,
            ensure_ascii=False,
            default=str,
        )
    return str(answer)


class SessionPhase:
    """Phase names of the session state machine."""
    SELECTING = "selecting"
    IN_PROGRESS = "in_progress"
    FEEDBACK = "feedback"
    ADVANCING = "advancing"
    COMPLETE = "complete"


class ExerciseStartError(ValueError):
    """
    Raised when an exercise cannot start.

    Attributes:
        reason: "no_words" (empty word pool) or "no_questions" (nothing generated)
    """

    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason


@dataclass
class ExerciseResult:
    """
    Outcome of one submitted answer.

    Attributes:
        question_id: Question identifier
        question_text: Rendered question text
        user_answer: Learner's answer, serialized to a string
        correct_answer: Canonical answer shown as feedback
        is_correct: Whether the answer was judged correct
        time_spent_ms: Time from presenting the question to submission
    """
    question_id: str
    question_text: str
    user_answer: str
    correct_answer: str
    is_correct: bool
    time_spent_ms: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "question_id": self.question_id,
            "question_text": self.question_text,
            "user_answer": self.user_answer,
            "correct_answer": self.correct_answer,
            "is_correct": self.is_correct,
            "time_spent_ms": self.time_spent_ms,
        }

    def to_payload(self) -> Dict[str, Any]:
        """Convert to the reporter's response record."""
        return {
            "questionId": self.question_id,
            "question": self.question_text,
            "userAnswer": self.user_answer,
            "correctAnswer": self.correct_answer,
            "isCorrect": self.is_correct,
            "timeSpent": self.time_spent_ms,
        }


@dataclass
class ExerciseSession:
    """Progress of one practice run."""
    total_questions: int
    started_at_ms: int
    exercise_type: str = ""
    set_id: Optional[str] = None
    points_per_correct: int = 10
    current_question_index: int = 0
    score: int = 0
    streak: int = 0
    max_streak: int = 0
    completed_at_ms: Optional[int] = None
    results: List[ExerciseResult] = field(default_factory=list)

    @property
    def correct_count(self) -> int:
        return sum(1 for result in self.results if result.is_correct)

    @property
    def max_score(self) -> int:
        return self.total_questions * self.points_per_correct

    @property
    def elapsed_ms(self) -> Optional[int]:
        if self.completed_at_ms is None:
            return None
        return int(max(0, self.completed_at_ms - self.started_at_ms))

    def record(self, result: ExerciseResult):
        """Append a result and update score and streak."""
        self.results.append(result)
        if result.is_correct:
            self.score += self.points_per_correct
            self.streak += 1
        else:
            self.streak = 0
        self.max_streak = max(self.max_streak, self.streak)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "exercise_type": self.exercise_type,
            "set_id": self.set_id,
            "current_question_index": self.current_question_index,
            "total_questions": self.total_questions,
            "score": self.score,
            "max_score": self.max_score,
            "streak": self.streak,
            "max_streak": self.max_streak,
            "started_at_ms": self.started_at_ms,
            "completed_at_ms": self.completed_at_ms,
            "results": [result.to_dict() for result in self.results],
        }


class AttemptWorkspace:
    """
    In-progress learner input, keyed by question id.

    Questions stay immutable; match maps and crossword entries live here
    until the answer is submitted.
    """

    def __init__(self):
        self._entries: Dict[str, Dict[Any, Any]] = {}

    def set_entry(self, question_id: str, key: Any, value: Any):
        self._entries.setdefault(question_id, {})[key] = value

    def clear_entry(self, question_id: str, key: Any):
        self._entries.get(question_id, {}).pop(key, None)

    def entries(self, question_id: str) -> Dict[Any, Any]:
        return dict(self._entries.get(question_id, {}))

    def reset(self):
        self._entries.clear()
