"""
Result reporting for finished practice sessions.

The reporter itself is external (a network client that stores attempts).
This module defines its interface and builds the payload it receives.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional, Protocol

try:
    from ..config import config
except ImportError:
    from src.config import config

if TYPE_CHECKING:
    from ..models.exercise_session import ExerciseSession


class ResultReporter(Protocol):
    """
    Receives the attempt payload of a finished session.

    ``report`` may return normally, raise, or return an awaitable; failures
    never affect the finished session.
    """

    def report(self, payload: Dict[str, Any]) -> Any:
        ...


def is_demo_exercise(exercise_id: Optional[str], demo_ids: Optional[Iterable[str]] = None) -> bool:
    """Sessions without an exercise id, or with a demo id, are never reported."""
    if not exercise_id:
        return True
    if demo_ids is None:
        demo_ids = config.session.demo_exercise_ids
    return exercise_id in set(demo_ids)


def build_attempt_payload(
    session: ExerciseSession,
    exercise_id: str,
    student_id: str,
    time_spent_ms: int,
) -> Dict[str, Any]:
    """
    Build the attempt payload for the reporter.

    Args:
        session: Finished exercise session
        exercise_id: Exercise identifier
        student_id: Learner identifier
        time_spent_ms: Wall time from session start to completion

    Returns:
        Dict matching schemas/exercise_attempt.schema.json
    """
    return {
        "exerciseId": exercise_id,
        "studentId": student_id,
        "score": session.score,
        "maxScore": session.max_score,
        "timeSpentSeconds": max(0, int(time_spent_ms // 1000)),
        "answers": {
            "responses": [result.to_payload() for result in session.results],
            "totalQuestions": session.total_questions,
            "correctCount": session.correct_count,
        },
    }


def demo_message(score: int, max_score: int) -> str:
    return f"Du fick {score} av {max_score} poäng!"
