"""
Progress analytics helpers for session summaries.

Provides:
- Accuracy and pass/fail for a finished session
- Time-per-question statistics (mean, median, std, min, max)
- Longest streak and slowest question
"""

from __future__ import annotations

from typing import Any, Dict, Sequence

import numpy as np


def longest_streak(outcomes: Sequence[bool]) -> int:
    """
    Length of the longest run of consecutive correct answers.

    Example:
        >>> longest_streak([True, True, False, True])
        2
    """
    best = current = 0
    for correct in outcomes:
        current = current + 1 if correct else 0
        best = max(best, current)
    return best


def score_percentage(score: int, max_score: int) -> float:
    """Score as a percentage of the maximum (0 when nothing could be scored)."""
    if max_score <= 0:
        return 0.0
    return round(100.0 * score / max_score, 2)


def session_statistics(results: Sequence[Any]) -> Dict[str, Any]:
    """
    Summary statistics for a list of exercise results.

    Args:
        results: Objects with ``question_id``, ``is_correct`` and ``time_spent_ms``

    Returns:
        Dict with answered/correct counts, accuracy (percent), time statistics
        in seconds, longest streak and the slowest question id
    """
    if not results:
        return {
            "answered": 0,
            "correct": 0,
            "accuracy": 0.0,
            "time_seconds": {"mean": 0.0, "median": 0.0, "std": 0.0, "min": 0.0, "max": 0.0},
            "longest_streak": 0,
            "slowest_question_id": None,
        }

    outcomes = np.array([bool(r.is_correct) for r in results])
    seconds = np.array([r.time_spent_ms for r in results], dtype=float) / 1000.0

    return {
        "answered": len(results),
        "correct": int(outcomes.sum()),
        "accuracy": round(float(outcomes.mean()) * 100, 2),
        "time_seconds": {
            "mean": round(float(np.mean(seconds)), 2),
            "median": round(float(np.median(seconds)), 2),
            "std": round(float(np.std(seconds)), 2),
            "min": round(float(np.min(seconds)), 2),
            "max": round(float(np.max(seconds)), 2),
        },
        "longest_streak": longest_streak(outcomes.tolist()),
        "slowest_question_id": results[int(np.argmax(seconds))].question_id,
    }
