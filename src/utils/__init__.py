"""
Utility modules for vocabulary exercises.

This module contains utility functions:
- validation: JSON Schema validation with auto-repair
- progress: Session statistics and streak helpers
- reporting: Attempt payloads for the result reporter
- logging_config: Console and rotating-file logging setup
"""

from .validation import (
    SchemaValidator,
    ValidationResult,
    validate_word_records,
    validate_exercise_options,
    validate_attempt_payload,
)
from .progress import (
    longest_streak,
    score_percentage,
    session_statistics,
)
from .reporting import (
    ResultReporter,
    build_attempt_payload,
    demo_message,
    is_demo_exercise,
)
from .logging_config import setup_logging

__all__ = [
    # Validation
    "SchemaValidator",
    "ValidationResult",
    "validate_word_records",
    "validate_exercise_options",
    "validate_attempt_payload",
    # Progress analytics
    "longest_streak",
    "score_percentage",
    "session_statistics",
    # Reporting
    "ResultReporter",
    "build_attempt_payload",
    "demo_message",
    "is_demo_exercise",
    # Logging
    "setup_logging",
]
