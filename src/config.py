"""
Configuration management for the vocabulary exercise engine.

This module centralizes all configuration settings following 12-factor app principles:
- Settings loaded from environment variables
- Sensible defaults for development
- Type hints for IDE support
- Single source of truth for all settings
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    """Read a boolean flag from the environment."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_optional_int(name: str) -> Optional[int]:
    """Read an optional integer from the environment."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return int(value)


@dataclass
class ExerciseConfig:
    """Question generation limits and crossword layout settings."""

    # Per-word question types
    max_questions: int = 10

    # Aggregate question types (matching / image matching)
    max_matching_pairs: int = 6
    min_image_entries: int = 3

    # Crossword
    crossword_min_words: int = 3
    crossword_min_length: int = 3
    crossword_max_length: int = 10
    crossword_max_clues: int = 6
    crossword_fallback_clues: int = 3
    crossword_grid_size: int = 12

    # Word bank and synonym/antonym options
    choice_distractors: int = 3

    # Reproducibility
    random_seed: Optional[int] = field(
        default_factory=lambda: _env_optional_int("EXERCISE_RANDOM_SEED")
    )  # Set for reproducible exercises


@dataclass
class SessionConfig:
    """Scoring and feedback timing for practice sessions."""

    points_per_correct: int = 10
    passing_score: float = 70.0  # Percentage of max score

    # Feedback timing
    auto_advance: bool = field(
        default_factory=lambda: _env_flag("EXERCISE_AUTO_ADVANCE", True)
    )
    auto_advance_delay_ms: int = 3000
    manual_advance_delay_ms: int = 1000

    # Exercise ids that never reach the result reporter
    demo_exercise_ids: tuple = ("temp",)


@dataclass
class PathConfig:
    """File system paths - single source of truth for all directories."""

    # Base paths
    project_root: Path = field(default_factory=lambda: Path(__file__).parent.parent)

    # Computed from project_root
    schemas_dir: Path = field(init=False)
    logs_dir: Path = field(init=False)
    word_schema: Path = field(init=False)
    options_schema: Path = field(init=False)
    attempt_schema: Path = field(init=False)

    def __post_init__(self):
        """Initialize computed paths."""
        self.schemas_dir = self.project_root / "schemas"
        self.logs_dir = self.project_root / "data" / "logs"
        self.word_schema = self.schemas_dir / "vocabulary_word.schema.json"
        self.options_schema = self.schemas_dir / "exercise_options.schema.json"
        self.attempt_schema = self.schemas_dir / "exercise_attempt.schema.json"

    def prepare_filesystem(self):
        """
        Create directories if they don't exist.

        Separated from __post_init__ to avoid side-effects on import.
        Call this explicitly from your app entrypoint.
        """
        self.logs_dir.mkdir(parents=True, exist_ok=True)


@dataclass
class LoggingConfig:
    """Logging configuration."""

    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_to_file: bool = field(default_factory=lambda: _env_flag("LOG_TO_FILE", False))
    log_file_prefix: str = "vocab_exercises"


class Config:
    """
    Main configuration class. Singleton pattern.

    Usage:
        from src.config import config

        # Access settings
        max_questions = config.exercise.max_questions
        delay = config.session.auto_advance_delay_ms

        # Prepare filesystem (call once at startup)
        config.prepare_fs()
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance.paths = PathConfig()
            cls._instance.exercise = ExerciseConfig()
            cls._instance.session = SessionConfig()
            cls._instance.logging = LoggingConfig()

        return cls._instance

    def prepare_fs(self):
        """Prepare filesystem (create directories). Call once at startup."""
        self.paths.prepare_filesystem()

    def validate(self) -> list[str]:
        """
        Validate configuration and return list of errors.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        # Exercise validation
        if self.exercise.max_questions < 1:
            errors.append(f"max_questions must be >= 1, got {self.exercise.max_questions}")

        if self.exercise.max_matching_pairs < 1:
            errors.append(
                f"max_matching_pairs must be >= 1, got {self.exercise.max_matching_pairs}"
            )

        if self.exercise.crossword_min_length > self.exercise.crossword_max_length:
            errors.append(
                f"crossword_min_length ({self.exercise.crossword_min_length}) must be <= "
                f"crossword_max_length ({self.exercise.crossword_max_length})"
            )

        if self.exercise.crossword_max_length > self.exercise.crossword_grid_size:
            errors.append(
                f"crossword_max_length ({self.exercise.crossword_max_length}) must fit the "
                f"grid ({self.exercise.crossword_grid_size})"
            )

        if self.exercise.choice_distractors < 0:
            errors.append(
                f"choice_distractors must be >= 0, got {self.exercise.choice_distractors}"
            )

        # Session validation
        if self.session.points_per_correct <= 0:
            errors.append(
                f"points_per_correct must be > 0, got {self.session.points_per_correct}"
            )

        if not (0 <= self.session.passing_score <= 100):
            errors.append(
                f"passing_score must be in [0, 100], got {self.session.passing_score}"
            )

        if self.session.auto_advance_delay_ms < 0 or self.session.manual_advance_delay_ms < 0:
            errors.append("Feedback delays must be >= 0 ms")

        # Path validation
        for schema in (
            self.paths.word_schema,
            self.paths.options_schema,
            self.paths.attempt_schema,
        ):
            if not schema.exists():
                errors.append(f"Schema not found: {schema}")

        return errors


# Global config instance
config = Config()
