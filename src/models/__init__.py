"""
Data models for vocabulary practice.

This module contains core data models:
- VocabularyWord / WordSource: Word records and the sets they come from
- Question variants: One immutable dataclass per exercise type
- AttemptWorkspace: Per-attempt input kept apart from the questions
- ExerciseSession / ExerciseResult: Progress and per-question outcomes
"""

from .vocabulary import InMemoryWordSource, VocabularyWord, WordSource, load_word_pool
from .questions import (
    CrosswordClue,
    CrosswordQuestion,
    FillInBlankQuestion,
    ImageMatchingEntry,
    ImageMatchingQuestion,
    MatchingPair,
    MatchingQuestion,
    Question,
    SentenceCompletionQuestion,
    SynonymAntonymQuestion,
    TrueFalseQuestion,
    EXERCISE_TYPES,
)
from .exercise_session import (
    AttemptWorkspace,
    ExerciseResult,
    ExerciseSession,
    ExerciseStartError,
    SessionPhase,
)

__all__ = [
    # Words
    "VocabularyWord",
    "WordSource",
    "InMemoryWordSource",
    "load_word_pool",
    # Questions
    "EXERCISE_TYPES",
    "Question",
    "TrueFalseQuestion",
    "FillInBlankQuestion",
    "MatchingPair",
    "MatchingQuestion",
    "ImageMatchingEntry",
    "ImageMatchingQuestion",
    "CrosswordClue",
    "CrosswordQuestion",
    "SentenceCompletionQuestion",
    "SynonymAntonymQuestion",
    # Sessions
    "AttemptWorkspace",
    "ExerciseResult",
    "ExerciseSession",
    "ExerciseStartError",
    "SessionPhase",
]
