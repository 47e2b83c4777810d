"""
Answer Validator - Per-type correctness checks for learner answers.

Every check takes ``(question, answer)`` and returns a ValidationOutcome with
the correctness flag and the canonical answer to display. A missing or
malformed answer is judged incorrect; validation never raises.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from ..models.questions import (
    CREATE_SENTENCE,
    CROSSWORD,
    FILL_IN_BLANK,
    IMAGE_MATCHING,
    MATCHING,
    SENTENCE_COMPLETION,
    SYNONYM_ANTONYM,
    TRUE_FALSE,
    CrosswordQuestion,
    FillInBlankQuestion,
    ImageMatchingQuestion,
    MatchingQuestion,
    Question,
    SentenceCompletionQuestion,
    SynonymAntonymQuestion,
    TrueFalseQuestion,
)

# Free-text sentences must be longer than this after trimming
MIN_SENTENCE_LENGTH = 10


@dataclass(frozen=True)
class ValidationOutcome:
    is_correct: bool
    correct_answer: str


def _normalized(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    return value.strip().lower()


def _as_bool(answer: Any) -> Optional[bool]:
    """Accept a bool or the strings 'true'/'false'."""
    if isinstance(answer, bool):
        return answer
    text = _normalized(answer)
    if text in ("true", "false"):
        return text == "true"
    return None


def _check_true_false(question: TrueFalseQuestion, answer: Any) -> ValidationOutcome:
    choice = _as_bool(answer)
    return ValidationOutcome(
        is_correct=choice is not None and choice == question.is_true,
        correct_answer="true" if question.is_true else "false",
    )


def _check_fill_in_blank(question: FillInBlankQuestion, answer: Any) -> ValidationOutcome:
    return ValidationOutcome(
        is_correct=_normalized(answer) == question.correct_word.strip().lower(),
        correct_answer=question.correct_word,
    )


def _check_matching(question: MatchingQuestion, answer: Any) -> ValidationOutcome:
    matches = answer if isinstance(answer, Mapping) else {}
    all_matched = bool(question.pairs) and all(
        matches.get(pair.id) == pair.definition for pair in question.pairs
    )
    return ValidationOutcome(
        is_correct=all_matched,
        correct_answer="; ".join(f"{pair.term} = {pair.definition}" for pair in question.pairs),
    )


def _check_image_matching(question: ImageMatchingQuestion, answer: Any) -> ValidationOutcome:
    matches = answer if isinstance(answer, Mapping) else {}
    all_matched = bool(question.entries) and all(
        matches.get(entry.id) == entry.term for entry in question.entries
    )
    return ValidationOutcome(
        is_correct=all_matched,
        correct_answer=", ".join(entry.term for entry in question.entries),
    )


def _check_crossword(question: CrosswordQuestion, answer: Any) -> ValidationOutcome:
    entries = answer if isinstance(answer, Mapping) else {}

    def entry_for(number: int):
        # Entries may be keyed by clue number or its string form
        return entries.get(number, entries.get(str(number)))

    solved = bool(question.clues) and all(
        clue.is_correct(entry_for(clue.number)) for clue in question.clues
    )
    return ValidationOutcome(
        is_correct=solved,
        correct_answer=", ".join(f"{clue.number}. {clue.answer}" for clue in question.clues),
    )


def _check_sentence_completion(question: SentenceCompletionQuestion, answer: Any) -> ValidationOutcome:
    term = question.correct_answer.strip().lower()
    text = _normalized(answer)

    if question.subtype == CREATE_SENTENCE:
        # Weak heuristic: the sentence must use the term and be long enough
        is_correct = (
            text is not None
            and term in text
            and len(answer.strip()) > MIN_SENTENCE_LENGTH
        )
    else:
        is_correct = text == term

    return ValidationOutcome(is_correct=is_correct, correct_answer=question.correct_answer)


def _check_synonym_antonym(question: SynonymAntonymQuestion, answer: Any) -> ValidationOutcome:
    return ValidationOutcome(
        is_correct=isinstance(answer, str) and answer == question.correct_answer,
        correct_answer=question.correct_answer,
    )


VALIDATORS: Dict[str, Callable[[Any, Any], ValidationOutcome]] = {
    TRUE_FALSE: _check_true_false,
    FILL_IN_BLANK: _check_fill_in_blank,
    MATCHING: _check_matching,
    IMAGE_MATCHING: _check_image_matching,
    CROSSWORD: _check_crossword,
    SENTENCE_COMPLETION: _check_sentence_completion,
    SYNONYM_ANTONYM: _check_synonym_antonym,
}


def validate_answer(question: Question, answer: Any) -> ValidationOutcome:
    """
    Check a learner answer against a question.

    Args:
        question: Any question variant
        answer: Raw answer; bool or str for single-answer types, a mapping of
            item id (or clue number) to chosen value for aggregate types

    Returns:
        ValidationOutcome
    """
    check = VALIDATORS.get(getattr(question, "question_type", None))
    if check is None:
        return ValidationOutcome(is_correct=False, correct_answer="")
    return check(question, answer)


def is_correct(question: Question, answer: Any) -> bool:
    return validate_answer(question, answer).is_correct
