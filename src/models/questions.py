"""
Question variants produced by the question generator.

Each exercise type has its own immutable question shape. All variants carry a
``question_type`` discriminant and a ``question_text`` used when recording
results. In-progress learner input (match maps, crossword entries) is never
stored on a question; see ``AttemptWorkspace``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar, Dict, Iterator, Optional, Tuple, Union

from .vocabulary import VocabularyWord


# Exercise types
TRUE_FALSE = "true_false"
FILL_IN_BLANK = "fill_in_blank"
MATCHING = "matching"
IMAGE_MATCHING = "image_matching"
CROSSWORD = "crossword"
SENTENCE_COMPLETION = "sentence_completion"
SYNONYM_ANTONYM = "synonym_antonym"

EXERCISE_TYPES = (
    TRUE_FALSE,
    FILL_IN_BLANK,
    MATCHING,
    IMAGE_MATCHING,
    CROSSWORD,
    SENTENCE_COMPLETION,
    SYNONYM_ANTONYM,
)

# Sentence completion subtypes
FILL_BLANK = "fill_blank"
WORD_BANK = "word_bank"
CREATE_SENTENCE = "create_sentence"

# Synonym/antonym relations
SYNONYM = "synonym"
ANTONYM = "antonym"

# Crossword directions
ACROSS = "across"
DOWN = "down"

BLANK = "______"

_FOLDED_LETTERS = str.maketrans({"Å": "A", "Ä": "A", "Ö": "O"})
_NON_LETTERS = re.compile(r"[^A-Z]")


def normalize_answer(term: str) -> str:
    """
    Normalize a term or a learner entry into crossword letters.

    Upper-cases, folds Å/Ä to A and Ö to O, and drops everything outside A-Z.

    Example:
        >>> normalize_answer("Hög höst")
        'HOGHOST'
    """
    return _NON_LETTERS.sub("", term.upper().translate(_FOLDED_LETTERS))


@dataclass(frozen=True)
class TrueFalseQuestion:
    """Statement pairing a term with a real or borrowed definition."""
    question_type: ClassVar[str] = TRUE_FALSE

    id: str
    word: VocabularyWord
    statement: str
    is_true: bool
    explanation: str

    @property
    def question_text(self) -> str:
        return self.statement


@dataclass(frozen=True)
class FillInBlankQuestion:
    """Sentence with the term blanked out."""
    question_type: ClassVar[str] = FILL_IN_BLANK

    id: str
    word: VocabularyWord
    sentence: str
    correct_word: str  # Lower-cased term
    hints: Tuple[str, ...] = ()

    @property
    def question_text(self) -> str:
        return self.sentence


@dataclass(frozen=True)
class MatchingPair:
    id: str
    term: str
    definition: str
    word: VocabularyWord


@dataclass(frozen=True)
class MatchingQuestion:
    """Aggregate question: match every term with its definition."""
    question_type: ClassVar[str] = MATCHING

    id: str
    pairs: Tuple[MatchingPair, ...]

    @property
    def question_text(self) -> str:
        return "Matcha ord med definitioner"

    @property
    def definitions(self) -> Tuple[str, ...]:
        return tuple(pair.definition for pair in self.pairs)


@dataclass(frozen=True)
class ImageMatchingEntry:
    """
    One image to match with its term.

    An empty ``image_url`` tells the consumer to show the term as text.
    """
    id: str
    term: str
    image_url: str
    word: VocabularyWord

    @property
    def is_text_fallback(self) -> bool:
        return not self.image_url


@dataclass(frozen=True)
class ImageMatchingQuestion:
    """Aggregate question: match every image with its term."""
    question_type: ClassVar[str] = IMAGE_MATCHING

    id: str
    entries: Tuple[ImageMatchingEntry, ...]

    @property
    def question_text(self) -> str:
        return "Matcha bilder med ord"

    @property
    def terms(self) -> Tuple[str, ...]:
        return tuple(entry.term for entry in self.entries)


@dataclass(frozen=True)
class CrosswordClue:
    """A placed crossword answer."""
    number: int
    direction: str  # ACROSS or DOWN
    clue: str
    answer: str  # Normalized, upper-case
    start_x: int
    start_y: int

    @property
    def length(self) -> int:
        return len(self.answer)

    def cells(self) -> Iterator[Tuple[int, int, str]]:
        """Yield (x, y, letter) for every cell of the answer."""
        for i, letter in enumerate(self.answer):
            if self.direction == ACROSS:
                yield self.start_x + i, self.start_y, letter
            else:
                yield self.start_x, self.start_y + i, letter

    def is_complete(self, entry: Optional[str]) -> bool:
        """An entry is complete once its normalized letters fill the answer."""
        return isinstance(entry, str) and len(normalize_answer(entry)) == self.length

    def is_correct(self, entry: Optional[str]) -> bool:
        """Entries are normalized like answers, so "hög" solves "HOG"."""
        return isinstance(entry, str) and normalize_answer(entry) == self.answer


@dataclass(frozen=True)
class CrosswordQuestion:
    """
    Aggregate crossword question.

    ``intersecting`` is True when the second answer crosses the first;
    ``fallback`` is True for the single-row layout used with too few words.
    """
    question_type: ClassVar[str] = CROSSWORD

    id: str
    clues: Tuple[CrosswordClue, ...]
    grid_size: int
    intersecting: bool = False
    fallback: bool = False

    @property
    def question_text(self) -> str:
        return "Lös korsordet"

    @property
    def total_cells(self) -> int:
        """Sum of answer lengths (shared cells are counted once per answer)."""
        return sum(clue.length for clue in self.clues)

    def letters(self) -> Dict[Tuple[int, int], str]:
        """Cell to letter map; later placements overwrite earlier ones."""
        grid: Dict[Tuple[int, int], str] = {}
        for clue in self.clues:
            for x, y, letter in clue.cells():
                grid[(x, y)] = letter
        return grid

    def conflicting_cells(self) -> Dict[Tuple[int, int], Tuple[str, ...]]:
        """Cells where two placed answers need different letters."""
        seen: Dict[Tuple[int, int], set] = {}
        for clue in self.clues:
            for x, y, letter in clue.cells():
                seen.setdefault((x, y), set()).add(letter)
        return {cell: tuple(sorted(letters)) for cell, letters in seen.items() if len(letters) > 1}


@dataclass(frozen=True)
class SentenceCompletionQuestion:
    """Blank, word-bank or free-text sentence task for one word."""
    question_type: ClassVar[str] = SENTENCE_COMPLETION

    id: str
    word: VocabularyWord
    subtype: str  # FILL_BLANK, WORD_BANK or CREATE_SENTENCE
    sentence: str
    correct_answer: str
    word_bank: Tuple[str, ...] = ()

    @property
    def question_text(self) -> str:
        return self.sentence


@dataclass(frozen=True)
class SynonymAntonymQuestion:
    """Choose the synonym or antonym of a term among shuffled options."""
    question_type: ClassVar[str] = SYNONYM_ANTONYM

    id: str
    word: VocabularyWord
    relation: str  # SYNONYM or ANTONYM
    prompt: str
    options: Tuple[str, ...]
    correct_answer: str

    @property
    def question_text(self) -> str:
        return self.prompt


Question = Union[
    TrueFalseQuestion,
    FillInBlankQuestion,
    MatchingQuestion,
    ImageMatchingQuestion,
    CrosswordQuestion,
    SentenceCompletionQuestion,
    SynonymAntonymQuestion,
]
