"""
Question Generator - Turns a vocabulary word pool into practice questions.

Supports seven exercise types:
- true_false: real or borrowed definition statements
- fill_in_blank: example sentence with the term blanked out
- matching: terms to definitions (one aggregate question)
- image_matching: images to terms, with text fallback entries
- crossword: clue list planned on a fixed grid
- sentence_completion: blank, word bank or free-text sentence
- synonym_antonym: pick the synonym or antonym among shuffled options

Generation is synchronous and side-effect free. Too-small pools degrade to
fewer questions or fallback layouts, never to an exception.
"""

from __future__ import annotations

import logging
import random
import re
from typing import Callable, Dict, List, Optional, Sequence

from ..config import config
from ..models.questions import (
    ANTONYM,
    BLANK,
    CREATE_SENTENCE,
    CROSSWORD,
    FILL_BLANK,
    FILL_IN_BLANK,
    IMAGE_MATCHING,
    MATCHING,
    SENTENCE_COMPLETION,
    SYNONYM,
    SYNONYM_ANTONYM,
    TRUE_FALSE,
    WORD_BANK,
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
)
from ..models.vocabulary import VocabularyWord
from ..utils.validation import validate_exercise_options
from .crossword_planner import CrosswordLayoutPlanner, normalize_answer

logger = logging.getLogger(__name__)


# Used when a false statement needs a definition but the pool has one word
ALTERNATE_MEANING = "en helt annan betydelse"

# Words skipped when picking a content word out of a definition
STOP_WORDS = frozenset({
    # Swedish
    "eller", "till", "från", "inte", "något", "någon", "några", "över",
    "under", "efter", "innan", "mellan", "genom", "också", "bara", "vara",
    "blir", "sina", "sitt", "mycket", "andra", "annan", "annat", "vilken",
    "vilket", "detta", "denna", "dessa", "där", "när", "utan",
    # English
    "that", "with", "from", "which", "this", "have", "into", "when",
    "where", "their", "there", "about", "something", "someone", "very",
    "being", "used", "kind", "type",
})

# Small fixed antonym dictionary (both directions are listed explicitly)
ANTONYMS = {
    "stor": "liten", "liten": "stor",
    "glad": "ledsen", "ledsen": "glad",
    "varm": "kall", "kall": "varm",
    "ljus": "mörk", "mörk": "ljus",
    "snabb": "långsam", "långsam": "snabb",
    "gammal": "ung", "ung": "gammal",
    "hög": "låg", "låg": "hög",
    "lång": "kort", "kort": "lång",
    "tung": "lätt", "lätt": "tung",
    "rik": "fattig", "fattig": "rik",
    "stark": "svag", "svag": "stark",
    "dag": "natt", "natt": "dag",
    "början": "slut", "slut": "början",
    "öppen": "stängd", "stängd": "öppen",
    "modig": "rädd", "rädd": "modig",
    "big": "small", "small": "big",
    "happy": "sad", "sad": "happy",
    "hot": "cold", "cold": "hot",
    "fast": "slow", "slow": "fast",
    "old": "young", "young": "old",
}

NEGATION_PREFIX = "inte"

_WORD_PATTERN = re.compile(r"[^\W\d_]+", re.UNICODE)

DEFAULT_OPTIONS = {
    "focusOn": "both",
    "allowFreeText": True,
    "allowTextFallback": True,
}


def blank_out(sentence: str, term: str) -> str:
    """Replace every case-insensitive occurrence of ``term`` with the blank marker."""
    return re.sub(re.escape(term), BLANK, sentence, flags=re.IGNORECASE)


def definition_sentence(word: VocabularyWord) -> str:
    """Synthesize a blank sentence from the definition."""
    return f"Kan du fylla i det rätta ordet? {word.definition} - {BLANK}"


def extract_content_word(text: str) -> Optional[str]:
    """
    First word longer than three letters that is not a stop word.

    Example:
        >>> extract_content_word("ett stort husdjur som skäller")
        'stort'
    """
    for token in _WORD_PATTERN.findall(text or ""):
        token = token.lower()
        if len(token) > 3 and token not in STOP_WORDS:
            return token
    return None


class QuestionGenerator:
    """
    Generates practice questions from a word pool.

    Features:
    - One strategy per exercise type
    - Injected random source for reproducible exercises
    - Word order randomized by sampling without replacement
    - Degraded output instead of errors for small pools

    Usage:
        generator = QuestionGenerator(rng=random.Random(42))
        questions = generator.generate("true_false", words)
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        planner: Optional[CrosswordLayoutPlanner] = None,
    ):
        """
        Initialize question generator.

        Args:
            rng: Random source (seeded from config.exercise.random_seed if None)
            planner: Crossword layout planner (shares the random source if None)
        """
        self.rng = rng or random.Random(config.exercise.random_seed)
        self.planner = planner or CrosswordLayoutPlanner(rng=self.rng)
        self.settings = config.exercise

        self._strategies: Dict[str, Callable[[List[VocabularyWord], dict], List[Question]]] = {
            TRUE_FALSE: self._generate_true_false,
            FILL_IN_BLANK: self._generate_fill_in_blank,
            MATCHING: self._generate_matching,
            IMAGE_MATCHING: self._generate_image_matching,
            CROSSWORD: self._generate_crossword,
            SENTENCE_COMPLETION: self._generate_sentence_completion,
            SYNONYM_ANTONYM: self._generate_synonym_antonym,
        }

    @property
    def supported_types(self) -> List[str]:
        return list(self._strategies)

    def generate(
        self,
        exercise_type: str,
        words: Sequence[VocabularyWord],
        options: Optional[dict] = None,
    ) -> List[Question]:
        """
        Generate questions of one exercise type.

        Args:
            exercise_type: One of the supported exercise types
            words: Word pool
            options: Exercise options (focusOn, allowFreeText, allowTextFallback)

        Returns:
            List of questions; empty for an empty pool or an unknown type

        Raises:
            ValueError: If options do not match the options schema
        """
        resolved = dict(DEFAULT_OPTIONS)
        if options:
            result = validate_exercise_options(options)
            if not result.valid:
                raise ValueError(f"Invalid exercise options: {result.errors}")
            resolved.update(options)

        if not words:
            logger.debug("Empty word pool for %s", exercise_type)
            return []

        strategy = self._strategies.get(exercise_type)
        if strategy is None:
            logger.debug("Unsupported exercise type: %s", exercise_type)
            return []

        shuffled = self.rng.sample(list(words), len(words))
        questions = strategy(shuffled, resolved)
        logger.debug("Generated %d %s question(s) from %d word(s)", len(questions), exercise_type, len(words))
        return questions

    # ------------------------------------------------------------------
    # Per-type strategies. Each receives the pool already shuffled.
    # ------------------------------------------------------------------

    def _per_word(self, shuffled: List[VocabularyWord]) -> List[VocabularyWord]:
        return shuffled[: min(self.settings.max_questions, len(shuffled))]

    def _generate_true_false(self, shuffled: List[VocabularyWord], options: dict) -> List[Question]:
        questions = []
        for index, word in enumerate(self._per_word(shuffled)):
            is_true = self.rng.random() < 0.5
            if is_true:
                statement = f'"{word.term}" betyder "{word.definition}"'
                explanation = f"{word.term} betyder verkligen {word.definition}"
            else:
                other = self._borrowed_definition(shuffled, word)
                statement = f'"{word.term}" betyder "{other}"'
                explanation = f"{word.term} betyder {word.definition}, inte {other}"

            questions.append(TrueFalseQuestion(
                id=f"tf_{index}",
                word=word,
                statement=statement,
                is_true=is_true,
                explanation=explanation,
            ))
        return questions

    def _borrowed_definition(self, pool: List[VocabularyWord], word: VocabularyWord) -> str:
        """Definition of a different word; never one identical to the word's own."""
        others = [w for w in pool if w.id != word.id and w.definition != word.definition]
        if not others:
            logger.info("No other definition available for '%s'; using generic alternate meaning", word.term)
            return ALTERNATE_MEANING
        return self.rng.choice(others).definition

    def _blank_sentence(self, word: VocabularyWord) -> str:
        if word.example and re.search(re.escape(word.term), word.example, flags=re.IGNORECASE):
            return blank_out(word.example, word.term)
        return definition_sentence(word)

    def _generate_fill_in_blank(self, shuffled: List[VocabularyWord], options: dict) -> List[Question]:
        return [
            FillInBlankQuestion(
                id=f"fib_{index}",
                word=word,
                sentence=self._blank_sentence(word),
                correct_word=word.term.lower(),
                hints=(word.definition,) if word.definition else (),
            )
            for index, word in enumerate(self._per_word(shuffled))
        ]

    def _generate_matching(self, shuffled: List[VocabularyWord], options: dict) -> List[Question]:
        selected = shuffled[: min(self.settings.max_matching_pairs, len(shuffled))]
        pairs = tuple(
            MatchingPair(id=f"pair_{index}", term=word.term, definition=word.definition, word=word)
            for index, word in enumerate(selected)
        )
        return [MatchingQuestion(id="matching_0", pairs=pairs)]

    def _generate_image_matching(self, shuffled: List[VocabularyWord], options: dict) -> List[Question]:
        limit = min(self.settings.max_matching_pairs, len(shuffled))
        with_images = [word for word in shuffled if word.image_url]
        without_images = [word for word in shuffled if not word.image_url]

        selected = with_images[:limit]
        if len(with_images) < self.settings.min_image_entries:
            if not options["allowTextFallback"]:
                logger.info("Only %d image(s) and text fallback disabled", len(with_images))
                if not selected:
                    return []
            else:
                logger.info("Only %d image(s); mixing in text entries", len(with_images))
                selected = selected + without_images[: limit - len(selected)]

        entries = tuple(
            ImageMatchingEntry(id=f"img_{index}", term=word.term, image_url=word.image_url or "", word=word)
            for index, word in enumerate(selected)
        )
        return [ImageMatchingQuestion(id="image_matching_0", entries=entries)]

    def _generate_crossword(self, shuffled: List[VocabularyWord], options: dict) -> List[Question]:
        settings = self.settings
        qualifying = [
            word for word in shuffled
            if settings.crossword_min_length <= len(normalize_answer(word.term)) <= settings.crossword_max_length
        ]

        if len(qualifying) < settings.crossword_min_words:
            logger.info(
                "Only %d word(s) fit the crossword; using single-clue layout", len(qualifying)
            )
            candidates = [word for word in shuffled if normalize_answer(word.term)]
            clues = self.planner.plan_fallback(candidates[: settings.crossword_fallback_clues])
            if not clues:
                return []
            return [CrosswordQuestion(
                id="crossword_0",
                clues=tuple(clues),
                grid_size=self.planner.grid_size,
                intersecting=False,
                fallback=True,
            )]

        clues, intersecting = self.planner.plan(qualifying[: settings.crossword_max_clues])
        return [CrosswordQuestion(
            id="crossword_0",
            clues=tuple(clues),
            grid_size=self.planner.grid_size,
            intersecting=intersecting,
        )]

    def _distractor_terms(self, pool: List[VocabularyWord], word: VocabularyWord, exclude: set) -> List[str]:
        """Up to ``choice_distractors`` terms of other words, skipping excluded values."""
        picked: List[str] = []
        others = [w for w in pool if w.id != word.id]
        for other in self.rng.sample(others, len(others)):
            if len(picked) >= self.settings.choice_distractors:
                break
            if other.term not in exclude and other.term not in picked:
                picked.append(other.term)
        return picked

    def _generate_sentence_completion(self, shuffled: List[VocabularyWord], options: dict) -> List[Question]:
        subtypes = [FILL_BLANK, WORD_BANK]
        if options["allowFreeText"]:
            subtypes.append(CREATE_SENTENCE)

        questions = []
        for index, word in enumerate(self._per_word(shuffled)):
            subtype = self.rng.choice(subtypes)
            word_bank: tuple = ()

            if subtype == CREATE_SENTENCE:
                sentence = f'Skriv en egen mening med ordet "{word.term}".'
            else:
                sentence = self._blank_sentence(word)
                if subtype == WORD_BANK:
                    bank = [word.term] + self._distractor_terms(shuffled, word, {word.term})
                    self.rng.shuffle(bank)
                    word_bank = tuple(bank)

            questions.append(SentenceCompletionQuestion(
                id=f"sc_{index}",
                word=word,
                subtype=subtype,
                sentence=sentence,
                correct_answer=word.term,
                word_bank=word_bank,
            ))
        return questions

    def _generate_synonym_antonym(self, shuffled: List[VocabularyWord], options: dict) -> List[Question]:
        relations = {
            "synonyms": [SYNONYM],
            "antonyms": [ANTONYM],
            "both": [SYNONYM, ANTONYM],
        }[options["focusOn"]]

        questions = []
        for index, word in enumerate(self._per_word(shuffled)):
            relation = self.rng.choice(relations)
            if relation == SYNONYM:
                correct = self._synonym_for(word)
                distractors = self._synonym_distractors(shuffled, word, correct)
                prompt = f'Vilket ord betyder samma sak som "{word.term}"?'
            else:
                correct = self._antonym_for(word)
                distractors = self._antonym_distractors(shuffled, word, correct)
                prompt = f'Vilket ord betyder motsatsen till "{word.term}"?'

            options_list = [correct] + distractors
            self.rng.shuffle(options_list)

            questions.append(SynonymAntonymQuestion(
                id=f"syn_{index}",
                word=word,
                relation=relation,
                prompt=prompt,
                options=tuple(options_list),
                correct_answer=correct,
            ))
        return questions

    @staticmethod
    def _synonym_for(word: VocabularyWord) -> str:
        if word.synonym:
            return word.synonym
        content = extract_content_word(word.definition)
        if content:
            return content
        # Descriptive phrase from the first words of the definition
        return "något som är " + " ".join(word.definition.lower().split()[:3])

    @staticmethod
    def _antonym_for(word: VocabularyWord) -> str:
        if word.antonym:
            return word.antonym
        mapped = ANTONYMS.get(word.term.lower())
        if mapped:
            return mapped
        return f"{NEGATION_PREFIX} {word.term.lower()}"

    def _synonym_distractors(self, pool: List[VocabularyWord], word: VocabularyWord, correct: str) -> List[str]:
        picked: List[str] = []
        others = [w for w in pool if w.id != word.id]
        for other in self.rng.sample(others, len(others)):
            if len(picked) >= self.settings.choice_distractors:
                break
            candidate = extract_content_word(other.definition) or other.term
            if candidate != correct and candidate not in picked:
                picked.append(candidate)
        return picked

    def _antonym_distractors(self, pool: List[VocabularyWord], word: VocabularyWord, correct: str) -> List[str]:
        picked: List[str] = []
        others = [w for w in pool if w.id != word.id]
        for other in self.rng.sample(others, len(others)):
            if len(picked) >= self.settings.choice_distractors:
                break
            candidate = other.term.lower()
            if candidate != correct and candidate not in picked:
                picked.append(candidate)
        return picked


def generate_questions(
    exercise_type: str,
    words: Sequence[VocabularyWord],
    rng: Optional[random.Random] = None,
    options: Optional[dict] = None,
) -> List[Question]:
    """Convenience wrapper around QuestionGenerator.generate."""
    return QuestionGenerator(rng=rng).generate(exercise_type, words, options)
