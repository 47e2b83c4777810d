"""
Crossword Layout Planner

Places vocabulary answers on a fixed square grid:
- Word 1 runs across, horizontally centered
- Word 2 runs down through the first letter it shares with word 1
- Words 3+ alternate across/down at random positions clamped to the grid

This is a best-effort layout. Only the first two answers are intersected;
later answers may overlap or collide with earlier ones.
"""

from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence, Tuple

try:
    from ..config import config
    from ..models.questions import ACROSS, DOWN, CrosswordClue, normalize_answer
    from ..models.vocabulary import VocabularyWord
except ImportError:
    from src.config import config
    from src.models.questions import ACROSS, DOWN, CrosswordClue, normalize_answer
    from src.models.vocabulary import VocabularyWord

logger = logging.getLogger(__name__)


def find_intersection(first: str, second: str) -> Optional[Tuple[int, int]]:
    """
    Find the first shared letter between two answers.

    Scans every letter of ``first`` against every letter of ``second``.

    Returns:
        (index_in_first, index_in_second), or None when no letter is shared
    """
    for i, a in enumerate(first):
        for j, b in enumerate(second):
            if a == b:
                return i, j
    return None


class CrosswordLayoutPlanner:
    """
    Plans clue placements for the crossword exercise.

    Usage:
        planner = CrosswordLayoutPlanner(rng=random.Random(7))
        clues, intersecting = planner.plan(words)
    """

    def __init__(self, grid_size: Optional[int] = None, rng: Optional[random.Random] = None):
        """
        Initialize planner.

        Args:
            grid_size: Width and height of the grid (default from config)
            rng: Random source for positions of words 3+
        """
        self.grid_size = grid_size or config.exercise.crossword_grid_size
        self.rng = rng or random.Random()

    def plan(self, words: Sequence[VocabularyWord]) -> Tuple[List[CrosswordClue], bool]:
        """
        Place answers for the given words in order.

        Args:
            words: Qualifying words (3 or more; answers must fit the grid)

        Returns:
            (clues in placement order, whether word 2 intersects word 1)
        """
        answers = [normalize_answer(word.term) for word in words]
        if not answers:
            return [], False

        size = self.grid_size
        center = size // 2
        first = answers[0]
        first_x = max(0, (size - len(first)) // 2)
        first_y = center

        clues: List[CrosswordClue] = []
        intersecting = False
        second_position: Optional[Tuple[int, int]] = None

        if len(answers) > 1:
            second = answers[1]
            shared = find_intersection(first, second)
            if shared is not None:
                i, j = shared
                # Keep word 1 on the center row unless word 2 would leave the grid
                first_y = min(max(center, j), size - len(second) + j)
                second_position = (first_x + i, first_y - j)
                intersecting = True
            else:
                logger.debug("No shared letter between %s and %s", first, second)
                second_position = (size - 1, 0)

        clues.append(self._clue(1, ACROSS, words[0], first, first_x, first_y))

        if second_position is not None:
            x, y = second_position
            clues.append(self._clue(2, DOWN, words[1], answers[1], x, y))

        for index in range(2, len(answers)):
            answer = answers[index]
            direction = ACROSS if index % 2 == 0 else DOWN
            x = self.rng.randrange(size)
            y = self.rng.randrange(size)
            if direction == ACROSS:
                x = max(0, min(x, size - len(answer)))
            else:
                y = max(0, min(y, size - len(answer)))
            clues.append(self._clue(index + 1, direction, words[index], answer, x, y))

        return clues, intersecting

    def plan_fallback(self, words: Sequence[VocabularyWord]) -> List[CrosswordClue]:
        """
        Single-clue layout used when too few words qualify.

        Each answer gets a private row; nothing is intersected.
        """
        clues = []
        for row, word in enumerate(words):
            answer = normalize_answer(word.term)
            clues.append(self._clue(row + 1, ACROSS, word, answer, 0, row))
        return clues

    @staticmethod
    def _clue(number: int, direction: str, word: VocabularyWord, answer: str, x: int, y: int) -> CrosswordClue:
        return CrosswordClue(
            number=number,
            direction=direction,
            clue=word.definition,
            answer=answer,
            start_x=x,
            start_y=y,
        )
