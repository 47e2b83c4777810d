"""
Unit tests for crossword layout planning and grid helpers.
"""

import random

import pytest

from src.exercises.crossword_planner import CrosswordLayoutPlanner, find_intersection, normalize_answer
from src.models.questions import ACROSS, DOWN, CrosswordClue, CrosswordQuestion
from src.models.vocabulary import VocabularyWord


def word(term, definition="ledtråd"):
    return VocabularyWord(id=term, term=term, definition=definition)


class TestNormalizeAnswer:

    @pytest.mark.parametrize("term,expected", [
        ("hund", "HUND"),
        ("Åsna", "ASNA"),
        ("björn", "BJORN"),
        ("häst", "HAST"),
        ("glass-bil 2", "GLASSBIL"),
    ])
    def test_normalization(self, term, expected):
        assert normalize_answer(term) == expected


class TestFindIntersection:

    def test_first_shared_letter_in_scan_order(self):
        assert find_intersection("KATT", "TAK") == (0, 2)

    def test_no_shared_letter(self):
        assert find_intersection("ORM", "KATT") is None


class TestPlanner:

    @pytest.fixture
    def planner(self):
        return CrosswordLayoutPlanner(grid_size=12, rng=random.Random(3))

    def test_first_word_across_and_centered(self, planner):
        clues, _ = planner.plan([word("katt"), word("tak"), word("kista")])
        first = clues[0]
        assert first.number == 1
        assert first.direction == ACROSS
        assert first.start_x == (12 - 4) // 2
        assert first.start_y == 6

    def test_second_word_crosses_first(self, planner):
        clues, intersecting = planner.plan([word("katt"), word("tak"), word("kista")])
        first, second = clues[0], clues[1]
        assert intersecting
        assert second.direction == DOWN
        first_cells = {(x, y): letter for x, y, letter in first.cells()}
        shared = [(x, y) for x, y, letter in second.cells() if first_cells.get((x, y)) == letter]
        assert shared

    def test_no_shared_letter_uses_fallback_column(self, planner):
        clues, intersecting = planner.plan([word("orm"), word("katt"), word("fisk")])
        assert not intersecting
        assert clues[1].direction == DOWN
        assert (clues[1].start_x, clues[1].start_y) == (11, 0)

    def test_later_words_alternate_and_stay_in_grid(self, planner):
        words = [word(t) for t in ["katt", "tak", "kista", "hund", "fisk", "björn"]]
        clues, _ = planner.plan(words)

        assert [clue.direction for clue in clues[2:]] == [ACROSS, DOWN, ACROSS, DOWN]
        for clue in clues:
            for x, y, _ in clue.cells():
                assert 0 <= x < 12
                assert 0 <= y < 12

    def test_intersection_near_end_of_second_word_stays_in_grid(self, planner):
        # Shared letter is the last of a long second word
        clues, intersecting = planner.plan([word("abc"), word("xxxxxxxxxa"), word("orm")])
        assert intersecting
        for x, y, _ in clues[1].cells():
            assert 0 <= y < 12

    def test_clue_text_is_definition(self, planner):
        clues, _ = planner.plan([word("katt", "jamar"), word("tak", "på huset"), word("kista", "låda")])
        assert [clue.clue for clue in clues] == ["jamar", "på huset", "låda"]

    def test_fallback_rows(self, planner):
        clues = planner.plan_fallback([word("ko"), word("hund")])
        assert [(c.start_x, c.start_y, c.direction) for c in clues] == [(0, 0, ACROSS), (0, 1, ACROSS)]


class TestCrosswordQuestion:

    @pytest.fixture
    def question(self):
        clues = (
            CrosswordClue(number=1, direction=ACROSS, clue="jamar", answer="KATT", start_x=0, start_y=0),
            CrosswordClue(number=2, direction=DOWN, clue="skäller", answer="HUND", start_x=0, start_y=0),
        )
        return CrosswordQuestion(id="crossword_0", clues=clues, grid_size=12)

    def test_total_cells_double_counts_shared_cells(self, question):
        assert question.total_cells == 8

    def test_conflicting_cells_reported(self, question):
        assert question.conflicting_cells() == {(0, 0): ("H", "K")}

    def test_letters_later_placement_wins(self, question):
        assert question.letters()[(0, 0)] == "H"
        assert question.letters()[(3, 0)] == "T"

    def test_clue_completion_and_correctness(self, question):
        clue = question.clues[0]
        assert clue.is_complete("kaxt")
        assert not clue.is_complete("kat")
        assert clue.is_correct("katt")
        assert not clue.is_correct("kaxt")
        assert not clue.is_correct(None)
