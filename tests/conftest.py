"""
Shared pytest fixtures and configuration for vocabulary exercise tests.

This file is automatically discovered by pytest and provides
fixtures available to all tests.
"""

import random
import sys
from pathlib import Path
from unittest.mock import Mock

import pytest

# Add project root to path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.models.vocabulary import InMemoryWordSource, VocabularyWord


class FakeLoop:
    """
    Stand-in event loop that records call_later requests.

    Tests fire the recorded callbacks explicitly instead of sleeping.
    """

    def __init__(self):
        self.scheduled = []

    def call_later(self, delay, callback, *args):
        handle = Mock()
        handle.cancelled = False

        def cancel():
            handle.cancelled = True

        handle.cancel.side_effect = cancel
        self.scheduled.append((delay, callback, args, handle))
        return handle

    @property
    def pending(self):
        return [entry for entry in self.scheduled if not entry[3].cancelled]

    def fire_pending(self):
        """Run every callback that was not cancelled, oldest first."""
        entries, self.scheduled = self.pending, []
        for _, callback, args, _ in entries:
            callback(*args)


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, start_ms=1_000_000):
        self.now = start_ms

    def __call__(self):
        return self.now

    def tick(self, ms):
        self.now += ms


ANIMALS = [
    ("hund", "ett husdjur som skäller"),
    ("katt", "ett husdjur som jamar"),
    ("häst", "ett stort djur man rider på"),
    ("fågel", "ett djur med vingar"),
    ("fisk", "ett djur som simmar"),
    ("ko", "ett djur som ger mjölk"),
    ("gris", "ett djur som grymtar"),
    ("får", "ett djur med ull"),
    ("get", "ett djur med horn"),
    ("mus", "ett litet gnagande djur"),
    ("räv", "ett listigt rovdjur"),
    ("björn", "ett stort rovdjur"),
]


def make_words(count, with_images=0):
    """Build ``count`` distinct words, the first ``with_images`` of them with images."""
    words = []
    for i in range(count):
        term, definition = ANIMALS[i] if i < len(ANIMALS) else (f"ord{i}", f"definition nummer {i}")
        words.append(VocabularyWord(
            id=f"w{i}",
            term=term,
            definition=definition,
            example=f"Jag ser en {term} i dag.",
            image_url=f"https://example.org/{term}.png" if i < with_images else None,
        ))
    return words


@pytest.fixture
def rng():
    """Seeded random source for reproducible generation."""
    return random.Random(1234)


@pytest.fixture
def hund():
    return VocabularyWord(id="w-hund", term="hund", definition="ett husdjur")


@pytest.fixture
def word_pool():
    """Eight animal words with examples, three of them with images."""
    return make_words(8, with_images=3)


@pytest.fixture
def word_factory():
    """The make_words builder, for tests that need pools of a given size."""
    return make_words


@pytest.fixture
def crossword_words():
    """Three words that pairwise share letters, so any order intersects."""
    return [
        VocabularyWord(id="c1", term="katt", definition="ett djur som jamar"),
        VocabularyWord(id="c2", term="tak", definition="överst på ett hus"),
        VocabularyWord(id="c3", term="kista", definition="en stor låda"),
    ]


@pytest.fixture
def word_source(word_pool, hund):
    return InMemoryWordSource({"animals": word_pool, "single": [hund], "empty": []})


@pytest.fixture
def fake_loop():
    return FakeLoop()


@pytest.fixture
def fake_clock():
    return FakeClock()


# Pytest hooks for better test output


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark tests in unit/ directory as unit tests
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)

        # Mark tests in integration/ directory as integration tests
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
