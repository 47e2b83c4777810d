"""
Unit tests for vocabulary words and word sources.
"""

import dataclasses

import pytest

from src.models.vocabulary import InMemoryWordSource, VocabularyWord, load_word_pool


class TestVocabularyWord:

    def test_from_dict_reads_camel_case_image(self):
        word = VocabularyWord.from_dict({
            "id": 1,
            "term": "hund",
            "definition": "ett husdjur",
            "imageUrl": "https://example.org/hund.png",
        })
        assert word.id == "1"
        assert word.image_url == "https://example.org/hund.png"
        assert word.example is None

    def test_empty_optional_fields_become_none(self):
        word = VocabularyWord.from_dict({"id": "1", "term": "hund", "definition": "x", "example": ""})
        assert word.example is None

    def test_to_dict_round_trips(self):
        word = VocabularyWord(id="1", term="stor", definition="av stor storlek", antonym="liten")
        assert VocabularyWord.from_dict(word.to_dict()) == word

    def test_words_are_immutable(self, hund):
        with pytest.raises(dataclasses.FrozenInstanceError):
            hund.term = "katt"


class TestLoadWordPool:

    def test_loads_and_repairs_records(self):
        words = load_word_pool([
            {"id": 1, "term": "hund", "definition": "ett husdjur", "createdAt": "2024-01-01"},
            {"id": "2", "term": "katt", "definition": "ett annat husdjur", "example": "En katt jamar."},
        ])
        assert [w.term for w in words] == ["hund", "katt"]
        assert words[0].id == "1"
        assert words[1].example == "En katt jamar."

    def test_snake_case_image_survives_validation(self):
        words = load_word_pool([
            {"id": "1", "term": "hund", "definition": "ett husdjur", "image_url": "/img/hund.png"},
            {"id": "2", "term": "katt", "definition": "ett husdjur", "imageUrl": "/img/katt.png", "image_url": "/old.png"},
        ])
        assert words[0].image_url == "/img/hund.png"
        assert words[1].image_url == "/img/katt.png"

    def test_invalid_record_raises(self):
        with pytest.raises(ValueError, match="Invalid word records"):
            load_word_pool([{"id": "1", "term": "hund"}])

    def test_validation_can_be_skipped(self):
        words = load_word_pool([{"id": "1", "term": "hund", "definition": "x"}], validate=False)
        assert words[0].term == "hund"


class TestInMemoryWordSource:

    def test_returns_copy_of_set(self, hund):
        source = InMemoryWordSource({"s1": [hund]})
        words = source.get_words("s1")
        words.append(hund)
        assert len(source.get_words("s1")) == 1

    def test_unknown_set_is_empty(self):
        assert InMemoryWordSource().get_words("missing") == []

    def test_add_set(self, word_pool):
        source = InMemoryWordSource()
        source.add_set("animals", word_pool)
        assert len(source.get_words("animals")) == 8
