"""
Vocabulary word records and word sources.

Words are owned by the external word-pool provider; the engine only reads them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence

try:
    from ..utils.validation import validate_word_records
except ImportError:
    from src.utils.validation import validate_word_records


@dataclass(frozen=True)
class VocabularyWord:
    """
    A single vocabulary word.

    Attributes:
        id: Word identifier
        term: The word being practised
        definition: Meaning of the word
        example: Optional example sentence using the term
        image_url: Optional image reference
        synonym: Optional curated synonym
        antonym: Optional curated antonym
        phonetic: Optional pronunciation hint
    """
    id: str
    term: str
    definition: str
    example: Optional[str] = None
    image_url: Optional[str] = None
    synonym: Optional[str] = None
    antonym: Optional[str] = None
    phonetic: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> VocabularyWord:
        """Build a word from a provider record (camelCase or snake_case keys)."""
        return cls(
            id=str(data["id"]),
            term=data["term"],
            definition=data["definition"],
            example=data.get("example") or None,
            image_url=data.get("imageUrl", data.get("image_url")) or None,
            synonym=data.get("synonym") or None,
            antonym=data.get("antonym") or None,
            phonetic=data.get("phonetic") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a provider-style record."""
        return {
            "id": self.id,
            "term": self.term,
            "definition": self.definition,
            "example": self.example,
            "imageUrl": self.image_url,
            "synonym": self.synonym,
            "antonym": self.antonym,
            "phonetic": self.phonetic,
        }


def load_word_pool(records: Iterable[Mapping[str, Any]], validate: bool = True) -> List[VocabularyWord]:
    """
    Convert provider records into VocabularyWord values.

    Args:
        records: Raw word records
        validate: Validate (and repair) records against the word schema first

    Returns:
        List of VocabularyWord

    Raises:
        ValueError: If any record fails validation
    """
    records = [dict(record) for record in records]
    for record in records:
        # The word schema only knows the camelCase key
        if "image_url" in record:
            record.setdefault("imageUrl", record.pop("image_url"))

    if validate:
        result = validate_word_records(records, auto_repair=True)
        if not result.valid:
            raise ValueError(
                f"Invalid word records ({len(result.errors)} error(s)):\n"
                + "\n".join(f"  - {error}" for error in result.errors)
            )
        records = result.data

    return [VocabularyWord.from_dict(record) for record in records]


class WordSource(Protocol):
    """Supplies the word pool for a vocabulary set."""

    def get_words(self, set_id: str) -> Sequence[VocabularyWord]:
        ...


class InMemoryWordSource:
    """Word source backed by a mapping of set id to words."""

    def __init__(self, sets: Optional[Mapping[str, Sequence[VocabularyWord]]] = None):
        self._sets: Dict[str, List[VocabularyWord]] = {
            set_id: list(words) for set_id, words in (sets or {}).items()
        }

    def add_set(self, set_id: str, words: Iterable[VocabularyWord]):
        self._sets[set_id] = list(words)

    def get_words(self, set_id: str) -> Sequence[VocabularyWord]:
        return list(self._sets.get(set_id, []))
