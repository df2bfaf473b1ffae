"""
Vocabulary index mapping stemmed, lowercased words to model input ids.
Loaded once at startup and shared read-only by every request.
"""

import json
from types import MappingProxyType
from typing import Mapping

from ..errors import StartupFailure


# Reserved id for out-of-vocabulary words; never assigned to a real word
UNKNOWN_ID = 0


class VocabularyIndex:
    """
    Immutable word -> id mapping.
    Every stored id is a positive integer, so 0 always means "unknown".
    """

    def __init__(self, mapping: Mapping[str, int]):
        """
        Initialize the index from a word -> id mapping.

        Args:
            mapping: Word to id mapping; the index keeps its own copy

        Raises:
            StartupFailure: If a key is not a string or an id is not a positive int
        """
        entries = {}
        for word, idx in mapping.items():
            if not isinstance(word, str):
                raise StartupFailure(f"vocabulary key must be a string, got {word!r}")
            if isinstance(idx, bool) or not isinstance(idx, int) or idx <= UNKNOWN_ID:
                raise StartupFailure(
                    f"vocabulary id for {word!r} must be a positive integer, got {idx!r}"
                )
            entries[word] = idx
        self._entries = MappingProxyType(entries)

    @classmethod
    def from_json(cls, path: str) -> "VocabularyIndex":
        """
        Load the vocabulary resource: a JSON object of word -> id.

        Args:
            path: Path to the JSON file

        Returns:
            VocabularyIndex over the file's entries
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StartupFailure(f"cannot load vocabulary {path}: {e}") from e

        if not isinstance(data, dict):
            raise StartupFailure(f"vocabulary {path} must be a JSON object")

        return cls(data)

    def lookup(self, word: str) -> int:
        """Return the id of word, or UNKNOWN_ID when absent."""
        return self._entries.get(word, UNKNOWN_ID)

    def __contains__(self, word) -> bool:
        return word in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"VocabularyIndex(size={len(self._entries)})"
