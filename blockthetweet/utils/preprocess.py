"""
Input preprocessing module for tweet classification.
Turns raw text into the fixed-length id sequence the scoring model was trained on.

The steps and their order must match training exactly:
whitespace split -> ASCII lowercase -> stem -> vocabulary lookup -> truncate/pad.
"""

import logging
import re
from typing import Callable, List, Sequence, Tuple

from .vocabulary import VocabularyIndex, UNKNOWN_ID


logger = logging.getLogger("blockthetweet.preprocess")

# C-locale isspace(): space, \t, \n, \v, \f, \r
_ASCII_WHITESPACE_RE = re.compile(r'[ \t\n\v\f\r]+')
_ASCII_LOWER = str.maketrans('ABCDEFGHIJKLMNOPQRSTUVWXYZ', 'abcdefghijklmnopqrstuvwxyz')

TokenSequence = Tuple[int, ...]


def split_tokens(text: str) -> List[str]:
    """
    Split text on ASCII whitespace. Punctuation stays attached to words.

    Args:
        text: Raw input text

    Returns:
        List of non-empty word tokens in original order
    """
    return [token for token in _ASCII_WHITESPACE_RE.split(text) if token]


def ascii_lower(word: str) -> str:
    """Lowercase A-Z only; non-ASCII characters are left as they are."""
    return word.translate(_ASCII_LOWER)


def encode_tokens(
    tokens: Sequence[str],
    vocabulary: VocabularyIndex,
    stem: Callable[[str], str]
) -> List[int]:
    """
    Map word tokens to vocabulary ids.

    Args:
        tokens: Word tokens as produced by split_tokens
        vocabulary: Vocabulary index
        stem: Stemming function for the configured language

    Returns:
        One id per token, UNKNOWN_ID for out-of-vocabulary words
    """
    return [vocabulary.lookup(stem(ascii_lower(token))) for token in tokens]


def pad_or_truncate(ids: Sequence[int], target_length: int) -> TokenSequence:
    """Keep the first target_length ids, right-padding with UNKNOWN_ID."""
    if len(ids) >= target_length:
        return tuple(ids[:target_length])
    return tuple(ids) + (UNKNOWN_ID,) * (target_length - len(ids))


def preprocess(
    raw_text: str,
    target_length: int,
    vocabulary: VocabularyIndex,
    stem: Callable[[str], str]
) -> TokenSequence:
    """
    Complete preprocessing pipeline for input text.
    Pure: no I/O besides a debug log line. Empty text yields all zeros.

    Args:
        raw_text: Raw input text string
        target_length: Fixed sequence length the model expects
        vocabulary: Vocabulary index
        stem: Stemming function for the configured language

    Returns:
        Tuple of exactly target_length ids
    """
    if isinstance(target_length, bool) or not isinstance(target_length, int) or target_length <= 0:
        raise ValueError(f"target_length must be a positive integer, got {target_length!r}")

    ids = encode_tokens(split_tokens(raw_text), vocabulary, stem)
    sequence = pad_or_truncate(ids, target_length)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("token ids head: %s", ' '.join(str(i) for i in sequence[:10]))

    return sequence


class TextPreprocessor:
    """
    Preprocessor bound to one deployment's vocabulary, stemmer and sequence length.
    Holds only read-only collaborators, so one instance serves all requests.
    """

    def __init__(self, vocabulary: VocabularyIndex, stem: Callable[[str], str], target_length: int):
        """
        Initialize the preprocessor.

        Args:
            vocabulary: Vocabulary index loaded at startup
            stem: Stemming function (a Stemmer instance or any str -> str callable)
            target_length: Sequence length of the trained model
        """
        if isinstance(target_length, bool) or not isinstance(target_length, int) or target_length <= 0:
            raise ValueError(f"target_length must be a positive integer, got {target_length!r}")
        self.vocabulary = vocabulary
        self.stem = stem
        self.target_length = target_length

    def __call__(self, raw_text: str) -> TokenSequence:
        return preprocess(raw_text, self.target_length, self.vocabulary, self.stem)

    def oov_rate(self, raw_text: str) -> float:
        """
        Fraction of tokens missing from the vocabulary, before truncation.
        A high rate usually means the vocabulary or stemmer language does not
        match the model.
        """
        ids = encode_tokens(split_tokens(raw_text), self.vocabulary, self.stem)
        if not ids:
            return 0.0
        return sum(1 for i in ids if i == UNKNOWN_ID) / len(ids)
