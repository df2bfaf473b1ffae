"""
Snowball stemmer wrapper.
Uses the same Snowball algorithms the training pipeline ran through libstemmer.
"""

import threading

import snowballstemmer

from ..errors import StartupFailure


class Stemmer:
    """
    Language-bound stemmer safe to share across request threads.

    Snowball stemmer objects keep their working buffer on the instance,
    so each thread gets its own.
    """

    def __init__(self, language: str = "english"):
        """
        Initialize the stemmer.

        Args:
            language: Snowball language name (e.g. "english", "indonesian")

        Raises:
            StartupFailure: If the language is not supported
        """
        if language not in snowballstemmer.algorithms():
            raise StartupFailure(f"unsupported stemmer language: {language!r}")
        self.language = language
        self._local = threading.local()
        # Build one eagerly so configuration errors surface at startup
        self._instance()

    def _instance(self):
        stemmer = getattr(self._local, 'stemmer', None)
        if stemmer is None:
            stemmer = snowballstemmer.stemmer(self.language)
            self._local.stemmer = stemmer
        return stemmer

    def stem(self, word: str) -> str:
        """Reduce word to its stem."""
        return self._instance().stemWord(word)

    def __call__(self, word: str) -> str:
        return self.stem(word)

    def __repr__(self) -> str:
        return f"Stemmer(language={self.language!r})"
