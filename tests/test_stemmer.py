from concurrent.futures import ThreadPoolExecutor

import pytest

from blockthetweet.errors import StartupFailure
from blockthetweet.utils.preprocess import preprocess
from blockthetweet.utils.stemmer import Stemmer
from blockthetweet.utils.vocabulary import VocabularyIndex


@pytest.mark.parametrize("word,stem", [
    ("running", "run"),
    ("cats", "cat"),
    ("connection", "connect"),
    ("generously", "generous"),
    ("hello", "hello"),
])
def test_english_stems(word, stem):
    assert Stemmer("english").stem(word) == stem


def test_callable():
    stemmer = Stemmer("english")
    assert stemmer("cats") == "cat"


def test_unknown_language():
    with pytest.raises(StartupFailure):
        Stemmer("klingon")


def test_stemmer_shared_across_threads():
    stemmer = Stemmer("english")
    words = ["running", "connection", "cats", "generously"] * 50
    with ThreadPoolExecutor(max_workers=8) as pool:
        stems = list(pool.map(stemmer.stem, words))
    assert stems == ["run", "connect", "cat", "generous"] * 50


def test_preprocess_with_real_stemmer():
    vocab = VocabularyIndex({"run": 1, "cat": 2})
    seq = preprocess("RUNNING Cats dogs", 4, vocab, Stemmer("english"))
    assert seq == (1, 2, 0, 0)
