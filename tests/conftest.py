import numpy as np
import pytest
from fastapi.testclient import TestClient

from blockthetweet.api.app import create_app
from blockthetweet.config import AppMetadata
from blockthetweet.inference.adapter import InferenceAdapter
from blockthetweet.inference.service import ClassificationService
from blockthetweet.models.scorer import Scorer
from blockthetweet.models.stub_model import StubScorer
from blockthetweet.utils.logging import PredictionLogger
from blockthetweet.utils.preprocess import TextPreprocessor
from blockthetweet.utils.vocabulary import VocabularyIndex


WORDS = {"hello": 1, "world": 2, "jump": 3, "cat": 4, "idiot": 5}


def fake_stem(word):
    """Strips a trailing "ing"; enough to observe stemming order in tests."""
    return word[:-3] if word.endswith("ing") else word


class RecordingScorer(Scorer):
    """Returns a fixed score and remembers every batch it was given."""

    def __init__(self, value=0.25, thread_safe=True):
        self.value = value
        self.thread_safe = thread_safe
        self.batches = []

    def forward(self, batch):
        self.batches.append(np.array(batch))
        return np.array([[self.value]], dtype=np.float32)


class FailingScorer(Scorer):
    def forward(self, batch):
        raise RuntimeError("out of memory")


@pytest.fixture
def vocabulary():
    return VocabularyIndex(WORDS)


@pytest.fixture
def preprocessor(vocabulary):
    return TextPreprocessor(vocabulary, fake_stem, 34)


@pytest.fixture
def recording_scorer():
    return RecordingScorer()


@pytest.fixture
def service(preprocessor, recording_scorer):
    return ClassificationService(preprocessor, InferenceAdapter(recording_scorer), PredictionLogger(keep_history=True))


@pytest.fixture
def failing_service(preprocessor):
    return ClassificationService(preprocessor, InferenceAdapter(FailingScorer()))


@pytest.fixture
def stub_service(preprocessor):
    scorer = StubScorer(weights={5: 3.0, 1: -1.0}, bias=0.0)
    return ClassificationService(preprocessor, InferenceAdapter(scorer))


@pytest.fixture
def client(service):
    return TestClient(create_app(service, AppMetadata()))
