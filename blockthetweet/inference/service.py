"""
Classification service: the single orchestration point for a request.
Fingerprint -> preprocess -> infer -> assemble Prediction.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Any, Optional

import numpy as np

from .adapter import InferenceAdapter
from ..errors import InferenceFailure
from ..utils.fingerprint import fingerprint
from ..utils.logging import PredictionLogger
from ..utils.preprocess import TextPreprocessor


logger = logging.getLogger("blockthetweet.service")


@dataclass(frozen=True)
class Prediction:
    """Result of classifying one text. Lives for one request only."""
    raw_text: str
    content_hash: int
    confidence: float
    latency_ns: int

    def to_response_data(self) -> Dict[str, Any]:
        """Response body for POST /."""
        # float32 widened to double, as the model emits it
        confidence = float(np.float32(self.confidence))
        return {
            'text_hash': self.content_hash,
            'text': self.raw_text,
            'confidence': confidence if math.isfinite(confidence) else None,
            'nanosecond': self.latency_ns,
        }


@dataclass(frozen=True)
class ClassificationResult:
    """Either a prediction or the failure that prevented one."""
    content_hash: int
    prediction: Optional[Prediction] = None
    failure: Optional[InferenceFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


class ClassificationService:
    """
    Stateless classifier over injected, read-only collaborators.
    Safe to call from many request threads at once.
    """

    def __init__(
        self,
        preprocessor: TextPreprocessor,
        adapter: InferenceAdapter,
        prediction_logger: Optional[PredictionLogger] = None
    ):
        """
        Initialize the service.

        Args:
            preprocessor: Text preprocessor bound to the deployment's vocabulary,
                stemmer and sequence length
            adapter: Inference adapter around the scoring model
            prediction_logger: Optional logger for predictions and failures
        """
        self.preprocessor = preprocessor
        self.adapter = adapter
        self.prediction_logger = prediction_logger or PredictionLogger()

    @property
    def sequence_length(self) -> int:
        return self.preprocessor.target_length

    def classify(self, raw_text: str) -> ClassificationResult:
        """
        Classify one text.

        Args:
            raw_text: Text exactly as submitted by the client

        Returns:
            ClassificationResult holding a Prediction, or an InferenceFailure
        """
        text_hash = fingerprint(raw_text)

        try:
            sequence = self.preprocessor(raw_text)
        except Exception as e:
            logger.exception("Preprocessing failed for text hash %s", text_hash)
            failure = InferenceFailure(f"preprocessing failed: {e}", stage="preprocess", cause=e)
            self.prediction_logger.log_failure(text_hash, failure.stage, str(failure))
            return ClassificationResult(content_hash=text_hash, failure=failure)

        # All-zero sequences are still scored
        result = self.adapter.infer(sequence)
        if not result.ok:
            self.prediction_logger.log_failure(text_hash, result.failure.stage, str(result.failure))
            return ClassificationResult(content_hash=text_hash, failure=result.failure)

        prediction = Prediction(
            raw_text=raw_text,
            content_hash=text_hash,
            confidence=result.confidence,
            latency_ns=result.latency_ns,
        )
        self.prediction_logger.log_prediction(text_hash, prediction.confidence, prediction.latency_ns)
        return ClassificationResult(content_hash=text_hash, prediction=prediction)
