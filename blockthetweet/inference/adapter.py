"""
Inference adapter around the external scoring model.
Shapes the token sequence into the model input, times the forward call,
and turns any model error into an InferenceFailure value.
"""

import logging
import threading
import time
from contextlib import nullcontext
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from ..errors import InferenceFailure
from ..models.scorer import Scorer


logger = logging.getLogger("blockthetweet.inference")


@dataclass
class InferenceResult:
    """Outcome of one forward call: a confidence and latency, or a failure."""
    confidence: Optional[float] = None
    latency_ns: Optional[int] = None
    failure: Optional[InferenceFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


class InferenceAdapter:
    """
    Uniform synchronous call into a Scorer.
    If the scorer is not thread-safe, only the forward call is serialized.
    """

    def __init__(self, scorer: Scorer):
        """
        Initialize the adapter.

        Args:
            scorer: Loaded scoring model
        """
        self.scorer = scorer
        self._forward_lock = nullcontext() if getattr(scorer, 'thread_safe', True) else threading.Lock()

    def infer(self, sequence: Sequence[int]) -> InferenceResult:
        """
        Score one token sequence.

        Args:
            sequence: Fixed-length token ids

        Returns:
            InferenceResult with a float32 confidence and forward latency in
            nanoseconds, or with failure set. Never raises for model errors.
        """
        try:
            batch = np.asarray(sequence, dtype=np.int64).reshape(1, -1)

            with self._forward_lock:
                start = time.perf_counter_ns()
                output = self.scorer.forward(batch)
                latency_ns = time.perf_counter_ns() - start

            values = np.asarray(output, dtype=np.float32)
            if values.size != 1:
                raise ValueError(f"model returned {values.size} values, expected a single scalar")
            confidence = float(values.reshape(-1)[0])
        except Exception as e:
            logger.exception("Model forward failed")
            return InferenceResult(failure=InferenceFailure(f"model forward failed: {e}", stage="inference", cause=e))

        return InferenceResult(confidence=confidence, latency_ns=latency_ns)
