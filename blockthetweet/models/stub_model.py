"""
Deterministic stub scoring model.
Model-free backend for tests and for running the service without a trained model.
"""

from typing import Dict, Optional

import numpy as np

from .scorer import Scorer
from ..utils.vocabulary import UNKNOWN_ID


class StubScorer(Scorer):
    """
    Logistic score over per-id weights: sigmoid(bias + sum of weights of the ids present).
    Padding and unknown ids (0) never contribute.
    """

    def __init__(
        self,
        weights: Optional[Dict[int, float]] = None,
        bias: float = 0.0,
        thread_safe: bool = True
    ):
        self.weights = dict(weights or {})
        self.bias = float(bias)
        self.thread_safe = thread_safe

    def forward(self, batch: np.ndarray) -> np.ndarray:
        ids = np.asarray(batch, dtype=np.int64)
        if ids.ndim != 2 or ids.shape[0] != 1:
            raise ValueError(f"expected input of shape [1, L], got {list(ids.shape)}")

        logit = self.bias + sum(self.weights.get(int(i), 0.0) for i in ids[0] if i != UNKNOWN_ID)
        return np.array([[1.0 / (1.0 + np.exp(-logit))]], dtype=np.float32)
