"""
Scorer capability interface.
Every scoring model backend is a Scorer so the inference adapter can
treat the pretrained model and test stubs the same way.
"""

from abc import ABC, abstractmethod

import numpy as np

from ..errors import StartupFailure


class Scorer(ABC):
    """
    Abstract base class for scoring models.

    thread_safe declares whether forward() may run concurrently from several
    threads. When False, the inference adapter serializes forward calls.
    """

    thread_safe: bool = True

    @abstractmethod
    def forward(self, batch: np.ndarray):
        """
        Run the model on one encoded input.

        Args:
            batch: int64 array of shape [1, sequence_length]

        Returns:
            Array-like model output holding a single confidence value
        """
        pass


def build_scorer(model_config) -> Scorer:
    """
    Construct the scorer selected by model.backend.

    Args:
        model_config: ModelConfig from the service configuration

    Returns:
        Loaded Scorer
    """
    if model_config.backend == 'torchscript':
        from .torchscript_model import TorchScriptScorer
        return TorchScriptScorer(
            model_config.path,
            device=model_config.device,
            thread_safe=model_config.thread_safe,
        )
    if model_config.backend == 'stub':
        from .stub_model import StubScorer
        return StubScorer(
            weights=model_config.stub_weights,
            bias=model_config.stub_bias,
            thread_safe=model_config.thread_safe,
        )
    raise StartupFailure(f"unknown model backend: {model_config.backend!r}")
