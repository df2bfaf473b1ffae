"""
Pretrained TorchScript scoring model.
Loads a scripted/traced module once and runs single-row forward passes.
"""

import numpy as np

from .scorer import Scorer
from ..errors import StartupFailure


class TorchScriptScorer(Scorer):
    """
    Scorer backed by a TorchScript module (e.g. the BiLSTM tweet classifier).
    """

    def __init__(self, model_path: str, device: str = "cpu", thread_safe: bool = True):
        """
        Load the model.

        Args:
            model_path: Path to the .pt TorchScript archive
            device: Torch device to run on
            thread_safe: Whether concurrent forward calls are allowed

        Raises:
            StartupFailure: If torch is unavailable or the model cannot be loaded
        """
        try:
            import torch
        except ImportError as e:
            raise StartupFailure("the torchscript backend requires torch to be installed") from e

        self.model_path = model_path
        self.thread_safe = thread_safe
        try:
            self._device = torch.device(device)
            self._model = torch.jit.load(model_path, map_location=self._device)
        except Exception as e:
            raise StartupFailure(f"error loading the model {model_path}: {e}") from e
        self._model.eval()

    def forward(self, batch: np.ndarray) -> np.ndarray:
        import torch

        inputs = torch.from_numpy(np.ascontiguousarray(batch, dtype=np.int64)).to(self._device)
        with torch.no_grad():
            output = self._model.forward(inputs)
        return output.detach().cpu().numpy()

    def __repr__(self) -> str:
        return f"TorchScriptScorer(path={self.model_path!r}, device={str(self._device)!r})"
