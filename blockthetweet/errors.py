"""
Error taxonomy shared across the service.

- MalformedRequest : request body is not JSON or lacks a string "text"
- InferenceFailure : preprocessing or the scoring model failed for one request
- StartupFailure   : model, vocabulary, stemmer or config failed to load
"""

from typing import Optional


class BlockTheTweetError(Exception):
    """Base class for all service errors."""
    pass


class MalformedRequest(BlockTheTweetError, ValueError):
    """Client sent a body that cannot be classified."""
    pass


class InferenceFailure(BlockTheTweetError, RuntimeError):
    """
    A single classification could not produce a prediction.

    Returned (not raised) by the inference adapter and the classification
    service, so the HTTP layer can map it to a 500 without unwinding.
    """

    def __init__(self, message: str, stage: str = "inference", cause: Optional[BaseException] = None):
        super().__init__(message)
        self.stage = stage
        self.cause = cause

    def __repr__(self) -> str:
        return f"InferenceFailure(stage={self.stage!r}, message={str(self)!r})"


class StartupFailure(BlockTheTweetError, RuntimeError):
    """A resource needed before serving could not be loaded. Fatal."""
    pass
