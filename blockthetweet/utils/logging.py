"""
Logging and instrumentation module for classification requests.
Configures the service logger and records every prediction and inference failure.
"""

import logging
import json
import threading
from collections import deque
from datetime import datetime
from typing import Dict, Any, Optional, List

import numpy as np


LOGGER_NAME = "blockthetweet"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the service logger with a console handler and an optional file handler.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional path to log file. If None, logs only to console.

    Returns:
        The configured "blockthetweet" logger
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)

    # Clear existing handlers
    logger.handlers = []

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


class PredictionLogger:
    """
    Logger for predictions and inference failures.
    History is kept only when requested (offline evaluation), so a
    long-running server does not grow without bound.
    """

    def __init__(self, keep_history: bool = False, max_history: Optional[int] = None):
        """
        Initialize the prediction logger.

        Args:
            keep_history: Retain logged records for statistics and export
            max_history: Optional cap on retained records (oldest dropped first)
        """
        self.logger = logging.getLogger(f"{LOGGER_NAME}.predictions")
        self.keep_history = keep_history
        self.records = deque(maxlen=max_history)
        self._lock = threading.Lock()

    def _remember(self, record: Dict[str, Any]):
        if self.keep_history:
            with self._lock:
                self.records.append(record)

    def log_prediction(self, text_hash: int, confidence: float, latency_ns: int):
        """
        Log a successful prediction.

        Args:
            text_hash: Content fingerprint of the input text
            confidence: Model confidence score
            latency_ns: Model forward latency in nanoseconds
        """
        self._remember({
            'timestamp': datetime.now().isoformat(),
            'status': 'success',
            'text_hash': text_hash,
            'confidence': confidence,
            'latency_ns': latency_ns,
        })
        self.logger.info(
            f"Prediction | Hash: {text_hash} | "
            f"Confidence: {confidence:.4f} | "
            f"Latency: {latency_ns / 1e6:.3f}ms"
        )

    def log_failure(self, text_hash: int, stage: str, message: str):
        """
        Log an inference failure. The traceback is logged by the caller.

        Args:
            text_hash: Content fingerprint of the input text
            stage: Pipeline stage that failed ("preprocess" or "inference")
            message: Failure description
        """
        self._remember({
            'timestamp': datetime.now().isoformat(),
            'status': 'failure',
            'text_hash': text_hash,
            'stage': stage,
            'message': message,
        })
        self.logger.warning(f"Inference failure | Hash: {text_hash} | Stage: {stage} | {message}")

    def get_statistics(self) -> Dict[str, Any]:
        """
        Compute statistics from retained records.

        Returns:
            Dictionary containing counts and latency percentiles, empty without history
        """
        with self._lock:
            records = list(self.records)
        if not records:
            return {}

        successes = [r for r in records if r['status'] == 'success']
        latencies_ms = np.array([r['latency_ns'] for r in successes], dtype=np.float64) / 1e6

        stats = {
            'total': len(records),
            'success_count': len(successes),
            'failure_count': len(records) - len(successes),
        }
        if latencies_ms.size:
            stats.update({
                'avg_latency_ms': float(latencies_ms.mean()),
                'p50_latency_ms': float(np.percentile(latencies_ms, 50)),
                'p95_latency_ms': float(np.percentile(latencies_ms, 95)),
                'avg_confidence': float(np.mean([r['confidence'] for r in successes])),
            })
        return stats

    def export_records(self, output_path: str):
        """
        Export retained records to a JSON file.

        Args:
            output_path: Path to output JSON file
        """
        with self._lock:
            records: List[Dict[str, Any]] = list(self.records)

        with open(output_path, 'w') as f:
            json.dump(records, f, indent=2)

        self.logger.info(f"Exported {len(records)} prediction records to {output_path}")
