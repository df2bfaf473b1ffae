"""
Offline evaluation and benchmarking module.
Runs the classification service over a labeled dataset and reports
classification quality, model latency and vocabulary coverage.
"""

import json
import time
import numpy as np
from typing import List, Dict, Any
from pathlib import Path
from sklearn.metrics import accuracy_score, precision_score, recall_score, f1_score, roc_auc_score

from ..inference.service import ClassificationService


class Benchmark:
    """
    Benchmarking system for a deployed classification service.
    """

    def __init__(self, service: ClassificationService, threshold: float = 0.5):
        """
        Initialize the benchmark.

        Args:
            service: Classification service under test
            threshold: Confidence at or above which a text counts as "block"
        """
        self.service = service
        self.threshold = threshold

    def run(self, texts: List[str], labels: List[int]) -> Dict[str, Any]:
        """
        Classify every text and compute metrics.

        Args:
            texts: List of input texts
            labels: List of ground truth labels (1 = block, 0 = keep)

        Returns:
            Dictionary containing evaluation metrics
        """
        if len(texts) != len(labels):
            raise ValueError("texts and labels must have the same length")

        start_time = time.time()
        confidences = []
        scored_labels = []
        latencies_ns = []
        oov_rates = []
        failures = 0

        for text, label in zip(texts, labels):
            oov_rates.append(self.service.preprocessor.oov_rate(text))
            result = self.service.classify(text)
            if not result.ok:
                failures += 1
                continue
            confidences.append(result.prediction.confidence)
            latencies_ns.append(result.prediction.latency_ns)
            scored_labels.append(label)

        total_time = time.time() - start_time

        results: Dict[str, Any] = {
            'num_samples': len(texts),
            'num_scored': len(confidences),
            'failure_count': failures,
            'threshold': self.threshold,
            'sequence_length': self.service.sequence_length,
            'mean_oov_rate': float(np.mean(oov_rates)) if oov_rates else 0.0,
            'total_time_s': total_time,
        }

        if confidences:
            y_true = np.array(scored_labels)
            y_score = np.array(confidences, dtype=np.float64)
            y_pred = (y_score >= self.threshold).astype(int)
            latencies_ms = np.array(latencies_ns, dtype=np.float64) / 1e6

            results.update({
                'accuracy': float(accuracy_score(y_true, y_pred)),
                'precision': float(precision_score(y_true, y_pred, zero_division=0)),
                'recall': float(recall_score(y_true, y_pred, zero_division=0)),
                'f1': float(f1_score(y_true, y_pred, zero_division=0)),
                # AUC is undefined when only one class is present
                'roc_auc': float(roc_auc_score(y_true, y_score)) if len(set(scored_labels)) > 1 else None,
                'avg_latency_ms': float(latencies_ms.mean()),
                'p50_latency_ms': float(np.percentile(latencies_ms, 50)),
                'p95_latency_ms': float(np.percentile(latencies_ms, 95)),
            })

        return results

    def export(self, results: Dict[str, Any], output_dir: str) -> Path:
        """
        Write results to benchmark_results.json under output_dir.

        Args:
            results: Output of run()
            output_dir: Directory to write to (created if missing)

        Returns:
            Path of the written file
        """
        out = Path(output_dir)
        out.mkdir(parents=True, exist_ok=True)
        path = out / "benchmark_results.json"
        with open(path, 'w') as f:
            json.dump(results, f, indent=2)
        return path

    @staticmethod
    def print_results(results: Dict[str, Any]):
        """Print a human-readable summary."""
        print("\n" + "="*80)
        print("BENCHMARK RESULTS")
        print("="*80)
        print(f"Samples:            {results['num_samples']} ({results['failure_count']} failed)")
        print(f"Sequence Length:    {results['sequence_length']}")
        print(f"Mean OOV Rate:      {results['mean_oov_rate']:.2%}")
        if results.get('num_scored'):
            print(f"Accuracy:           {results['accuracy']:.4f}")
            print(f"Precision:          {results['precision']:.4f}")
            print(f"Recall:             {results['recall']:.4f}")
            print(f"F1:                 {results['f1']:.4f}")
            if results.get('roc_auc') is not None:
                print(f"ROC AUC:            {results['roc_auc']:.4f}")
            print(f"Avg Latency:        {results['avg_latency_ms']:.3f} ms")
            print(f"P95 Latency:        {results['p95_latency_ms']:.3f} ms")
        print("="*80)
