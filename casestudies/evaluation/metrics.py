"""Evaluation metrics for case-study models.

This module holds the scalar metrics and per-epoch history summaries
handed to the reporting layer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List

import numpy as np

logger = logging.getLogger(__name__)


@dataclass
class EvaluationResult:
    """Container for test-set metrics.

    Attributes:
        loss: Test loss.
        accuracy: Test accuracy in [0, 1].
        num_samples: Number of evaluated samples.
    """
    loss: float
    accuracy: float
    num_samples: int

    def __str__(self) -> str:
        """String representation."""
        return (
            f"loss: {self.loss:.4f}, accuracy: {self.accuracy:.4f} "
            f"({self.num_samples} samples)"
        )

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary."""
        return {
            "loss": self.loss,
            "accuracy": self.accuracy,
            "num_samples": self.num_samples,
        }


def summarize_history(history: Dict[str, List[float]]) -> Dict[str, Dict[str, float]]:
    """Summarize a per-epoch metric history.

    Loss-like metrics are minimized and everything else maximized when
    picking the best epoch.

    Args:
        history: Mapping from metric name to per-epoch values.

    Returns:
        Mapping from metric name to {"final", "best", "best_epoch"},
        with 1-based epochs. Metrics without values are skipped.
    """
    summary = {}
    for name, values in history.items():
        if not values:
            continue
        values = np.asarray(values, dtype=np.float64)
        if "loss" in name:
            best_index = int(np.argmin(values))
        else:
            best_index = int(np.argmax(values))
        summary[name] = {
            "final": float(values[-1]),
            "best": float(values[best_index]),
            "best_epoch": best_index + 1,
        }
    return summary
