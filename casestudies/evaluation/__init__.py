"""Evaluation module."""

from casestudies.evaluation.metrics import EvaluationResult, summarize_history

__all__ = [
    "EvaluationResult",
    "summarize_history",
]
