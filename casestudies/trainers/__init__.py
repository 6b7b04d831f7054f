"""Training module."""

from casestudies.trainers.trainer import CallbackFactory, Trainer, TrainingResult

__all__ = [
    "CallbackFactory",
    "Trainer",
    "TrainingResult",
]
