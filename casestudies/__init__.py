"""Deep-learning case studies.

This package prepares handwritten-digit images and movie-review token
sequences for Keras models, and runs the digit classification and
sentiment classification experiments built on them.

Modules:
    configs: Configuration management with dataclasses.
    data: Dataset loading and tensor preparation.
    models: Declarative architectures and model building.
    trainers: Training loop abstraction.
    evaluation: Metrics and history summaries.
    utils: Utility functions.

Example:
    >>> from casestudies.train import ExperimentPipeline
    >>> pipeline = ExperimentPipeline("casestudies/configs/mnist_cnn.yaml")
    >>> pipeline.run()
"""

__version__ = "1.0.0"

from casestudies.configs import ExperimentConfig, load_config
from casestudies.data import (
    BagOfWordsVectorizer,
    ImageTensorPreparer,
    SequencePadder,
    one_hot_labels,
)
from casestudies.models import build_model, get_architecture
from casestudies.trainers import Trainer

__all__ = [
    "ExperimentConfig",
    "load_config",
    "BagOfWordsVectorizer",
    "ImageTensorPreparer",
    "SequencePadder",
    "one_hot_labels",
    "build_model",
    "get_architecture",
    "Trainer",
]
