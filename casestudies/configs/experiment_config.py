"""Dataclass-based configuration management.

This module provides structured configuration for a case-study
experiment using Python dataclasses with validation and YAML loading.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

DATASET_REPRESENTATIONS = {
    "mnist": ("flat", "channels"),
    "imdb": ("bag_of_words", "padded"),
}

OPTIMIZERS = ("rmsprop", "adam", "sgd")

PRESETS_DIR = Path(__file__).parent


@dataclass(frozen=True)
class DataConfig:
    """Configuration for the dataset and its preparation.

    Attributes:
        dataset: Dataset name, "mnist" or "imdb".
        representation: Prepared tensor form ("flat", "channels",
            "bag_of_words" or "padded").
        image_height: Image height (image datasets).
        image_width: Image width (image datasets).
        num_classes: Number of label classes.
        vocab_size: Vocabulary bound (text datasets).
        max_length: Padded sequence length (text datasets).
        truncating: Side to truncate long sequences from, "pre" or "post".
        oov_policy: Handling of ids beyond the vocabulary bound.
        sample_limit: Optional cap on samples per split.
        random_seed: Seed threaded into every stochastic component.
    """
    dataset: str = "mnist"
    representation: str = "flat"
    image_height: int = 28
    image_width: int = 28
    num_classes: int = 10
    vocab_size: int = 10000
    max_length: int = 500
    truncating: str = "pre"
    oov_policy: str = "ignore"
    sample_limit: Optional[int] = None
    random_seed: int = 42

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.dataset not in DATASET_REPRESENTATIONS:
            raise ValueError(
                f"dataset must be one of {tuple(DATASET_REPRESENTATIONS)}, "
                f"got {self.dataset!r}"
            )
        allowed = DATASET_REPRESENTATIONS[self.dataset]
        if self.representation not in allowed:
            raise ValueError(
                f"representation for {self.dataset} must be one of "
                f"{allowed}, got {self.representation!r}"
            )
        if self.image_height <= 0 or self.image_width <= 0:
            raise ValueError("image dimensions must be positive")
        if self.num_classes < 2:
            raise ValueError(f"num_classes must be >= 2, got {self.num_classes}")
        if self.vocab_size <= 0:
            raise ValueError(f"vocab_size must be positive, got {self.vocab_size}")
        if self.max_length <= 0:
            raise ValueError(f"max_length must be positive, got {self.max_length}")
        if self.truncating not in ("pre", "post"):
            raise ValueError(f"truncating must be 'pre' or 'post', got {self.truncating!r}")
        if self.oov_policy not in ("ignore", "error", "collapse"):
            raise ValueError(f"unknown oov_policy {self.oov_policy!r}")
        if self.sample_limit is not None and self.sample_limit <= 0:
            raise ValueError(f"sample_limit must be positive, got {self.sample_limit}")


@dataclass(frozen=True)
class ModelConfig:
    """Configuration for model architecture.

    Attributes:
        architecture: Registered architecture name.
        hidden_units: Units in hidden dense layers.
        dropout_rate: Dropout rate for regularization.
        conv_filters: Filters in the first convolution block.
        kernel_size: Convolution kernel size.
        embedding_dim: Dimension of word embeddings.
        recurrent_units: Units in the recurrent layer.
    """
    architecture: str = "dense"
    hidden_units: int = 512
    dropout_rate: float = 0.2
    conv_filters: int = 32
    kernel_size: int = 3
    embedding_dim: int = 32
    recurrent_units: int = 32

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.hidden_units <= 0:
            raise ValueError(f"hidden_units must be positive, got {self.hidden_units}")
        if not 0 <= self.dropout_rate < 1:
            raise ValueError(f"dropout_rate must be in [0, 1), got {self.dropout_rate}")
        if self.conv_filters <= 0 or self.kernel_size <= 0:
            raise ValueError("conv_filters and kernel_size must be positive")
        if self.embedding_dim <= 0:
            raise ValueError(f"embedding_dim must be positive, got {self.embedding_dim}")
        if self.recurrent_units <= 0:
            raise ValueError(f"recurrent_units must be positive, got {self.recurrent_units}")


@dataclass(frozen=True)
class TrainingConfig:
    """Configuration for training hyperparameters.

    Attributes:
        batch_size: Number of samples per batch.
        epochs: Maximum number of training epochs.
        learning_rate: Optimizer learning rate.
        optimizer: Optimizer name.
        validation_split: Fraction of training data held out for validation.
        early_stopping_patience: Epochs to wait before early stopping.
        artifacts_dir: Directory to save model artifacts.
    """
    batch_size: int = 128
    epochs: int = 5
    learning_rate: float = 1e-3
    optimizer: str = "rmsprop"
    validation_split: float = 0.2
    early_stopping_patience: int = 3
    artifacts_dir: str = "artifacts"

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")
        if self.epochs <= 0:
            raise ValueError(f"epochs must be positive, got {self.epochs}")
        if self.learning_rate <= 0:
            raise ValueError(f"learning_rate must be positive, got {self.learning_rate}")
        if self.optimizer not in OPTIMIZERS:
            raise ValueError(f"optimizer must be one of {OPTIMIZERS}, got {self.optimizer!r}")
        if not 0 <= self.validation_split < 1:
            raise ValueError(
                f"validation_split must be in [0, 1), got {self.validation_split}"
            )


@dataclass
class ExperimentConfig:
    """Root configuration container.

    Attributes:
        data: Data configuration.
        model: Model architecture configuration.
        training: Training hyperparameters.
    """
    data: DataConfig
    model: ModelConfig
    training: TrainingConfig

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> ExperimentConfig:
        """Create ExperimentConfig from a dictionary.

        Args:
            config_dict: Mapping with optional "data", "model" and
                "training" sections.

        Returns:
            ExperimentConfig instance.
        """
        config_dict = config_dict or {}
        return cls(
            data=DataConfig(**config_dict.get("data", {})),
            model=ModelConfig(**config_dict.get("model", {})),
            training=TrainingConfig(**config_dict.get("training", {})),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a nested dictionary."""
        return {
            "data": asdict(self.data),
            "model": asdict(self.model),
            "training": asdict(self.training),
        }


def load_config(config_path: str | Path) -> ExperimentConfig:
    """Load configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file.

    Returns:
        ExperimentConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        yaml.YAMLError: If config file is invalid YAML.
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        config_dict = yaml.safe_load(f)

    return ExperimentConfig.from_dict(config_dict)
