"""Configuration module for case-study experiments."""

from casestudies.configs.experiment_config import (
    DataConfig,
    ModelConfig,
    TrainingConfig,
    ExperimentConfig,
    load_config,
    PRESETS_DIR,
)

__all__ = [
    "DataConfig",
    "ModelConfig",
    "TrainingConfig",
    "ExperimentConfig",
    "load_config",
    "PRESETS_DIR",
]
