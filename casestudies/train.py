"""Training entrypoint for a case-study experiment.

This script orchestrates one experiment:
1. Load configuration from YAML
2. Load the raw dataset
3. Prepare fixed-shape tensors
4. Build, compile and train the model
5. Evaluate and save artifacts

Usage:
    python -m casestudies.train --config casestudies/configs/mnist_cnn.yaml
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Tuple

import numpy as np

from casestudies.configs import ExperimentConfig, PRESETS_DIR, load_config
from casestudies.data import (
    BagOfWordsVectorizer,
    DatasetSplits,
    ImageTensorPreparer,
    SequencePadder,
    load_dataset,
    one_hot_labels,
)
from casestudies.evaluation import EvaluationResult, summarize_history
from casestudies.models import build_model, compile_model, get_architecture
from casestudies.trainers import Trainer, TrainingResult
from casestudies.utils import (
    ensure_dir,
    get_logger,
    save_json,
    set_global_seed,
    setup_logging,
)

logger = get_logger(__name__)

PreparedSplits = Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]


def prepare_splits(config: ExperimentConfig, splits: DatasetSplits) -> PreparedSplits:
    """Turn raw dataset splits into model-ready tensors.

    Args:
        config: Experiment configuration.
        splits: Raw dataset splits.

    Returns:
        Tuple of (x_train, y_train, x_test, y_test).
    """
    cfg = config.data

    if cfg.representation in ("flat", "channels"):
        preparer = ImageTensorPreparer(
            height=cfg.image_height,
            width=cfg.image_width,
            layout=cfg.representation,
        )
        return (
            preparer.prepare(splits.x_train),
            one_hot_labels(splits.y_train, cfg.num_classes),
            preparer.prepare(splits.x_test),
            one_hot_labels(splits.y_test, cfg.num_classes),
        )

    if cfg.representation == "bag_of_words":
        encoder = BagOfWordsVectorizer(
            vocab_size=cfg.vocab_size,
            oov_policy=cfg.oov_policy,
            show_progress=True,
        )
        encode = encoder.vectorize
    else:
        padder = SequencePadder(
            max_length=cfg.max_length,
            truncating=cfg.truncating,
            show_progress=True,
        )
        encode = padder.pad

    # Sentiment labels stay as a {0, 1} column for the sigmoid output
    return (
        encode(splits.x_train),
        np.asarray(splits.y_train, dtype=np.float32),
        encode(splits.x_test),
        np.asarray(splits.y_test, dtype=np.float32),
    )


class ExperimentPipeline:
    """Orchestrates one case-study experiment.

    Example:
        >>> pipeline = ExperimentPipeline("casestudies/configs/imdb_bow.yaml")
        >>> evaluation = pipeline.run()
    """

    def __init__(self, config_path: str | Path) -> None:
        """Initialize the pipeline.

        Args:
            config_path: Path to YAML configuration file.
        """
        self._config_path = Path(config_path)
        self._config: ExperimentConfig | None = None
        self._artifacts_dir: Path | None = None

    def _setup(self) -> None:
        """Setup the experiment environment."""
        setup_logging()
        self._config = load_config(self._config_path)
        logger.info(f"Loaded configuration from {self._config_path}")

        self._artifacts_dir = ensure_dir(self._config.training.artifacts_dir)
        logger.info(f"Artifacts will be saved to {self._artifacts_dir}")

        set_global_seed(self._config.data.random_seed)
        save_json(self._config.to_dict(), self._artifacts_dir / "config.json")

    def _build_model(self, input_shape: Tuple[int, ...]):
        """Build and compile the configured architecture."""
        cfg = self._config
        architecture = get_architecture(cfg.model.architecture)
        if architecture.representation != cfg.data.representation:
            raise ValueError(
                f"Architecture '{architecture.name}' expects "
                f"'{architecture.representation}' inputs, data is prepared as "
                f"'{cfg.data.representation}'"
            )

        model = build_model(
            architecture.layer_specs(cfg.model, cfg.data),
            input_shape=input_shape,
            seed=cfg.data.random_seed,
            name=architecture.name,
        )
        compile_model(
            model,
            loss=architecture.loss,
            optimizer=cfg.training.optimizer,
            learning_rate=cfg.training.learning_rate,
        )
        model.summary(print_fn=lambda line, **_: logger.info(line))
        return model

    def _save_reports(
        self,
        training: TrainingResult,
        evaluation: EvaluationResult,
    ) -> None:
        """Write history and metrics for the reporting layer."""
        save_json(training.history, self._artifacts_dir / "history.json")
        save_json(
            {
                "architecture": self._config.model.architecture,
                "test": evaluation.to_dict(),
                "best_epoch": training.best_epoch,
                "epochs_trained": training.epochs_trained,
                "history_summary": summarize_history(training.history),
                "model_path": training.model_path,
            },
            self._artifacts_dir / "metrics.json",
        )

    def run(self) -> EvaluationResult:
        """Execute the full experiment.

        Returns:
            Test-set evaluation.
        """
        self._setup()
        cfg = self._config

        logger.info("=" * 60)
        logger.info(
            f"Starting experiment: {cfg.data.dataset} / {cfg.model.architecture}"
        )
        logger.info("=" * 60)

        splits = load_dataset(cfg.data)
        x_train, y_train, x_test, y_test = prepare_splits(cfg, splits)

        model = self._build_model(x_train.shape[1:])

        trainer = Trainer(model, cfg, artifacts_dir=str(self._artifacts_dir))
        training = trainer.train(x_train, y_train)
        training.model_path = trainer.save_model()

        evaluation = trainer.evaluate(x_test, y_test)
        self._save_reports(training, evaluation)

        logger.info("=" * 60)
        logger.info("Experiment complete!")
        logger.info(f"Best epoch: {training.best_epoch}")
        logger.info(f"Test accuracy: {evaluation.accuracy:.4f}")
        logger.info("=" * 60)

        return evaluation


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Train and evaluate a case-study model",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=str,
        default=str(PRESETS_DIR / "mnist_dense.yaml"),
        help="Path to configuration YAML file",
    )

    return parser.parse_args()


def main() -> None:
    """Main entry point."""
    args = parse_args()

    pipeline = ExperimentPipeline(args.config)
    pipeline.run()


if __name__ == "__main__":
    main()
