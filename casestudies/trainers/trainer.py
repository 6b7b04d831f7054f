"""Model trainer abstraction.

This module provides a high-level training interface over prepared
in-memory tensors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import numpy as np
import tensorflow as tf

from casestudies.configs import ExperimentConfig
from casestudies.evaluation import EvaluationResult

logger = logging.getLogger(__name__)


@dataclass
class TrainingResult:
    """Container for training results.

    Attributes:
        history: Training history dictionary.
        best_epoch: Epoch with best monitored loss.
        final_train_loss: Final training loss.
        final_val_loss: Final validation loss.
        model_path: Path to saved model.
    """
    history: Dict[str, List[float]]
    best_epoch: int
    final_train_loss: float
    final_val_loss: Optional[float] = None
    model_path: Optional[str] = None

    @property
    def epochs_trained(self) -> int:
        """Number of epochs trained."""
        return len(self.history.get("loss", []))


class CallbackFactory:
    """Factory for creating training callbacks.

    Creates commonly used Keras callbacks with
    sensible defaults.
    """

    @staticmethod
    def model_checkpoint(
        filepath: str,
        monitor: str = "val_loss",
        save_best_only: bool = True,
    ) -> tf.keras.callbacks.ModelCheckpoint:
        """Create model checkpoint callback."""
        return tf.keras.callbacks.ModelCheckpoint(
            filepath=filepath,
            monitor=monitor,
            save_best_only=save_best_only,
            verbose=0,
        )

    @staticmethod
    def early_stopping(
        patience: int = 3,
        monitor: str = "val_loss",
        restore_best_weights: bool = True,
    ) -> tf.keras.callbacks.EarlyStopping:
        """Create early stopping callback."""
        return tf.keras.callbacks.EarlyStopping(
            patience=patience,
            monitor=monitor,
            restore_best_weights=restore_best_weights,
            verbose=1,
        )


class Trainer:
    """High-level trainer for case-study models.

    Wraps ``fit``/``evaluate`` with callbacks, logging, and model saving.

    Example:
        >>> trainer = Trainer(model, config)
        >>> result = trainer.train(x_train, y_train)
        >>> trainer.evaluate(x_test, y_test).accuracy
    """

    def __init__(
        self,
        model: tf.keras.Model,
        config: ExperimentConfig,
        artifacts_dir: Optional[str] = None,
    ) -> None:
        """Initialize trainer.

        Args:
            model: Compiled Keras model.
            config: Experiment configuration.
            artifacts_dir: Directory for saving artifacts.
        """
        self._model = model
        self._config = config
        self._artifacts_dir = Path(
            artifacts_dir or config.training.artifacts_dir
        )
        self._artifacts_dir.mkdir(parents=True, exist_ok=True)

        self._history: Optional[tf.keras.callbacks.History] = None

    @property
    def model(self) -> tf.keras.Model:
        """Get the model being trained."""
        return self._model

    @property
    def artifacts_dir(self) -> Path:
        """Directory for saved artifacts."""
        return self._artifacts_dir

    @property
    def history(self) -> Optional[Dict[str, List[float]]]:
        """Get training history."""
        if self._history is None:
            return None
        return self._history.history

    def _create_callbacks(
        self,
        monitor: str,
        extra_callbacks: Optional[List[tf.keras.callbacks.Callback]] = None,
    ) -> List[tf.keras.callbacks.Callback]:
        cfg = self._config.training
        checkpoint_path = str(self._artifacts_dir / "checkpoint.keras")

        callbacks = [
            CallbackFactory.model_checkpoint(checkpoint_path, monitor=monitor),
            CallbackFactory.early_stopping(
                patience=cfg.early_stopping_patience,
                monitor=monitor,
            ),
        ]
        if extra_callbacks:
            callbacks.extend(extra_callbacks)
        return callbacks

    def train(
        self,
        x: np.ndarray,
        y: np.ndarray,
        validation_data: Optional[Tuple[np.ndarray, np.ndarray]] = None,
        epochs: Optional[int] = None,
        extra_callbacks: Optional[List[tf.keras.callbacks.Callback]] = None,
    ) -> TrainingResult:
        """Train the model.

        Without ``validation_data`` the configured ``validation_split`` of
        the training tensors is held out.

        Args:
            x: Prepared training inputs.
            y: Training targets.
            validation_data: Optional explicit (x, y) validation pair.
            epochs: Number of epochs (uses config if not provided).
            extra_callbacks: Additional callbacks.

        Returns:
            TrainingResult with training metrics.

        Raises:
            ValueError: If epochs is less than 1.
        """
        cfg = self._config.training
        if epochs is None:
            epochs = cfg.epochs
        if epochs < 1:
            raise ValueError(f"epochs must be positive, got {epochs}")
        validation_split = 0.0 if validation_data is not None else cfg.validation_split
        has_validation = validation_data is not None or validation_split > 0
        monitor = "val_loss" if has_validation else "loss"
        callbacks = self._create_callbacks(monitor, extra_callbacks)

        logger.info(
            f"Starting training for {epochs} epochs on {len(x)} samples, "
            f"batch_size={cfg.batch_size}"
        )

        self._history = self._model.fit(
            x,
            y,
            batch_size=cfg.batch_size,
            epochs=epochs,
            validation_split=validation_split,
            validation_data=validation_data,
            callbacks=callbacks,
            verbose=1,
        )

        history = self._history.history
        monitored = history.get(monitor, history.get("loss", []))
        best_epoch = int(tf.argmin(monitored).numpy()) + 1

        result = TrainingResult(
            history=history,
            best_epoch=best_epoch,
            final_train_loss=history["loss"][-1],
            final_val_loss=history.get("val_loss", [None])[-1],
        )

        logger.info(
            f"Training complete. Best epoch: {best_epoch}, "
            f"Final loss: {result.final_train_loss:.4f}"
        )

        return result

    def evaluate(self, x: np.ndarray, y: np.ndarray) -> EvaluationResult:
        """Evaluate the model on held-out data.

        Args:
            x: Prepared test inputs.
            y: Test targets.

        Returns:
            EvaluationResult with loss and accuracy.
        """
        scores = self._model.evaluate(
            x,
            y,
            batch_size=self._config.training.batch_size,
            verbose=0,
            return_dict=True,
        )
        result = EvaluationResult(
            loss=float(scores["loss"]),
            accuracy=float(scores["accuracy"]),
            num_samples=len(x),
        )
        logger.info(f"Evaluation: {result}")
        return result

    def save_model(self, filename: str = "model_final.keras") -> str:
        """Save the trained model.

        Args:
            filename: Output filename.

        Returns:
            Path to saved model.
        """
        output_path = self._artifacts_dir / filename
        self._model.save(str(output_path))
        logger.info(f"Saved model to {output_path}")
        return str(output_path)
