"""Tests for the trainer, evaluation metrics and experiment pipeline."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
import yaml

from casestudies.configs import ExperimentConfig
from casestudies.data import DatasetSplits, one_hot_labels
from casestudies.evaluation import EvaluationResult, summarize_history
from casestudies.models import LayerSpec, build_model, compile_model
from casestudies.trainers import Trainer, TrainingResult
from casestudies.utils import load_json
import casestudies.train as train_module


def _tiny_config(artifacts_dir: Path, **training) -> ExperimentConfig:
    training = {"batch_size": 8, "epochs": 2, "artifacts_dir": str(artifacts_dir), **training}
    return ExperimentConfig.from_dict({"training": training})


def _tiny_model():
    model = build_model(
        [
            LayerSpec("dense", {"units": 4, "activation": "relu"}),
            LayerSpec("dense", {"units": 3, "activation": "softmax"}),
        ],
        input_shape=(6,),
        seed=0,
    )
    return compile_model(model, loss="categorical_crossentropy")


@pytest.fixture
def tiny_data():
    """Random 3-class data with 6 features."""
    rng = np.random.default_rng(0)
    x = rng.random((32, 6)).astype(np.float32)
    y = one_hot_labels(rng.integers(0, 3, size=32), 3)
    return x, y


class TestTrainingResult:
    """Tests for TrainingResult."""

    def test_epochs_trained(self) -> None:
        """Test epochs_trained counts loss entries."""
        result = TrainingResult(
            history={"loss": [1.0, 0.5, 0.4]},
            best_epoch=3,
            final_train_loss=0.4,
        )

        assert result.epochs_trained == 3


class TestTrainer:
    """Tests for Trainer."""

    def test_train_with_validation_split(self, tmp_path: Path, tiny_data) -> None:
        """Test training holds out a validation split and checkpoints."""
        x, y = tiny_data
        trainer = Trainer(_tiny_model(), _tiny_config(tmp_path, validation_split=0.25))

        result = trainer.train(x, y)

        assert 1 <= result.epochs_trained <= 2
        assert 1 <= result.best_epoch <= result.epochs_trained
        assert result.final_val_loss is not None
        assert "val_accuracy" in trainer.history
        assert (tmp_path / "checkpoint.keras").exists()

    def test_train_without_validation(self, tmp_path: Path, tiny_data) -> None:
        """Test training monitors the training loss when nothing is held out."""
        x, y = tiny_data
        trainer = Trainer(_tiny_model(), _tiny_config(tmp_path, validation_split=0.0))

        result = trainer.train(x, y, epochs=1)

        assert result.epochs_trained == 1
        assert result.best_epoch == 1
        assert result.final_val_loss is None

    def test_explicit_epochs_override_config(self, tmp_path: Path, tiny_data) -> None:
        """Test that an explicit epoch count wins over the configured one."""
        x, y = tiny_data
        trainer = Trainer(_tiny_model(), _tiny_config(tmp_path, validation_split=0.0))

        result = trainer.train(x, y, epochs=1)

        assert result.epochs_trained == 1

    def test_zero_epochs_rejected(self, tmp_path: Path, tiny_data) -> None:
        """Test that epochs=0 is rejected rather than replaced by the config."""
        x, y = tiny_data
        trainer = Trainer(_tiny_model(), _tiny_config(tmp_path))

        with pytest.raises(ValueError, match="epochs"):
            trainer.train(x, y, epochs=0)

        assert trainer.history is None

    def test_evaluate_and_save(self, tmp_path: Path, tiny_data) -> None:
        """Test evaluation metrics and model saving."""
        x, y = tiny_data
        trainer = Trainer(_tiny_model(), _tiny_config(tmp_path))

        evaluation = trainer.evaluate(x, y)
        path = trainer.save_model()

        assert 0.0 <= evaluation.accuracy <= 1.0
        assert evaluation.num_samples == 32
        assert Path(path).exists()


class TestMetrics:
    """Tests for evaluation metric helpers."""

    def test_evaluation_result_to_dict(self) -> None:
        """Test conversion to a JSON-ready dictionary."""
        result = EvaluationResult(loss=0.3, accuracy=0.9, num_samples=10)

        assert result.to_dict() == {"loss": 0.3, "accuracy": 0.9, "num_samples": 10}
        assert "accuracy: 0.9000" in str(result)

    def test_summarize_history(self) -> None:
        """Test best epochs minimize losses and maximize accuracies."""
        summary = summarize_history({
            "loss": [0.9, 0.5, 0.6],
            "accuracy": [0.5, 0.8, 0.7],
            "val_loss": [],
        })

        assert summary["loss"] == {"final": 0.6, "best": 0.5, "best_epoch": 2}
        assert summary["accuracy"]["best_epoch"] == 2
        assert summary["accuracy"]["final"] == 0.7
        assert "val_loss" not in summary


class TestExperimentPipeline:
    """End-to-end pipeline test on synthetic data."""

    def test_run_writes_reports(self, tmp_path: Path, monkeypatch) -> None:
        """Test a full run on tiny fake images."""
        rng = np.random.default_rng(0)
        splits = DatasetSplits(
            x_train=rng.integers(0, 256, size=(20, 8, 8), dtype=np.uint8),
            y_train=rng.integers(0, 10, size=20),
            x_test=rng.integers(0, 256, size=(6, 8, 8), dtype=np.uint8),
            y_test=rng.integers(0, 10, size=6),
        )
        monkeypatch.setattr(train_module, "load_dataset", lambda config: splits)

        artifacts = tmp_path / "artifacts"
        config_path = tmp_path / "config.yaml"
        config_path.write_text(yaml.safe_dump({
            "data": {"image_height": 8, "image_width": 8},
            "model": {"architecture": "dense", "hidden_units": 4},
            "training": {"epochs": 1, "batch_size": 4, "artifacts_dir": str(artifacts)},
        }))

        evaluation = train_module.ExperimentPipeline(config_path).run()

        assert evaluation.num_samples == 6
        metrics = load_json(artifacts / "metrics.json")
        assert metrics["architecture"] == "dense"
        assert metrics["epochs_trained"] == 1
        assert (artifacts / "history.json").exists()
        assert (artifacts / "config.json").exists()

    def test_mismatched_architecture(self, tmp_path: Path, monkeypatch) -> None:
        """Test that an architecture/representation mismatch is rejected."""
        splits = DatasetSplits(
            x_train=np.zeros((4, 8, 8), dtype=np.uint8),
            y_train=np.zeros(4, dtype=np.int64),
            x_test=np.zeros((2, 8, 8), dtype=np.uint8),
            y_test=np.zeros(2, dtype=np.int64),
        )
        monkeypatch.setattr(train_module, "load_dataset", lambda config: splits)

        config_path = tmp_path / "config.yaml"
        config_path.write_text(yaml.safe_dump({
            "data": {"image_height": 8, "image_width": 8, "representation": "flat"},
            "model": {"architecture": "cnn"},
            "training": {"artifacts_dir": str(tmp_path / "artifacts")},
        }))

        with pytest.raises(ValueError, match="expects 'channels'"):
            train_module.ExperimentPipeline(config_path).run()


class TestPrepareSplits:
    """Tests for prepare_splits."""

    def test_padded_text(self) -> None:
        """Test text splits are padded and labels kept as floats."""
        config = ExperimentConfig.from_dict({
            "data": {"dataset": "imdb", "representation": "padded", "max_length": 4},
        })
        splits = DatasetSplits(
            x_train=[[1, 2], [3, 4, 5, 6, 7]],
            y_train=np.array([0, 1]),
            x_test=[[9]],
            y_test=np.array([1]),
        )

        x_train, y_train, x_test, y_test = train_module.prepare_splits(config, splits)

        assert x_train.tolist() == [[1, 2, 0, 0], [4, 5, 6, 7]]
        assert y_train.dtype == np.float32
        assert x_test.tolist() == [[9, 0, 0, 0]]

    def test_bag_of_words_text(self) -> None:
        """Test text splits are vectorized over the vocabulary bound."""
        config = ExperimentConfig.from_dict({
            "data": {"dataset": "imdb", "representation": "bag_of_words", "vocab_size": 5},
        })
        splits = DatasetSplits(
            x_train=[[1, 1, 4]],
            y_train=np.array([1]),
            x_test=[[0]],
            y_test=np.array([0]),
        )

        x_train, _, x_test, _ = train_module.prepare_splits(config, splits)

        assert x_train.tolist() == [[0.0, 1.0, 0.0, 0.0, 1.0]]
        assert x_test.shape == (1, 5)
