"""Dataset loading.

This module wraps the Keras dataset helpers that supply the raw
handwritten-digit images and tokenized movie reviews.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

import numpy as np
import tensorflow as tf

from casestudies.configs import DataConfig

logger = logging.getLogger(__name__)

# Ids the IMDB loader reserves ahead of real words
PAD_INDEX = 0
START_INDEX = 1
OOV_INDEX = 2


@dataclass
class DatasetSplits:
    """Container for train/test splits.

    Attributes:
        x_train: Training inputs.
        y_train: Training labels.
        x_test: Test inputs.
        y_test: Test labels.
    """
    x_train: np.ndarray
    y_train: np.ndarray
    x_test: np.ndarray
    y_test: np.ndarray

    @property
    def num_train(self) -> int:
        """Number of training samples."""
        return len(self.x_train)

    @property
    def num_test(self) -> int:
        """Number of test samples."""
        return len(self.x_test)

    def subsample(self, limit: int, seed: int) -> "DatasetSplits":
        """Draw at most ``limit`` samples from each split.

        Args:
            limit: Maximum samples per split.
            seed: Seed for the selection.

        Returns:
            New DatasetSplits; sample order within a split is preserved.
        """
        rng = np.random.default_rng(seed)

        def pick(count: int) -> np.ndarray:
            if count <= limit:
                return np.arange(count)
            return np.sort(rng.choice(count, size=limit, replace=False))

        train_idx = pick(self.num_train)
        test_idx = pick(self.num_test)
        return DatasetSplits(
            x_train=self.x_train[train_idx],
            y_train=self.y_train[train_idx],
            x_test=self.x_test[test_idx],
            y_test=self.y_test[test_idx],
        )


def load_mnist() -> DatasetSplits:
    """Load the MNIST handwritten-digit dataset.

    Returns:
        Splits of uint8 images (count, 28, 28) and digit labels 0-9.
    """
    (x_train, y_train), (x_test, y_test) = tf.keras.datasets.mnist.load_data()
    logger.info(
        f"Loaded MNIST: {len(x_train)} train / {len(x_test)} test images"
    )
    return DatasetSplits(x_train, y_train, x_test, y_test)


def load_imdb(vocab_size: int) -> DatasetSplits:
    """Load the IMDB movie-review sentiment dataset.

    Words outside the ``vocab_size`` most frequent ones are collapsed to
    the out-of-vocabulary id by the loader.

    Args:
        vocab_size: Number of most frequent words to keep.

    Returns:
        Splits of variable-length id sequences and binary labels.
    """
    (x_train, y_train), (x_test, y_test) = tf.keras.datasets.imdb.load_data(
        num_words=vocab_size,
        oov_char=OOV_INDEX,
    )
    logger.info(
        f"Loaded IMDB (vocab_size={vocab_size}): "
        f"{len(x_train)} train / {len(x_test)} test reviews"
    )
    return DatasetSplits(x_train, y_train, x_test, y_test)


def load_dataset(config: DataConfig) -> DatasetSplits:
    """Load the dataset named by a data configuration.

    Args:
        config: Data configuration.

    Returns:
        Dataset splits, subsampled when ``config.sample_limit`` is set.

    Raises:
        ValueError: If the dataset name is unknown.
    """
    if config.dataset == "mnist":
        splits = load_mnist()
    elif config.dataset == "imdb":
        splits = load_imdb(config.vocab_size)
    else:
        raise ValueError(f"Unknown dataset: {config.dataset}")

    if config.sample_limit is not None:
        splits = splits.subsample(config.sample_limit, config.random_seed)
        logger.info(
            f"Subsampled to {splits.num_train} train / {splits.num_test} test"
        )
    return splits


def decode_review(
    sequence: Sequence[int],
    word_index: Optional[Dict[str, int]] = None,
    index_from: int = 3,
) -> str:
    """Decode an IMDB id sequence back to text.

    Args:
        sequence: Word ids as produced by ``load_imdb``.
        word_index: Word to rank mapping (fetched from Keras if None).
        index_from: Offset the loader added to every word rank.

    Returns:
        Space-separated words; reserved ids render as "?" and padding
        is skipped.
    """
    if word_index is None:
        word_index = tf.keras.datasets.imdb.get_word_index()

    reverse_index = {rank + index_from: word for word, rank in word_index.items()}

    words = []
    for idx in sequence:
        idx = int(idx)
        if idx == PAD_INDEX:
            continue
        words.append(reverse_index.get(idx, "?"))
    return " ".join(words)
