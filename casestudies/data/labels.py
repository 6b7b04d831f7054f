"""Class label encoding."""

from __future__ import annotations

import numpy as np

from casestudies.data.errors import (
    EmptyInputError,
    LabelOutOfRangeError,
    ShapeMismatchError,
)


def _as_label_vector(labels) -> np.ndarray:
    labels = np.asarray(labels)
    if labels.ndim == 2 and labels.shape[1] == 1:
        labels = labels.reshape(-1)
    if labels.ndim != 1:
        raise ShapeMismatchError(
            f"Expected a 1-D label vector, got shape {labels.shape}"
        )
    if labels.shape[0] == 0:
        raise EmptyInputError("Label vector contains no samples")
    if not np.issubdtype(labels.dtype, np.integer):
        if not np.issubdtype(labels.dtype, np.number):
            raise LabelOutOfRangeError(
                f"Labels must be integers, got dtype {labels.dtype}"
            )
        if not np.all(np.isfinite(labels)) or np.any(labels != np.round(labels)):
            raise LabelOutOfRangeError("Labels must be integral values")
        labels = labels.astype(np.int64)
    return labels


def one_hot_labels(labels, num_classes: int) -> np.ndarray:
    """Encode integer class labels as a one-hot matrix.

    Row ``i`` holds a single 1.0 at column ``labels[i]``; columns follow
    natural class order ``0..num_classes-1``.

    Args:
        labels: Vector of N integer labels (an (N, 1) column is accepted).
        num_classes: Number of classes K.

    Returns:
        Float32 matrix of shape (N, K).

    Raises:
        ValueError: If num_classes is less than 1.
        ShapeMismatchError: If labels is not a vector.
        EmptyInputError: If labels is empty.
        LabelOutOfRangeError: If any label is outside [0, K) or not integral.
    """
    if num_classes < 1:
        raise ValueError(f"num_classes must be positive, got {num_classes}")

    labels = _as_label_vector(labels)

    out_of_range = (labels < 0) | (labels >= num_classes)
    if np.any(out_of_range):
        position = int(np.argmax(out_of_range))
        raise LabelOutOfRangeError(
            f"Label {labels[position]} at index {position} is outside "
            f"[0, {num_classes})"
        )

    encoded = np.zeros((labels.shape[0], num_classes), dtype=np.float32)
    encoded[np.arange(labels.shape[0]), labels] = 1.0
    return encoded


def decode_one_hot(matrix) -> np.ndarray:
    """Recover integer labels from a one-hot (or probability) matrix.

    Args:
        matrix: Array of shape (N, K).

    Returns:
        Int64 vector of column indices of each row's maximum.

    Raises:
        ShapeMismatchError: If matrix is not 2-D.
        EmptyInputError: If matrix has no rows.
    """
    matrix = np.asarray(matrix)
    if matrix.ndim != 2:
        raise ShapeMismatchError(
            f"Expected a 2-D matrix, got shape {matrix.shape}"
        )
    if matrix.shape[0] == 0:
        raise EmptyInputError("Matrix contains no rows")
    return np.argmax(matrix, axis=1).astype(np.int64)
