"""Image tensor preparation.

This module normalizes raw grayscale image batches and reshapes them
into the tensor layout a given model family declares as its input.
"""

from __future__ import annotations

import logging
from typing import Tuple

import numpy as np

from casestudies.data.errors import (
    EmptyInputError,
    IntensityRangeError,
    ShapeMismatchError,
)

logger = logging.getLogger(__name__)

MAX_INTENSITY = 255.0

LAYOUTS = ("flat", "channels")


def normalize_intensities(images: np.ndarray) -> np.ndarray:
    """Rescale raw intensities from [0, 255] to [0.0, 1.0].

    Args:
        images: Array of raw intensities of any shape.

    Returns:
        New float32 array of the same shape.

    Raises:
        IntensityRangeError: If any value is non-finite or outside [0, 255].
    """
    images = np.asarray(images)
    if not np.issubdtype(images.dtype, np.number) or np.issubdtype(
        images.dtype, np.complexfloating
    ):
        raise IntensityRangeError(
            f"Pixel intensities must be real numbers, got dtype {images.dtype}"
        )
    if not np.all(np.isfinite(images)):
        raise IntensityRangeError("Pixel intensities must be finite")
    if images.size and (images.min() < 0 or images.max() > MAX_INTENSITY):
        raise IntensityRangeError(
            f"Pixel intensities must be in [0, 255], got range "
            f"[{images.min()}, {images.max()}]"
        )
    return images.astype(np.float32) / MAX_INTENSITY


class ImageTensorPreparer:
    """Prepares grayscale image batches for model input.

    Normalizes intensities and reshapes a ``(count, height, width)`` batch
    into either a flat ``(count, height * width)`` tensor for densely
    connected models or a channel-preserving ``(count, height, width, 1)``
    tensor for convolutional models.

    Attributes:
        height: Expected image height.
        width: Expected image width.
        layout: Target layout, "flat" or "channels".

    Example:
        >>> preparer = ImageTensorPreparer(28, 28, layout="flat")
        >>> x = preparer.prepare(np.full((2, 28, 28), 255, dtype=np.uint8))
        >>> x.shape
        (2, 784)
    """

    def __init__(
        self,
        height: int = 28,
        width: int = 28,
        layout: str = "flat",
    ) -> None:
        """Initialize the preparer.

        Args:
            height: Expected image height.
            width: Expected image width.
            layout: Target layout, "flat" or "channels".

        Raises:
            ValueError: If the geometry or layout is invalid.
        """
        if height <= 0 or width <= 0:
            raise ValueError(
                f"Image geometry must be positive, got {height}x{width}"
            )
        if layout not in LAYOUTS:
            raise ValueError(
                f"layout must be one of {LAYOUTS}, got {layout!r}"
            )
        self._height = height
        self._width = width
        self._layout = layout

    @property
    def height(self) -> int:
        """Expected image height."""
        return self._height

    @property
    def width(self) -> int:
        """Expected image width."""
        return self._width

    @property
    def layout(self) -> str:
        """Target tensor layout."""
        return self._layout

    @property
    def flat_width(self) -> int:
        """Number of values per sample."""
        return self._height * self._width

    @property
    def input_shape(self) -> Tuple[int, ...]:
        """Per-sample shape of prepared tensors."""
        if self._layout == "flat":
            return (self.flat_width,)
        return (self._height, self._width, 1)

    def _validate_batch(self, images: np.ndarray) -> None:
        if images.ndim != 3:
            raise ShapeMismatchError(
                f"Expected image batch of rank 3 (count, height, width), "
                f"got shape {images.shape}"
            )
        if images.shape[0] == 0:
            raise EmptyInputError("Image batch contains no samples")
        if images.shape[1:] != (self._height, self._width):
            raise ShapeMismatchError(
                f"Expected {self._height}x{self._width} images, "
                f"got {images.shape[1]}x{images.shape[2]}"
            )

    def prepare(self, images: np.ndarray) -> np.ndarray:
        """Normalize and reshape an image batch.

        Args:
            images: Raw batch of shape (count, height, width).

        Returns:
            Float32 tensor in the configured layout.

        Raises:
            ShapeMismatchError: If the batch rank or geometry is wrong.
            EmptyInputError: If the batch is empty.
            IntensityRangeError: If intensities are outside [0, 255].
        """
        images = np.asarray(images)
        self._validate_batch(images)

        normalized = normalize_intensities(images)
        prepared = normalized.reshape((images.shape[0], *self.input_shape))

        logger.info(
            f"Prepared {images.shape[0]} images: "
            f"{images.shape} -> {prepared.shape}"
        )
        return prepared

    def restore(self, tensor: np.ndarray) -> np.ndarray:
        """Reshape a prepared tensor back to (count, height, width).

        Args:
            tensor: Tensor in the configured layout.

        Returns:
            Array of shape (count, height, width). Values are not rescaled.

        Raises:
            ShapeMismatchError: If the tensor does not match the layout.
            EmptyInputError: If the tensor is empty.
        """
        tensor = np.asarray(tensor)
        if tensor.ndim == 0 or tensor.shape[1:] != self.input_shape:
            raise ShapeMismatchError(
                f"Expected tensor of shape (count, *{self.input_shape}), "
                f"got {tensor.shape}"
            )
        if tensor.shape[0] == 0:
            raise EmptyInputError("Tensor contains no samples")
        return tensor.reshape((tensor.shape[0], self._height, self._width))
