"""Tests for image tensor preparation."""

from __future__ import annotations

import numpy as np
import pytest

from casestudies.data import (
    EmptyInputError,
    ImageTensorPreparer,
    IntensityRangeError,
    ShapeMismatchError,
    normalize_intensities,
)


@pytest.fixture
def batch() -> np.ndarray:
    """Deterministic uint8 batch of three 28x28 images."""
    rng = np.random.default_rng(0)
    return rng.integers(0, 256, size=(3, 28, 28), dtype=np.uint8)


class TestNormalizeIntensities:
    """Tests for normalize_intensities."""

    def test_every_intensity_divided_by_255(self) -> None:
        """Test that each value v maps to v / 255."""
        values = np.arange(256, dtype=np.uint8)

        result = normalize_intensities(values)

        assert result.dtype == np.float32
        assert np.allclose(result, values / 255.0)
        assert result.min() == 0.0
        assert result.max() == 1.0

    def test_normalized_values_stay_in_unit_range(self) -> None:
        """Test that normalizing an already-normalized batch stays in [0, 1]."""
        values = np.linspace(0.0, 1.0, 11)

        result = normalize_intensities(values)

        assert np.all((result >= 0.0) & (result <= 1.0))

    def test_out_of_range_raises(self) -> None:
        """Test that intensities above 255 are rejected."""
        with pytest.raises(IntensityRangeError):
            normalize_intensities(np.array([0, 256]))

    def test_negative_raises(self) -> None:
        """Test that negative intensities are rejected."""
        with pytest.raises(IntensityRangeError):
            normalize_intensities(np.array([-1, 10]))

    @pytest.mark.parametrize("bad_value", [np.nan, np.inf, -np.inf])
    def test_non_finite_raises(self, bad_value: float) -> None:
        """Test that NaN and infinite intensities are rejected."""
        with pytest.raises(IntensityRangeError):
            normalize_intensities(np.array([0.0, bad_value, 255.0]))

    def test_non_numeric_raises(self) -> None:
        """Test that non-numeric arrays are rejected."""
        with pytest.raises(IntensityRangeError):
            normalize_intensities(np.array(["0", "255"]))

    def test_input_not_mutated(self) -> None:
        """Test that the source array is left untouched."""
        values = np.array([0, 128, 255], dtype=np.uint8)

        normalize_intensities(values)

        assert values.tolist() == [0, 128, 255]


class TestImageTensorPreparer:
    """Tests for ImageTensorPreparer."""

    def test_all_white_batch_flat(self) -> None:
        """Test the all-255 batch becomes ones of shape (2, 784)."""
        images = np.full((2, 28, 28), 255, dtype=np.uint8)

        result = ImageTensorPreparer(28, 28, layout="flat").prepare(images)

        assert result.shape == (2, 784)
        assert np.all(result == 1.0)

    def test_channels_layout(self, batch: np.ndarray) -> None:
        """Test the channel-preserving layout adds a trailing axis of 1."""
        preparer = ImageTensorPreparer(28, 28, layout="channels")

        result = preparer.prepare(batch)

        assert result.shape == (3, 28, 28, 1)
        assert preparer.input_shape == (28, 28, 1)
        assert np.allclose(result[..., 0], batch / 255.0)

    def test_element_count_and_row_order_preserved(self, batch: np.ndarray) -> None:
        """Test that reshaping keeps every value in its sample row."""
        result = ImageTensorPreparer(28, 28).prepare(batch)

        assert result.size == batch.size
        for i in range(batch.shape[0]):
            assert np.allclose(result[i], batch[i].reshape(-1) / 255.0)

    def test_restore_reconstructs_batch(self, batch: np.ndarray) -> None:
        """Test that restore(prepare(x)) * 255 reconstructs x exactly."""
        for layout in ("flat", "channels"):
            preparer = ImageTensorPreparer(28, 28, layout=layout)

            restored = preparer.restore(preparer.prepare(batch))

            assert restored.shape == batch.shape
            assert np.array_equal(np.rint(restored * 255).astype(np.uint8), batch)

    def test_non_square_geometry(self) -> None:
        """Test preparation with a non-square image size."""
        images = np.zeros((4, 5, 7), dtype=np.uint8)

        result = ImageTensorPreparer(5, 7).prepare(images)

        assert result.shape == (4, 35)

    def test_wrong_geometry_raises(self, batch: np.ndarray) -> None:
        """Test that images of the wrong size are rejected."""
        with pytest.raises(ShapeMismatchError):
            ImageTensorPreparer(32, 32).prepare(batch)

    def test_wrong_rank_raises(self) -> None:
        """Test that an already-flattened batch is rejected."""
        flat = np.zeros((2, 784), dtype=np.uint8)

        with pytest.raises(ShapeMismatchError):
            ImageTensorPreparer(28, 28).prepare(flat)

    def test_channel_batch_rejected(self) -> None:
        """Test that a rank-4 batch is rejected."""
        with pytest.raises(ShapeMismatchError):
            ImageTensorPreparer(28, 28).prepare(np.zeros((2, 28, 28, 1)))

    def test_nan_pixel_rejected(self) -> None:
        """Test that a batch with a NaN pixel fails as a whole."""
        images = np.zeros((2, 2, 2))
        images[0, 0, 0] = np.nan

        with pytest.raises(IntensityRangeError):
            ImageTensorPreparer(2, 2).prepare(images)

    def test_empty_batch_raises(self) -> None:
        """Test that a batch with no samples is rejected."""
        with pytest.raises(EmptyInputError):
            ImageTensorPreparer(28, 28).prepare(np.zeros((0, 28, 28)))

    def test_restore_wrong_layout_raises(self, batch: np.ndarray) -> None:
        """Test that restore rejects a tensor from the other layout."""
        channels = ImageTensorPreparer(28, 28, layout="channels").prepare(batch)

        with pytest.raises(ShapeMismatchError):
            ImageTensorPreparer(28, 28, layout="flat").restore(channels)

    def test_invalid_layout(self) -> None:
        """Test that an unknown layout is rejected at construction."""
        with pytest.raises(ValueError):
            ImageTensorPreparer(28, 28, layout="planar")

    def test_errors_are_value_errors(self) -> None:
        """Test that preparation errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            ImageTensorPreparer(28, 28).prepare(np.zeros((1, 3, 3)))
