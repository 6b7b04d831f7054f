"""Errors raised by the data preparation transforms.

Every transform validates its input on entry and raises one of these
before producing any output, so a call either succeeds for the whole
batch or fails for the whole batch.
"""

from __future__ import annotations


class PreparationError(ValueError):
    """Base class for data preparation failures."""


class ShapeMismatchError(PreparationError):
    """Input array rank or dimensions do not match the requested shape."""


class LabelOutOfRangeError(PreparationError):
    """A class label lies outside ``[0, num_classes)`` or is not integral."""


class VocabularyBoundError(PreparationError):
    """A token id lies outside ``[0, vocab_size)``."""


class EmptyInputError(PreparationError):
    """A sample collection is empty where at least one sample is required."""


class IntensityRangeError(PreparationError):
    """A raw pixel intensity lies outside ``[0, 255]``."""
