"""Data module for case-study experiments."""

from casestudies.data.errors import (
    PreparationError,
    ShapeMismatchError,
    LabelOutOfRangeError,
    VocabularyBoundError,
    EmptyInputError,
    IntensityRangeError,
)
from casestudies.data.images import ImageTensorPreparer, normalize_intensities
from casestudies.data.labels import one_hot_labels, decode_one_hot
from casestudies.data.text import BagOfWordsVectorizer, SequencePadder
from casestudies.data.loaders import DatasetSplits, load_dataset, decode_review

__all__ = [
    "PreparationError",
    "ShapeMismatchError",
    "LabelOutOfRangeError",
    "VocabularyBoundError",
    "EmptyInputError",
    "IntensityRangeError",
    "ImageTensorPreparer",
    "normalize_intensities",
    "one_hot_labels",
    "decode_one_hot",
    "BagOfWordsVectorizer",
    "SequencePadder",
    "DatasetSplits",
    "load_dataset",
    "decode_review",
]
