"""Token sequence vectorization.

This module converts variable-length sequences of word ids into
fixed-width numeric matrices, either as bounded-vocabulary bag-of-words
vectors or as padded/truncated id sequences for embedding models.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

import numpy as np
from tqdm import tqdm

from casestudies.data.errors import EmptyInputError, VocabularyBoundError

logger = logging.getLogger(__name__)

OOV_POLICIES = ("ignore", "error", "collapse")
TRUNCATING_POLICIES = ("pre", "post")

INT32_MIN = int(np.iinfo(np.int32).min)
INT32_MAX = int(np.iinfo(np.int32).max)

# Id reserved for out-of-vocabulary words by the IMDB loader
DEFAULT_OOV_INDEX = 2


def _as_id_array(seq: Sequence[int], row: int) -> np.ndarray:
    ids = np.asarray(seq).reshape(-1)
    if ids.size == 0:
        return ids.astype(np.int64)
    if np.issubdtype(ids.dtype, np.unsignedinteger) and ids.max() > np.iinfo(np.int64).max:
        raise VocabularyBoundError(
            f"Token ids in sample {row} exceed the 64-bit integer range"
        )
    if np.issubdtype(ids.dtype, np.integer):
        return ids.astype(np.int64)
    if (
        not np.issubdtype(ids.dtype, np.number)
        or np.issubdtype(ids.dtype, np.complexfloating)
    ):
        raise VocabularyBoundError(
            f"Token ids in sample {row} must be integers, got dtype {ids.dtype}"
        )
    if not np.all(np.isfinite(ids)) or np.any(ids != np.round(ids)):
        raise VocabularyBoundError(
            f"Token ids in sample {row} must be integral values"
        )
    if np.any(np.abs(ids) >= 2.0 ** 63):
        raise VocabularyBoundError(
            f"Token ids in sample {row} exceed the 64-bit integer range"
        )
    return ids.astype(np.int64)


def _as_sequence_list(sequences: Sequence[Sequence[int]]) -> List[np.ndarray]:
    if len(sequences) == 0:
        raise EmptyInputError("Sequence collection contains no samples")
    return [_as_id_array(seq, row) for row, seq in enumerate(sequences)]


class BagOfWordsVectorizer:
    """Binary bag-of-words vectorizer over a bounded vocabulary.

    Each sequence becomes a row of length ``vocab_size`` holding 1.0 at
    every id present in the sequence. Order and multiplicity are discarded.

    Ids outside ``[0, vocab_size)`` are handled by ``oov_policy``:

    - ``"ignore"``: dropped, with a warning reporting how many were dropped.
    - ``"error"``: ``VocabularyBoundError`` is raised.
    - ``"collapse"``: counted as an occurrence of ``oov_index``.

    Example:
        >>> vectorizer = BagOfWordsVectorizer(vocab_size=10)
        >>> vectorizer.vectorize([[3, 7, 3, 9]])[0].nonzero()[0].tolist()
        [3, 7, 9]
    """

    def __init__(
        self,
        vocab_size: int,
        oov_policy: str = "ignore",
        oov_index: int = DEFAULT_OOV_INDEX,
        show_progress: bool = False,
    ) -> None:
        """Initialize the vectorizer.

        Args:
            vocab_size: Vocabulary bound V (number of output columns).
            oov_policy: One of "ignore", "error", "collapse".
            oov_index: Column used by the "collapse" policy.
            show_progress: Whether to display a progress bar.

        Raises:
            ValueError: If any argument is invalid.
        """
        if vocab_size < 1:
            raise ValueError(f"vocab_size must be positive, got {vocab_size}")
        if oov_policy not in OOV_POLICIES:
            raise ValueError(
                f"oov_policy must be one of {OOV_POLICIES}, got {oov_policy!r}"
            )
        if oov_policy == "collapse" and not 0 <= oov_index < vocab_size:
            raise ValueError(
                f"oov_index must be in [0, {vocab_size}), got {oov_index}"
            )
        self._vocab_size = vocab_size
        self._oov_policy = oov_policy
        self._oov_index = oov_index
        self._show_progress = show_progress

    @property
    def vocab_size(self) -> int:
        """Vocabulary bound."""
        return self._vocab_size

    @property
    def oov_policy(self) -> str:
        """Out-of-vocabulary policy."""
        return self._oov_policy

    def _check_bounds(self, sequences: List[np.ndarray]) -> None:
        for row, seq in enumerate(sequences):
            outside = (seq < 0) | (seq >= self._vocab_size)
            if np.any(outside):
                token = int(seq[np.argmax(outside)])
                raise VocabularyBoundError(
                    f"Token id {token} in sample {row} is outside "
                    f"[0, {self._vocab_size})"
                )

    def vectorize(self, sequences: Sequence[Sequence[int]]) -> np.ndarray:
        """Vectorize a collection of token id sequences.

        Args:
            sequences: N variable-length sequences of integer ids.

        Returns:
            Float32 matrix of shape (N, vocab_size) with entries in {0, 1}.

        Raises:
            EmptyInputError: If the collection is empty.
            VocabularyBoundError: If an id is not integral, or the policy
                is "error" and an id is out of range.
        """
        sequences = _as_sequence_list(sequences)
        if self._oov_policy == "error":
            self._check_bounds(sequences)

        matrix = np.zeros((len(sequences), self._vocab_size), dtype=np.float32)
        dropped = 0

        for row, seq in enumerate(
            tqdm(sequences, desc="Vectorizing", disable=not self._show_progress)
        ):
            inside = (seq >= 0) & (seq < self._vocab_size)
            matrix[row, seq[inside]] = 1.0
            outside = int(seq.size - np.count_nonzero(inside))
            if outside:
                if self._oov_policy == "collapse":
                    matrix[row, self._oov_index] = 1.0
                else:
                    dropped += outside

        if dropped:
            logger.warning(
                f"Dropped {dropped} token ids outside vocabulary bound "
                f"{self._vocab_size}"
            )
        logger.info(f"Vectorized {len(sequences)} sequences to {matrix.shape}")
        return matrix


class SequencePadder:
    """Pads or truncates sequences to a fixed length.

    Shorter sequences are right-padded with ``value``. Longer sequences are
    truncated according to ``truncating``: ``"pre"`` discards tokens from
    the front and keeps the trailing ``max_length`` tokens, ``"post"``
    keeps the leading ones.

    Example:
        >>> SequencePadder(3).pad([[1, 2, 3, 4, 5]]).tolist()
        [[3, 4, 5]]
        >>> SequencePadder(7).pad([[1, 2, 3, 4, 5]]).tolist()
        [[1, 2, 3, 4, 5, 0, 0]]
    """

    def __init__(
        self,
        max_length: int,
        truncating: str = "pre",
        value: int = 0,
        show_progress: bool = False,
    ) -> None:
        """Initialize the padder.

        Args:
            max_length: Target length L.
            truncating: Truncation side, "pre" or "post".
            value: Filler id used for padding.
            show_progress: Whether to display a progress bar.

        Raises:
            ValueError: If max_length, truncating or value is invalid.
        """
        if max_length < 1:
            raise ValueError(f"max_length must be positive, got {max_length}")
        if truncating not in TRUNCATING_POLICIES:
            raise ValueError(
                f"truncating must be one of {TRUNCATING_POLICIES}, "
                f"got {truncating!r}"
            )
        if not INT32_MIN <= value <= INT32_MAX:
            raise ValueError(f"value must fit in int32, got {value}")
        self._max_length = max_length
        self._truncating = truncating
        self._value = value
        self._show_progress = show_progress

    @property
    def max_length(self) -> int:
        """Target sequence length."""
        return self._max_length

    @property
    def truncating(self) -> str:
        """Truncation side."""
        return self._truncating

    def pad(self, sequences: Sequence[Sequence[int]]) -> np.ndarray:
        """Pad or truncate every sequence to ``max_length``.

        Args:
            sequences: N variable-length sequences of integer ids.

        Returns:
            Int32 matrix of shape (N, max_length).

        Raises:
            EmptyInputError: If the collection is empty.
            VocabularyBoundError: If an id is not integral or does not fit
                in int32.
        """
        sequences = _as_sequence_list(sequences)
        for row, seq in enumerate(sequences):
            outside = (seq < INT32_MIN) | (seq > INT32_MAX)
            if np.any(outside):
                raise VocabularyBoundError(
                    f"Token id {int(seq[np.argmax(outside)])} in sample {row} "
                    f"does not fit in int32"
                )

        padded = np.full(
            (len(sequences), self._max_length), self._value, dtype=np.int32
        )
        truncated = 0

        for row, seq in enumerate(
            tqdm(sequences, desc="Padding", disable=not self._show_progress)
        ):
            if seq.size > self._max_length:
                truncated += 1
                if self._truncating == "pre":
                    seq = seq[-self._max_length:]
                else:
                    seq = seq[:self._max_length]
            padded[row, :seq.size] = seq

        logger.info(
            f"Padded {len(sequences)} sequences to length {self._max_length} "
            f"({truncated} truncated)"
        )
        return padded
