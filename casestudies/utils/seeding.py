"""Process-wide random seeding."""

from __future__ import annotations

import logging
import random

import numpy as np
import tensorflow as tf

logger = logging.getLogger(__name__)


def set_global_seed(seed: int) -> None:
    """Seed Python, NumPy and TensorFlow random generators.

    Model initializers and dataset subsampling take their seeds
    explicitly; this covers framework internals such as batch shuffling.

    Args:
        seed: Seed value.
    """
    random.seed(seed)
    np.random.seed(seed)
    tf.random.set_seed(seed)
    logger.info(f"Global random seed set to {seed}")
