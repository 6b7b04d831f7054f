"""Declarative layer specifications.

Architectures are declared as an ordered list of ``LayerSpec`` records
and turned into Keras models by ``build_model``. Every stochastic
component receives an explicit seed derived from the experiment seed and
the layer's position, so two builds with the same seed start from
identical weights regardless of what else ran in the process.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Sequence, Tuple

import tensorflow as tf

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayerSpec:
    """A single layer in an architecture declaration.

    Attributes:
        kind: Layer kind (see ``LAYER_BUILDERS``).
        params: Keyword arguments for the layer.
    """
    kind: str
    params: Dict[str, Any] = field(default_factory=dict)


def _dense(params: Dict[str, Any], seed: int) -> tf.keras.layers.Layer:
    return tf.keras.layers.Dense(
        kernel_initializer=tf.keras.initializers.GlorotUniform(seed=seed),
        **params,
    )


def _dropout(params: Dict[str, Any], seed: int) -> tf.keras.layers.Layer:
    return tf.keras.layers.Dropout(seed=seed, **params)


def _flatten(params: Dict[str, Any], seed: int) -> tf.keras.layers.Layer:
    return tf.keras.layers.Flatten(**params)


def _conv2d(params: Dict[str, Any], seed: int) -> tf.keras.layers.Layer:
    return tf.keras.layers.Conv2D(
        kernel_initializer=tf.keras.initializers.GlorotUniform(seed=seed),
        **params,
    )


def _max_pooling2d(params: Dict[str, Any], seed: int) -> tf.keras.layers.Layer:
    return tf.keras.layers.MaxPooling2D(**params)


def _embedding(params: Dict[str, Any], seed: int) -> tf.keras.layers.Layer:
    return tf.keras.layers.Embedding(
        embeddings_initializer=tf.keras.initializers.RandomUniform(
            minval=-0.05, maxval=0.05, seed=seed
        ),
        **params,
    )


def _lstm(params: Dict[str, Any], seed: int) -> tf.keras.layers.Layer:
    return tf.keras.layers.LSTM(
        kernel_initializer=tf.keras.initializers.GlorotUniform(seed=seed),
        recurrent_initializer=tf.keras.initializers.Orthogonal(seed=seed),
        **params,
    )


LAYER_BUILDERS: Dict[str, Callable[[Dict[str, Any], int], tf.keras.layers.Layer]] = {
    "dense": _dense,
    "dropout": _dropout,
    "flatten": _flatten,
    "conv2d": _conv2d,
    "max_pooling2d": _max_pooling2d,
    "embedding": _embedding,
    "lstm": _lstm,
}


def build_model(
    specs: Sequence[LayerSpec],
    input_shape: Tuple[int, ...],
    seed: int,
    name: str = "model",
) -> tf.keras.Model:
    """Build an uncompiled sequential model from layer specifications.

    Args:
        specs: Ordered layer specifications.
        input_shape: Per-sample input shape.
        seed: Base seed; layer ``i`` is seeded with ``seed + i``.
        name: Model name.

    Returns:
        Keras Sequential model.

    Raises:
        ValueError: If specs is empty.
        KeyError: If a layer kind is unknown.
    """
    if not specs:
        raise ValueError("An architecture needs at least one layer")

    layers: List[tf.keras.layers.Layer] = [tf.keras.Input(shape=input_shape)]
    for index, spec in enumerate(specs):
        if spec.kind not in LAYER_BUILDERS:
            available = ", ".join(LAYER_BUILDERS)
            raise KeyError(
                f"Unknown layer kind: {spec.kind}. Available: {available}"
            )
        layers.append(LAYER_BUILDERS[spec.kind](dict(spec.params), seed + index))

    model = tf.keras.Sequential(layers, name=name)
    logger.info(
        f"Built model '{name}' with {len(specs)} layers, "
        f"input_shape={tuple(input_shape)}"
    )
    return model


OPTIMIZER_CLASSES = {
    "rmsprop": tf.keras.optimizers.RMSprop,
    "adam": tf.keras.optimizers.Adam,
    "sgd": tf.keras.optimizers.SGD,
}


def compile_model(
    model: tf.keras.Model,
    loss: str,
    optimizer: str = "rmsprop",
    learning_rate: float = 1e-3,
) -> tf.keras.Model:
    """Compile a model with an accuracy metric.

    Args:
        model: Model to compile.
        loss: Keras loss name.
        optimizer: Optimizer name ("rmsprop", "adam" or "sgd").
        learning_rate: Optimizer learning rate.

    Returns:
        The compiled model.
    """
    if optimizer not in OPTIMIZER_CLASSES:
        raise KeyError(f"Unknown optimizer: {optimizer}")

    model.compile(
        optimizer=OPTIMIZER_CLASSES[optimizer](learning_rate=learning_rate),
        loss=loss,
        metrics=["accuracy"],
    )
    return model
