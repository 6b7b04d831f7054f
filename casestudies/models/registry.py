"""Architecture registry.

This module implements the registry pattern for model architectures,
allowing registration and lookup of architecture declarations by name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from casestudies.configs import DataConfig, ModelConfig
from casestudies.models.layers import LayerSpec

logger = logging.getLogger(__name__)

LayerFactory = Callable[[ModelConfig, DataConfig], List[LayerSpec]]


@dataclass(frozen=True)
class Architecture:
    """An architecture declaration.

    Attributes:
        name: Registered name.
        representation: Input representation the first layer expects.
        loss: Keras loss name matching the output layer.
        layers: Callable producing the layer specs from the model and
            data configurations.
    """
    name: str
    representation: str
    loss: str
    layers: LayerFactory

    def layer_specs(self, model: ModelConfig, data: DataConfig) -> List[LayerSpec]:
        """Produce the ordered layer specifications."""
        return self.layers(model, data)


def dense_layers(model: ModelConfig, data: DataConfig) -> List[LayerSpec]:
    """Feed-forward classifier over flattened images."""
    return [
        LayerSpec("dense", {"units": model.hidden_units, "activation": "relu"}),
        LayerSpec("dropout", {"rate": model.dropout_rate}),
        LayerSpec("dense", {"units": data.num_classes, "activation": "softmax"}),
    ]


def cnn_layers(model: ModelConfig, data: DataConfig) -> List[LayerSpec]:
    """Two convolution blocks followed by a dense classifier."""
    kernel = (model.kernel_size, model.kernel_size)
    return [
        LayerSpec("conv2d", {"filters": model.conv_filters, "kernel_size": kernel, "activation": "relu"}),
        LayerSpec("max_pooling2d", {"pool_size": (2, 2)}),
        LayerSpec("conv2d", {"filters": model.conv_filters * 2, "kernel_size": kernel, "activation": "relu"}),
        LayerSpec("max_pooling2d", {"pool_size": (2, 2)}),
        LayerSpec("flatten"),
        LayerSpec("dense", {"units": model.hidden_units, "activation": "relu"}),
        LayerSpec("dense", {"units": data.num_classes, "activation": "softmax"}),
    ]


def bow_dense_layers(model: ModelConfig, data: DataConfig) -> List[LayerSpec]:
    """Binary classifier over bag-of-words vectors."""
    return [
        LayerSpec("dense", {"units": model.hidden_units, "activation": "relu"}),
        LayerSpec("dense", {"units": model.hidden_units, "activation": "relu"}),
        LayerSpec("dense", {"units": 1, "activation": "sigmoid"}),
    ]


def lstm_layers(model: ModelConfig, data: DataConfig) -> List[LayerSpec]:
    """Embedding and LSTM binary classifier over padded sequences."""
    return [
        LayerSpec("embedding", {"input_dim": data.vocab_size, "output_dim": model.embedding_dim}),
        LayerSpec("lstm", {"units": model.recurrent_units}),
        LayerSpec("dense", {"units": 1, "activation": "sigmoid"}),
    ]


class ArchitectureRegistry:
    """Registry for architecture declarations.

    Example:
        >>> registry = ArchitectureRegistry()
        >>> registry.get("cnn").representation
        'channels'
    """

    _instance: Optional["ArchitectureRegistry"] = None

    def __new__(cls) -> "ArchitectureRegistry":
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._architectures = {}
            cls._instance._initialized = False
        return cls._instance

    def __init__(self) -> None:
        """Initialize the registry."""
        if not self._initialized:
            self._architectures: Dict[str, Architecture] = {}
            self._initialized = True
            self._register_defaults()

    def _register_defaults(self) -> None:
        """Register the built-in architectures."""
        self.register(Architecture("dense", "flat", "categorical_crossentropy", dense_layers))
        self.register(Architecture("cnn", "channels", "categorical_crossentropy", cnn_layers))
        self.register(Architecture("bow_dense", "bag_of_words", "binary_crossentropy", bow_dense_layers))
        self.register(Architecture("lstm", "padded", "binary_crossentropy", lstm_layers))

    def register(self, architecture: Architecture) -> None:
        """Register an architecture under its name.

        Args:
            architecture: Architecture declaration.

        Raises:
            TypeError: If architecture is not an Architecture.
        """
        if not isinstance(architecture, Architecture):
            raise TypeError(
                f"architecture must be an Architecture, got {type(architecture)}"
            )
        self._architectures[architecture.name] = architecture
        logger.debug(f"Registered architecture: {architecture.name}")

    def get(self, name: str) -> Architecture:
        """Look up an architecture by name.

        Raises:
            KeyError: If the name is not registered.
        """
        if name not in self._architectures:
            available = ", ".join(self._architectures)
            raise KeyError(f"Unknown architecture: {name}. Available: {available}")
        return self._architectures[name]

    def list_available(self) -> list[str]:
        """List all registered architecture names."""
        return list(self._architectures)

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance (for testing)."""
        cls._instance = None


def get_architecture(name: str) -> Architecture:
    """Look up a registered architecture by name."""
    return ArchitectureRegistry().get(name)
