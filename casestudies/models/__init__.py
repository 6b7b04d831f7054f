"""Model architecture declarations and builders."""

from casestudies.models.layers import LayerSpec, build_model, compile_model
from casestudies.models.registry import (
    Architecture,
    ArchitectureRegistry,
    get_architecture,
)

__all__ = [
    "LayerSpec",
    "build_model",
    "compile_model",
    "Architecture",
    "ArchitectureRegistry",
    "get_architecture",
]
