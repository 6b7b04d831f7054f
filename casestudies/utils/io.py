"""I/O utilities for experiment artifacts."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import numpy as np


def ensure_dir(path: str | Path) -> Path:
    """Ensure directory exists, creating if necessary.

    Args:
        path: Directory path.

    Returns:
        Path object for the directory.
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def _to_builtin(value: Any) -> Any:
    # Keras histories and metrics come back as NumPy scalars
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, np.ndarray):
        return value.tolist()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def save_json(data: Dict[str, Any], path: str | Path) -> Path:
    """Save data to a JSON file, converting NumPy values.

    Args:
        data: Dictionary to save.
        path: Output file path.

    Returns:
        Path of the written file.
    """
    path = Path(path)
    ensure_dir(path.parent)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, default=_to_builtin)
    return path


def load_json(path: str | Path) -> Dict[str, Any]:
    """Load data from JSON file.

    Raises:
        FileNotFoundError: If file doesn't exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"JSON file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
