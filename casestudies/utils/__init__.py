"""Utility functions."""

from casestudies.utils.io import save_json, load_json, ensure_dir
from casestudies.utils.logging import setup_logging, get_logger
from casestudies.utils.seeding import set_global_seed

__all__ = [
    "save_json",
    "load_json",
    "ensure_dir",
    "setup_logging",
    "get_logger",
    "set_global_seed",
]
