"""Split registry package: saved ratios and their editing buffer."""

from split_calculator.registry.editor import SplitEditor
from split_calculator.registry.registry import (
    DEFAULT_SPLITS,
    DEFAULT_STORAGE_KEY,
    SplitRegistry,
    deserialize_splits,
    serialize_splits,
)

__all__ = [
    "DEFAULT_SPLITS",
    "DEFAULT_STORAGE_KEY",
    "SplitEditor",
    "SplitRegistry",
    "deserialize_splits",
    "serialize_splits",
]
