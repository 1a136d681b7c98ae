"""
Utils Package

Serialization functions for the catalog and the selection state.
"""

from .serialization import (
    serialize_catalog,
    deserialize_catalog,
    serialize_selection,
    deserialize_selection,
    selection_to_json,
    selection_from_json,
)

__all__ = [
    "serialize_catalog",
    "deserialize_catalog",
    "serialize_selection",
    "deserialize_selection",
    "selection_to_json",
    "selection_from_json",
]
