"""
Core Models Package

Catalog entities (frozen) and the session's mutable SelectionState.
"""

from .catalog import (
    Catalog,
    Floor,
    FloorKind,
    HotspotPoint,
    IconMode,
    Model,
    Option,
    OptionSet,
    Placement,
    infer_floor_kind,
)
from .selection import SelectionState

__all__ = [
    "Catalog",
    "Floor",
    "FloorKind",
    "HotspotPoint",
    "IconMode",
    "Model",
    "Option",
    "OptionSet",
    "Placement",
    "SelectionState",
    "infer_floor_kind",
]
