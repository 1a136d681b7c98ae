"""
Home Configurator Core Package

Shared data models, schemas and serialization used by the configurator
and the GUI shell.

The catalog models are frozen dataclasses: the catalog is a read-only
snapshot for the lifetime of a session. SelectionState is the one
mutable model, and only the constraint resolver writes to it.
"""

from .errors import (
    CatalogFetchError,
    ConfiguratorError,
    ImageLoadError,
    UnknownFloorError,
    UnknownModelError,
    UnknownOptionError,
)
from .models import (
    Catalog,
    Floor,
    FloorKind,
    HotspotPoint,
    IconMode,
    Model,
    Option,
    OptionSet,
    Placement,
    SelectionState,
)

__all__ = [
    "CatalogFetchError",
    "ConfiguratorError",
    "ImageLoadError",
    "UnknownFloorError",
    "UnknownModelError",
    "UnknownOptionError",
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
]
