"""
Configurator package.

Selection resolution, incremental compositing, hotspots, markup
history and persistence, tied together by ConfiguratorSession.
"""

from .assets import AssetResolver, DirectoryAssetResolver
from .catalog_source import CatalogSource, DictCatalogSource, JsonCatalogSource
from .config import ConfiguratorConfig
from .history import AnnotationHistory
from .hotspots import HotspotGroup, HotspotMapper, HotspotPanel, HotspotTarget, TargetKind
from .markup import MarkupBoard, MarkupLine, MarkupPath, MarkupText
from .persistence import SelectionStore, storage_key
from .resolver import (
    ApplyResult,
    BlockedByTransitiveConflict,
    ConflictDetected,
    ConstraintResolver,
    Deselect,
    Rejection,
    RequiredByOthers,
    Select,
    apply_action,
)
from .review import FloorSummary, SetSummary, summarize
from .session import ConfiguratorSession

__all__ = [
    "AnnotationHistory",
    "ApplyResult",
    "AssetResolver",
    "BlockedByTransitiveConflict",
    "CatalogSource",
    "ConfiguratorConfig",
    "ConfiguratorSession",
    "ConflictDetected",
    "ConstraintResolver",
    "Deselect",
    "DictCatalogSource",
    "DirectoryAssetResolver",
    "FloorSummary",
    "HotspotGroup",
    "HotspotMapper",
    "HotspotPanel",
    "HotspotTarget",
    "JsonCatalogSource",
    "MarkupBoard",
    "MarkupLine",
    "MarkupPath",
    "MarkupText",
    "Rejection",
    "RequiredByOthers",
    "Select",
    "SelectionStore",
    "SetSummary",
    "TargetKind",
    "apply_action",
    "storage_key",
    "summarize",
]
