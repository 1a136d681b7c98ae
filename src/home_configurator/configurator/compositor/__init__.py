"""
Compositor package: scene model, async image loading, incremental
floor rendering and Pillow flattening.
"""

from .compositor import NO_FLOOR_PLAN_MESSAGE, SELECT_TO_PREVIEW_MESSAGE, Compositor
from .loader import ImageLoader, PillowImageLoader
from .renderer import flatten, make_hotspot_icon, snapshot
from .scene import (
    BackgroundMetrics,
    Layer,
    LayerKind,
    LayerRecord,
    Scene,
    ViewportTransform,
    hotspot_layer_id,
    overlay_layer_id,
)

__all__ = [
    "BackgroundMetrics",
    "Compositor",
    "ImageLoader",
    "Layer",
    "LayerKind",
    "LayerRecord",
    "NO_FLOOR_PLAN_MESSAGE",
    "PillowImageLoader",
    "SELECT_TO_PREVIEW_MESSAGE",
    "Scene",
    "ViewportTransform",
    "flatten",
    "hotspot_layer_id",
    "make_hotspot_icon",
    "overlay_layer_id",
    "snapshot",
]
