"""
Module: configurator.compositor.scene

Purpose:
    The compositor's scene model: background placement, materialized
    layers, the layer side table and the viewport transform. Pure data
    plus bookkeeping; no loading and no painting.

Key Classes:
    - BackgroundMetrics: Where the background sits on the canvas
    - ViewportTransform: Zoom/pan with clamped zoom
    - LayerKind, LayerRecord: Side-table entry identifying a layer
    - Layer: A materialized image layer with its canvas box
    - Scene: Ordered layers plus background state

Dependencies:
    - PIL.Image: Layer images
    - configurator.config: Zoom limits

Used By:
    - configurator.compositor.compositor: Sole writer
    - configurator.compositor.renderer: Painting
    - gui.widgets.plan_canvas: Display
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple

from PIL import Image

from home_configurator.core.models.catalog import HotspotPoint, Placement


@dataclass(frozen=True)
class BackgroundMetrics:
    """
    Placement of the background image on the canvas.

    Attributes:
        offset_x: Left edge of the background, canvas pixels
        offset_y: Top edge of the background, canvas pixels
        scale: Source-to-canvas scale factor
        width: Rendered background width, canvas pixels
        height: Rendered background height, canvas pixels
    """
    offset_x: float
    offset_y: float
    scale: float
    width: float
    height: float

    @classmethod
    def fit(cls, image_size: Tuple[int, int], canvas_size: Tuple[int, int]) -> BackgroundMetrics:
        """
        Fit an image inside the canvas, preserving aspect ratio, centred.

        Example:
            >>> BackgroundMetrics.fit((2000, 1000), (1000, 800))
            BackgroundMetrics(offset_x=0.0, offset_y=150.0, scale=0.5, width=1000.0, height=500.0)
        """
        image_w, image_h = image_size
        canvas_w, canvas_h = canvas_size
        if image_w <= 0 or image_h <= 0:
            return cls.full_canvas(canvas_size)
        scale = min(canvas_w / image_w, canvas_h / image_h)
        width = image_w * scale
        height = image_h * scale
        return cls(
            offset_x=(canvas_w - width) / 2,
            offset_y=(canvas_h - height) / 2,
            scale=scale,
            width=width,
            height=height,
        )

    @classmethod
    def full_canvas(cls, canvas_size: Tuple[int, int]) -> BackgroundMetrics:
        """Metrics covering the whole canvas, used for placeholders."""
        return cls(0.0, 0.0, 1.0, float(canvas_size[0]), float(canvas_size[1]))

    def place(self, placement: Placement) -> Tuple[float, float, float, float]:
        """Canvas box (left, top, width, height) of a percent placement."""
        return (
            self.offset_x + (placement.x / 100) * self.width,
            self.offset_y + (placement.y / 100) * self.height,
            (placement.width / 100) * self.width,
            (placement.height / 100) * self.height,
        )

    def point(self, hotspot: HotspotPoint) -> Tuple[float, float]:
        """Canvas position of a percent coordinate."""
        return (
            self.offset_x + (hotspot.x / 100) * self.width,
            self.offset_y + (hotspot.y / 100) * self.height,
        )

    @property
    def box(self) -> Tuple[float, float, float, float]:
        """(left, top, right, bottom) of the background on the canvas."""
        return (
            self.offset_x,
            self.offset_y,
            self.offset_x + self.width,
            self.offset_y + self.height,
        )


@dataclass
class ViewportTransform:
    """
    Zoom and pan applied on top of the scene.

    Canvas point p maps to screen point `p * zoom + (pan_x, pan_y)`,
    the same layout as a 2D affine [zoom, 0, 0, zoom, pan_x, pan_y].
    """
    min_zoom: float = 0.2
    max_zoom: float = 5.0
    zoom: float = 1.0
    pan_x: float = 0.0
    pan_y: float = 0.0

    def reset(self) -> None:
        self.zoom = 1.0
        self.pan_x = 0.0
        self.pan_y = 0.0

    @property
    def is_identity(self) -> bool:
        return self.zoom == 1.0 and self.pan_x == 0.0 and self.pan_y == 0.0

    def clamp(self, zoom: float) -> float:
        return max(self.min_zoom, min(self.max_zoom, zoom))

    def zoom_to_point(self, x: float, y: float, zoom: float) -> None:
        """Zoom to `zoom` keeping the screen point (x, y) fixed."""
        new_zoom = self.clamp(zoom)
        # Scene point under the cursor must stay under the cursor
        scene_x = (x - self.pan_x) / self.zoom
        scene_y = (y - self.pan_y) / self.zoom
        self.zoom = new_zoom
        self.pan_x = x - scene_x * new_zoom
        self.pan_y = y - scene_y * new_zoom

    def zoom_by(self, factor: float, center: Tuple[float, float]) -> None:
        self.zoom_to_point(center[0], center[1], self.zoom * factor)

    def wheel(self, delta_y: float, x: float, y: float) -> None:
        """Mouse-wheel zoom: each wheel unit scales by 0.999."""
        self.zoom_to_point(x, y, self.zoom * (0.999 ** delta_y))

    def pan(self, dx: float, dy: float) -> None:
        self.pan_x += dx
        self.pan_y += dy

    def to_screen(self, x: float, y: float) -> Tuple[float, float]:
        return (x * self.zoom + self.pan_x, y * self.zoom + self.pan_y)

    def to_scene(self, x: float, y: float) -> Tuple[float, float]:
        return ((x - self.pan_x) / self.zoom, (y - self.pan_y) / self.zoom)

    def as_matrix(self) -> Tuple[float, float, float, float, float, float]:
        return (self.zoom, 0.0, 0.0, self.zoom, self.pan_x, self.pan_y)


class LayerKind(str, Enum):
    """What produced a layer."""
    OVERLAY = "overlay"          # Option image in its placement rectangle
    ELEVATION = "elevation"      # Full-bleed elevation image
    HOTSPOT = "hotspot"          # Clickable entry-point icon
    PLACEHOLDER = "placeholder"  # Message shown when no background exists

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class LayerRecord:
    """
    Side-table entry describing a materialized layer.

    The compositor identifies its layers through these records only,
    never through attributes on whatever displays them.
    """
    layer_id: str
    kind: LayerKind
    option_id: Optional[int] = None
    layer_order: int = 0
    hotspot_key: Optional[str] = None


@dataclass
class Layer:
    """
    A materialized layer.

    Attributes:
        record: Side-table entry
        image: Source image (unscaled); None for text placeholders
        left, top: Canvas position of the top-left corner
        width, height: Rendered size on the canvas
        text: Placeholder message
    """
    record: LayerRecord
    image: Optional[Image.Image]
    left: float
    top: float
    width: float
    height: float
    text: str = ""

    @property
    def layer_id(self) -> str:
        return self.record.layer_id

    @property
    def scale_x(self) -> float:
        if self.image is None:
            return 1.0
        return self.width / (self.image.width or 1)

    @property
    def scale_y(self) -> float:
        if self.image is None:
            return 1.0
        return self.height / (self.image.height or 1)


def overlay_layer_id(option_id: int) -> str:
    return f"option:{option_id}"


def hotspot_layer_id(key: str) -> str:
    return f"hotspot:{key}"


@dataclass
class Scene:
    """
    Layered 2D scene for one floor.

    Paint order is: background, `layers` in list order, then hotspot
    layers. Markup is painted above everything by whoever owns it.
    """
    canvas_size: Tuple[int, int]
    background: Optional[Image.Image] = None
    background_ref: Optional[str] = None
    background_color: str = "#ffffff"
    metrics: Optional[BackgroundMetrics] = None
    floor_id: Optional[int] = None
    layers: List[Layer] = field(default_factory=list)
    hotspots: List[Layer] = field(default_factory=list)
    records: Dict[str, LayerRecord] = field(default_factory=dict)
    viewport: ViewportTransform = field(default_factory=ViewportTransform)

    # ─────────────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────────────

    def layer_ids(self) -> Set[str]:
        return set(self.records)

    def option_ids(self) -> Set[int]:
        """Option ids with a materialized overlay or elevation layer."""
        return {
            r.option_id for r in self.records.values()
            if r.option_id is not None and r.kind in (LayerKind.OVERLAY, LayerKind.ELEVATION)
        }

    def find(self, layer_id: str) -> Optional[Layer]:
        for layer in self.layers + self.hotspots:
            if layer.layer_id == layer_id:
                return layer
        return None

    def hotspot_at(self, x: float, y: float) -> Optional[str]:
        """Hotspot key whose icon contains canvas point (x, y), topmost first."""
        for layer in reversed(self.hotspots):
            if layer.left <= x <= layer.left + layer.width and layer.top <= y <= layer.top + layer.height:
                return layer.record.hotspot_key
        return None

    # ─────────────────────────────────────────────────────────────────────────
    # Mutation
    # ─────────────────────────────────────────────────────────────────────────

    def add_layer(self, layer: Layer) -> None:
        if layer.layer_id in self.records:
            raise ValueError(f"Layer already materialized: {layer.layer_id}")
        self.records[layer.layer_id] = layer.record
        if layer.record.kind is LayerKind.HOTSPOT:
            self.hotspots.append(layer)
        else:
            self.layers.append(layer)

    def remove_layer(self, layer_id: str) -> None:
        self.records.pop(layer_id, None)
        self.layers = [l for l in self.layers if l.layer_id != layer_id]
        self.hotspots = [l for l in self.hotspots if l.layer_id != layer_id]

    def clear_hotspots(self) -> None:
        for layer in self.hotspots:
            self.records.pop(layer.layer_id, None)
        self.hotspots = []

    def clear_layers(self) -> None:
        """Drop every compositor-owned layer (overlays, placeholders, hotspots)."""
        self.layers = []
        self.hotspots = []
        self.records = {}

    def sort_layers(self) -> None:
        """Stable sort by layer_order; ties keep insertion order."""
        self.layers.sort(key=lambda l: l.record.layer_order)
