"""
Module: configurator.compositor.renderer

Purpose:
    Paints a Scene (plus markup) into a single Pillow image, and crops
    review snapshots around the plan.

Key Functions:
    - flatten(): Scene -> RGBA image
    - snapshot(): Flattened plan area with padding, hotspots hidden
    - make_hotspot_icon(): The gear-style hotspot marker

Dependencies:
    - PIL: Image, ImageDraw, ImageFont
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from ..markup import MarkupItem, MarkupLine, MarkupPath, MarkupText, markup_bounds
from .scene import Layer, Scene, ViewportTransform

logger = logging.getLogger(__name__)

HOTSPOT_FILL = "#f28c28"
HOTSPOT_RING = "#ffffff"
PLACEHOLDER_TEXT_COLOR = "#666666"
PLACEHOLDER_FONT_SIZE = 24


def make_hotspot_icon(size: int) -> Image.Image:
    """Filled disc with a ring and hub, drawn at `size` x `size`."""
    icon = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(icon)
    ring = max(2, size // 12)
    draw.ellipse((0, 0, size - 1, size - 1), fill=HOTSPOT_FILL, outline=HOTSPOT_RING, width=ring)
    hub = size // 4
    draw.ellipse((hub, hub, size - 1 - hub, size - 1 - hub), outline=HOTSPOT_RING, width=ring)
    return icon


def flatten(
    scene: Scene,
    markup: Iterable[MarkupItem] = (),
    *,
    include_hotspots: bool = True,
    apply_viewport: bool = False,
) -> Image.Image:
    """
    Paint the scene into an RGBA image the size of the canvas.

    Order: background, layers, hotspots, markup.

    Args:
        scene: Scene to paint (not modified)
        markup: Annotation items, canvas coordinates
        include_hotspots: Paint hotspot icons
        apply_viewport: Apply the scene's zoom/pan, as shown on screen

    Returns:
        New RGBA image
    """
    canvas = Image.new("RGBA", scene.canvas_size, scene.background_color)

    if scene.background is not None and scene.metrics is not None:
        m = scene.metrics
        _paste(canvas, scene.background, m.offset_x, m.offset_y, m.width, m.height)

    for layer in scene.layers:
        _paint_layer(canvas, layer)

    if include_hotspots:
        for layer in scene.hotspots:
            _paint_layer(canvas, layer)

    draw = ImageDraw.Draw(canvas)
    for item in markup:
        _draw_markup(draw, item)

    if apply_viewport and not scene.viewport.is_identity:
        canvas = _apply_viewport(canvas, scene.viewport, scene.background_color)

    return canvas


def snapshot(
    scene: Scene,
    markup: Iterable[MarkupItem] = (),
    *,
    padding: int = 20,
) -> Image.Image:
    """
    Crop of the flattened plan for review pages.

    Covers the background area and any markup outside it, plus padding,
    clamped to the canvas. Hotspots are hidden and the viewport ignored.
    """
    items = list(markup)
    image = flatten(scene, items, include_hotspots=False)

    width, height = scene.canvas_size
    if scene.metrics is not None:
        left, top, right, bottom = scene.metrics.box
    else:
        left, top, right, bottom = 0.0, 0.0, float(width), float(height)

    extents = markup_bounds(items)
    if extents is not None:
        left = min(left, extents[0])
        top = min(top, extents[1])
        right = max(right, extents[2])
        bottom = max(bottom, extents[3])

    box = (
        max(0, int(left - padding)),
        max(0, int(top - padding)),
        min(width, int(right + padding + 0.5)),
        min(height, int(bottom + padding + 0.5)),
    )
    return image.crop(box)


# ─────────────────────────────────────────────────────────────────────────────
# Painting helpers
# ─────────────────────────────────────────────────────────────────────────────

def _paint_layer(canvas: Image.Image, layer: Layer) -> None:
    if layer.image is not None:
        _paste(canvas, layer.image, layer.left, layer.top, layer.width, layer.height)
    elif layer.text:
        _draw_centered_text(canvas, layer.text, _box(layer.left, layer.top, layer.width, layer.height))


def _paste(
    canvas: Image.Image,
    image: Image.Image,
    left: float,
    top: float,
    width: float,
    height: float,
) -> None:
    size = (max(1, round(width)), max(1, round(height)))
    if image.size != size:
        image = image.resize(size, Image.Resampling.LANCZOS)
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    # The canvas is opaque, so a masked paste equals "over" compositing
    canvas.paste(image, (round(left), round(top)), image)


def _box(left: float, top: float, width: float, height: float) -> Tuple[int, int, int, int]:
    return (round(left), round(top), round(left + width), round(top + height))


def _draw_centered_text(canvas: Image.Image, text: str, box: Tuple[int, int, int, int]) -> None:
    draw = ImageDraw.Draw(canvas)
    font = _load_font(PLACEHOLDER_FONT_SIZE)
    text_bbox = draw.textbbox((0, 0), text, font=font)
    x = box[0] + (box[2] - box[0] - (text_bbox[2] - text_bbox[0])) // 2
    y = box[1] + (box[3] - box[1] - (text_bbox[3] - text_bbox[1])) // 2
    draw.text((x, y), text, fill=PLACEHOLDER_TEXT_COLOR, font=font)


def _draw_markup(draw: ImageDraw.ImageDraw, item: MarkupItem) -> None:
    if isinstance(item, MarkupLine):
        draw.line((item.x1, item.y1, item.x2, item.y2), fill=item.color, width=item.width)
    elif isinstance(item, MarkupPath):
        if len(item.points) == 1:
            (x, y), r = item.points[0], item.width / 2
            draw.ellipse((x - r, y - r, x + r, y + r), fill=item.color)
        else:
            draw.line(list(item.points), fill=item.color, width=item.width, joint="curve")
    elif isinstance(item, MarkupText):
        draw.text((item.x, item.y), item.text, fill=item.color, font=_load_font(item.font_size))


def _apply_viewport(canvas: Image.Image, viewport: ViewportTransform, fill: str) -> Image.Image:
    # Image.transform maps output pixels back to input pixels
    zoom = viewport.zoom
    inverse = (1 / zoom, 0, -viewport.pan_x / zoom, 0, 1 / zoom, -viewport.pan_y / zoom)
    return canvas.transform(
        canvas.size,
        Image.Transform.AFFINE,
        inverse,
        resample=Image.Resampling.BILINEAR,
        fillcolor=fill,
    )


_FONTS: dict = {}


def _load_font(size: int) -> ImageFont.ImageFont:
    """TrueType font at `size`, falling back to Pillow's default."""
    if size in _FONTS:
        return _FONTS[size]
    font: Optional[ImageFont.ImageFont] = None
    for font_name in ("DejaVuSans.ttf", "arial.ttf", "Arial.ttf"):
        try:
            font = ImageFont.truetype(font_name, size)
            break
        except (IOError, OSError):
            continue
    if font is None:
        logger.debug("Could not load TrueType font, using default")
        font = ImageFont.load_default()
    _FONTS[size] = font
    return font
