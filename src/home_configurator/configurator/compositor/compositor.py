"""
Module: configurator.compositor.compositor

Purpose:
    Incremental compositor. Turns (floor, selection) into a layered
    scene, reusing materialized layers across re-renders and discarding
    image loads that finish after a newer render started.

Key Classes:
    - Compositor: render_floor() plus viewport operations

Algorithm (render_floor):
    1. Floor or background changed: bump the generation, reset the
       viewport, drop option and hotspot layers, load the background
       and fit it to the canvas.
    2. Otherwise bump the generation and diff: remove layers whose
       option left the target set, load the missing ones concurrently.
    3. Discard anything whose generation is no longer current.
    4. Stable sort by layer_order, then re-add hotspot icons on top.

Dependencies:
    - asyncio: Concurrent loads
    - PIL: Images
    - .loader: ImageLoader
    - configurator.hotspots: Hotspot groups

Used By:
    - configurator.session: Rendering after selection changes
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Tuple

from PIL import Image

from home_configurator.core.errors import ImageLoadError, UnknownFloorError
from home_configurator.core.models.catalog import Catalog, Floor, Option
from home_configurator.core.models.selection import SelectionState

from ..config import ConfiguratorConfig
from ..hotspots import HotspotMapper
from .loader import ImageLoader
from .renderer import make_hotspot_icon
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

logger = logging.getLogger(__name__)

NO_FLOOR_PLAN_MESSAGE = "No Floor Plan Available"
SELECT_TO_PREVIEW_MESSAGE = "Select an option to preview..."


class Compositor:
    """
    Owns the scene for the active floor.

    Only the compositor mutates scene layers. The selection is read,
    never written. Markup lives elsewhere and is never touched here.

    Example:
        >>> compositor = Compositor(catalog, selection, PillowImageLoader(resolver))
        >>> asyncio.run(compositor.render_floor(2))
        >>> sorted(compositor.scene.layer_ids())
        ['hotspot:41.2500,63.0000', 'option:12']
    """

    def __init__(
        self,
        catalog: Catalog,
        selection: SelectionState,
        loader: ImageLoader,
        config: Optional[ConfiguratorConfig] = None,
        hotspots: Optional[HotspotMapper] = None,
    ) -> None:
        self.catalog = catalog
        self.selection = selection
        self.loader = loader
        self.config = config or ConfiguratorConfig()
        self.hotspots = hotspots or HotspotMapper(catalog, self.config.hotspot_precision)
        self.scene = Scene(
            canvas_size=self.config.canvas_size,
            background_color=self.config.placeholder_color,
            viewport=ViewportTransform(
                min_zoom=self.config.min_zoom,
                max_zoom=self.config.max_zoom,
            ),
        )
        self._generation = 0
        self._floor_id: Optional[int] = None
        self._background_ref: Optional[str] = None
        self._hotspot_icon: Optional[Image.Image] = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def viewport(self) -> ViewportTransform:
        return self.scene.viewport

    @property
    def floor_id(self) -> Optional[int]:
        return self._floor_id

    # ─────────────────────────────────────────────────────────────────────────
    # Rendering
    # ─────────────────────────────────────────────────────────────────────────

    async def render_floor(self, floor_id: int) -> None:
        """
        Bring the scene in line with the floor and the current selection.

        Idempotent: calling it twice with nothing changed leaves the same
        layers. Safe to call again before an earlier call finishes; the
        latest call wins.

        Raises:
            UnknownFloorError: If the floor is not in the catalog
        """
        floor = self.catalog.floor(floor_id)
        if floor is None:
            raise UnknownFloorError(floor_id)

        self._generation += 1
        token = self._generation

        background_ref = self._background_ref_for(floor)
        if floor.id != self._floor_id or background_ref != self._background_ref:
            committed = await self._render_background(floor, background_ref, token)
            if not committed:
                return

        await self._render_layers(floor, token)

    async def _render_background(
        self,
        floor: Floor,
        background_ref: Optional[str],
        token: int,
    ) -> bool:
        logger.info(f"Rendering floor {floor.id} ({floor.name}) from scratch")

        image: Optional[Image.Image] = None
        if background_ref is not None:
            try:
                image = await self.loader.load(background_ref)
            except ImageLoadError as e:
                logger.warning(f"Background for floor {floor.id} unavailable: {e}")

        if token != self._generation:
            logger.debug(f"Discarding stale background load for floor {floor.id}")
            return False

        # The previous scene stays intact until the new background is ready
        scene = self.scene
        scene.viewport.reset()
        scene.clear_layers()
        scene.floor_id = floor.id
        scene.background_ref = background_ref
        scene.background = image
        if image is not None:
            scene.metrics = BackgroundMetrics.fit(image.size, scene.canvas_size)
            scene.background_color = self.config.placeholder_color
        else:
            scene.metrics = BackgroundMetrics.full_canvas(scene.canvas_size)
            scene.background_color = self.config.missing_background_color
            message = SELECT_TO_PREVIEW_MESSAGE if floor.is_elevation else NO_FLOOR_PLAN_MESSAGE
            width, height = scene.canvas_size
            scene.add_layer(Layer(
                record=LayerRecord(layer_id="placeholder", kind=LayerKind.PLACEHOLDER),
                image=None,
                left=0.0,
                top=0.0,
                width=float(width),
                height=float(height),
                text=message,
            ))

        # Committed only once the background is in place; an overlapping
        # call for the same floor before this point renders from scratch too.
        self._floor_id = floor.id
        self._background_ref = background_ref
        return True

    async def _render_layers(self, floor: Floor, token: int) -> None:
        scene = self.scene
        targets = self._target_options(floor)
        kind = LayerKind.ELEVATION if floor.is_elevation else LayerKind.OVERLAY

        target_ids = {o.id for o in targets}
        for layer in list(scene.layers):
            record = layer.record
            if record.option_id is not None and record.option_id not in target_ids:
                scene.remove_layer(record.layer_id)
                logger.debug(f"Removed layer {record.layer_id}")

        present = scene.option_ids()
        missing = [o for o in targets if o.id not in present]
        loaded = await asyncio.gather(*(self._load_layer(o, kind) for o in missing))

        if token != self._generation:
            logger.debug(f"Discarding stale layer loads for floor {floor.id}")
            return

        for layer in loaded:
            if layer is not None and layer.layer_id not in scene.records:
                scene.add_layer(layer)
                logger.debug(f"Added layer {layer.layer_id}")

        scene.sort_layers()
        self._refresh_hotspots(floor)

    async def _load_layer(self, option: Option, kind: LayerKind) -> Optional[Layer]:
        try:
            image = await self.loader.load(option.overlay_image)
        except ImageLoadError as e:
            logger.warning(f"Overlay for option {option.id} ({option.name}) omitted: {e}")
            return None

        metrics = self.scene.metrics or BackgroundMetrics.full_canvas(self.scene.canvas_size)
        if kind is LayerKind.ELEVATION:
            left, top, width, height = metrics.offset_x, metrics.offset_y, metrics.width, metrics.height
        else:
            left, top, width, height = metrics.place(option.placement)

        return Layer(
            record=LayerRecord(
                layer_id=overlay_layer_id(option.id),
                kind=kind,
                option_id=option.id,
                layer_order=option.layer_order,
            ),
            image=image,
            left=left,
            top=top,
            width=width,
            height=height,
        )

    def _refresh_hotspots(self, floor: Floor) -> None:
        scene = self.scene
        scene.clear_hotspots()
        if floor.is_elevation or scene.metrics is None:
            return

        size = self.config.hotspot_size
        icon = self._icon()
        for group in self.hotspots.groups(floor.id, self.selection):
            x, y = scene.metrics.point(group.point)
            scene.add_layer(Layer(
                record=LayerRecord(
                    layer_id=hotspot_layer_id(group.key),
                    kind=LayerKind.HOTSPOT,
                    hotspot_key=group.key,
                ),
                image=icon,
                left=x - size / 2,
                top=y - size / 2,
                width=float(size),
                height=float(size),
            ))

    def _icon(self) -> Image.Image:
        if self._hotspot_icon is None:
            self._hotspot_icon = make_hotspot_icon(self.config.hotspot_size)
        return self._hotspot_icon

    # ─────────────────────────────────────────────────────────────────────────
    # Target selection
    # ─────────────────────────────────────────────────────────────────────────

    def _target_options(self, floor: Floor) -> List[Option]:
        """Options whose images belong in the scene for this floor."""
        if floor.is_elevation:
            chosen = self._elevation_choice(floor)
            return [chosen] if chosen is not None else []
        return [
            o for o in self.catalog.options_for_floor(floor.id)
            if o.has_overlay and self.selection.is_selected(o.id)
        ]

    def _elevation_choice(self, floor: Floor) -> Optional[Option]:
        with_images = [o for o in self.catalog.options_for_floor(floor.id) if o.has_overlay]
        for option in with_images:
            if self.selection.is_selected(option.id):
                return option
        return with_images[0] if with_images else None

    def _background_ref_for(self, floor: Floor) -> Optional[str]:
        if floor.base_plan_image:
            return floor.base_plan_image
        if floor.is_elevation:
            chosen = self._elevation_choice(floor)
            if chosen is not None:
                return chosen.overlay_image
        return None

    # ─────────────────────────────────────────────────────────────────────────
    # Viewport
    # ─────────────────────────────────────────────────────────────────────────

    def zoom_to_point(self, x: float, y: float, zoom: float) -> None:
        self.scene.viewport.zoom_to_point(x, y, zoom)

    def zoom_by(self, factor: float, center: Optional[Tuple[float, float]] = None) -> None:
        """Zoom by a factor about `center`, the canvas centre by default."""
        if center is None:
            width, height = self.scene.canvas_size
            center = (width / 2, height / 2)
        self.scene.viewport.zoom_by(factor, center)

    def pan(self, dx: float, dy: float) -> None:
        self.scene.viewport.pan(dx, dy)

    def reset_viewport(self) -> None:
        self.scene.viewport.reset()

    def invalidate(self) -> None:
        """Force the next render to start from scratch."""
        self._floor_id = None
        self._background_ref = None
