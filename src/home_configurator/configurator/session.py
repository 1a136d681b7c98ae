"""
Module: configurator.session

Purpose:
    The configurator's session context. One object owns the catalog
    snapshot, the selection, the compositor and the markup history for
    the model being configured; UI code talks to nothing else.

Key Classes:
    - ConfiguratorSession: load/start, floor switching, actions,
      rendering, hotspots, galleries, undo/redo, review summary

Dependencies:
    - configurator.resolver: Selection changes
    - configurator.compositor: Scene rendering
    - configurator.persistence: Selection storage

Used By:
    - gui.main_window: The desktop shell
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Tuple

from PIL import Image

from home_configurator.core.errors import ImageLoadError, UnknownFloorError, UnknownModelError, UnknownOptionError
from home_configurator.core.models.catalog import Catalog, Floor
from home_configurator.core.models.selection import SelectionState

from .assets import DirectoryAssetResolver
from .catalog_source import CatalogSource
from .compositor import Compositor, ImageLoader, PillowImageLoader, flatten, snapshot
from .config import ConfiguratorConfig
from .history import AnnotationHistory
from .hotspots import HotspotMapper, HotspotPanel, HotspotTarget, TargetKind
from .markup import MarkupBoard
from .persistence import SelectionStore
from .resolver import Action, ApplyResult, ConstraintResolver
from .review import FloorSummary, summarize

logger = logging.getLogger(__name__)


class ConfiguratorSession:
    """
    Session for configuring one model.

    Lifecycle: `await load()` once, then `start(model_id)`; `start` may
    be called again to switch models. Everything else requires a
    started session.

    Example:
        >>> session = ConfiguratorSession(JsonCatalogSource("catalog.json"), config=config)
        >>> asyncio.run(session.load())
        >>> session.start(model_id=3)
        >>> result = session.apply(Select(12))
        >>> asyncio.run(session.render_floor())
    """

    def __init__(
        self,
        source: CatalogSource,
        *,
        config: Optional[ConfiguratorConfig] = None,
        loader: Optional[ImageLoader] = None,
        store: Optional[SelectionStore] = None,
    ) -> None:
        self.source = source
        self.config = config or ConfiguratorConfig()
        self.loader = loader or PillowImageLoader(DirectoryAssetResolver(self.config.asset_root))
        if store is None and self.config.store_path is not None:
            store = SelectionStore(self.config.store_path)
        self.store = store

        self._catalog: Optional[Catalog] = None
        self._model_id: Optional[int] = None
        self._floor_id: Optional[int] = None
        self.selection = SelectionState()
        self.markup = MarkupBoard()
        self.history = AnnotationHistory(self.markup)
        self._resolver: Optional[ConstraintResolver] = None
        self._hotspots: Optional[HotspotMapper] = None
        self._compositor: Optional[Compositor] = None

    # ─────────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────────────

    async def load(self) -> Catalog:
        """
        Fetch the catalog.

        Raises:
            CatalogFetchError: Propagated from the source
        """
        self._catalog = await self.source.fetch()
        return self._catalog

    def start(self, model_id: int) -> List[Floor]:
        """
        Begin configuring a model and restore its stored selection.

        Returns:
            The model's floors in configurator order; the first is active

        Raises:
            UnknownModelError: If the model is not in the catalog
        """
        catalog = self.catalog
        if catalog.model(model_id) is None:
            raise UnknownModelError(model_id)

        self._model_id = model_id
        self.selection = self._restore(model_id)
        self._resolver = ConstraintResolver(catalog)
        self._hotspots = HotspotMapper(catalog, self.config.hotspot_precision)
        self._compositor = Compositor(catalog, self.selection, self.loader, self.config, self._hotspots)
        self.markup = MarkupBoard()
        self.history = AnnotationHistory(self.markup)

        floors = catalog.floors_for_model(model_id)
        self._floor_id = None
        if floors:
            self.set_floor(floors[0].id)
        logger.info(
            f"Started model {model_id} with {len(floors)} floor(s), "
            f"{len(self.selection)} restored option(s)"
        )
        return floors

    def _restore(self, model_id: int) -> SelectionState:
        if self.store is None:
            return SelectionState()
        stored = self.store.load(model_id)
        catalog = self.catalog
        restored = SelectionState()
        for set_id, ids in stored.items():
            option_set = catalog.option_set(set_id)
            floor = catalog.floor(option_set.floor_id) if option_set else None
            if floor is None or floor.model_id != model_id:
                logger.warning(f"Dropping stored selection for unknown option set {set_id}")
                continue
            for option_id in ids:
                option = catalog.option(option_id)
                if option is None or option.option_set_id != set_id:
                    logger.warning(f"Dropping stored selection of unknown option {option_id}")
                    continue
                restored.add(set_id, option_id)
        return restored

    # ─────────────────────────────────────────────────────────────────────────
    # Accessors
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def catalog(self) -> Catalog:
        if self._catalog is None:
            raise RuntimeError("Catalog not loaded; await load() first")
        return self._catalog

    @property
    def model_id(self) -> int:
        if self._model_id is None:
            raise RuntimeError("Session not started; call start(model_id) first")
        return self._model_id

    @property
    def floor_id(self) -> Optional[int]:
        return self._floor_id

    @property
    def compositor(self) -> Compositor:
        if self._compositor is None:
            raise RuntimeError("Session not started; call start(model_id) first")
        return self._compositor

    @property
    def floors(self) -> List[Floor]:
        return self.catalog.floors_for_model(self.model_id)

    # ─────────────────────────────────────────────────────────────────────────
    # Floors and rendering
    # ─────────────────────────────────────────────────────────────────────────

    def set_floor(self, floor_id: int) -> None:
        """
        Make a floor active and swap in its markup.

        Raises:
            UnknownFloorError: If the floor does not belong to the model
        """
        floor = self.catalog.floor(floor_id)
        if floor is None or floor.model_id != self.model_id:
            raise UnknownFloorError(floor_id)
        if floor_id != self._floor_id:
            logger.info(f"Switched to floor {floor.id} ({floor.name})")
        self._floor_id = floor_id
        self.markup.switch_floor(floor_id)

    async def render_floor(self, floor_id: Optional[int] = None) -> None:
        """Render a floor (the active one by default), making it active."""
        if floor_id is not None:
            self.set_floor(floor_id)
        if self._floor_id is None:
            return
        await self.compositor.render_floor(self._floor_id)

    def reload_images(self) -> None:
        """Drop cached images; the next render re-reads every asset."""
        self.loader.clear_cache()
        self.compositor.invalidate()
        logger.info("Image cache cleared")

    async def load_gallery(self, option_id: int) -> List[Tuple[str, Image.Image]]:
        """
        Load an option's gallery images in catalog order.

        Images that fail to load are skipped with a warning.

        Raises:
            UnknownOptionError: If the option is not in the catalog
        """
        option = self.catalog.option(option_id)
        if option is None:
            raise UnknownOptionError(option_id)

        async def _load(identifier: str) -> Optional[Image.Image]:
            try:
                return await self.loader.load(identifier)
            except ImageLoadError as e:
                logger.warning(f"Gallery image for option {option_id} omitted: {e}")
                return None

        images = await asyncio.gather(*(_load(ref) for ref in option.gallery_images))
        return [(ref, image) for ref, image in zip(option.gallery_images, images) if image is not None]

    def flatten(self, *, include_hotspots: bool = True) -> Image.Image:
        """Current scene with markup, as one image."""
        return flatten(self.compositor.scene, self.markup.items, include_hotspots=include_hotspots)

    def snapshot(self) -> Image.Image:
        """Cropped plan image of the active floor for the review page."""
        return snapshot(self.compositor.scene, self.markup.items, padding=self.config.snapshot_padding)

    # ─────────────────────────────────────────────────────────────────────────
    # Selection
    # ─────────────────────────────────────────────────────────────────────────

    def apply(self, action: Action) -> ApplyResult:
        """
        Apply a selection change; persisted when accepted.

        Raises:
            UnknownOptionError: If the action names an unknown option
        """
        result = self._require_resolver().apply(self.selection, action, active_floor_id=self._floor_id)
        if result.ok:
            self._persist()
        return result

    def toggle(self, option_id: int) -> ApplyResult:
        result = self._require_resolver().toggle(self.selection, option_id, active_floor_id=self._floor_id)
        if result.ok:
            self._persist()
        return result

    def reset_selection(self) -> None:
        """Forget every choice for the model."""
        self.selection.clear()
        if self.store is not None:
            self.store.clear(self.model_id)

    def _persist(self) -> None:
        if self.store is not None:
            self.store.save(self.model_id, self.selection)

    def _require_resolver(self) -> ConstraintResolver:
        if self._resolver is None:
            raise RuntimeError("Session not started; call start(model_id) first")
        return self._resolver

    # ─────────────────────────────────────────────────────────────────────────
    # Hotspots
    # ─────────────────────────────────────────────────────────────────────────

    def resolve_hotspot(self, key: str) -> List[HotspotTarget]:
        if self._hotspots is None or self._floor_id is None:
            return []
        return self._hotspots.resolve(self._floor_id, self.selection, key)

    def hotspot_panels(self, key: str) -> List[HotspotPanel]:
        """Option panels opened by clicking the hotspot at `key`."""
        if self._hotspots is None:
            return []
        return self._hotspots.panel_for(self.resolve_hotspot(key))

    def floor_panels(self) -> List[HotspotPanel]:
        """Every option set of the active floor as a panel."""
        if self._hotspots is None or self._floor_id is None:
            return []
        targets = [HotspotTarget(s.id, TargetKind.SET) for s in self.catalog.sets_for_floor(self._floor_id)]
        return self._hotspots.panel_for(targets)

    # ─────────────────────────────────────────────────────────────────────────
    # Markup history and review
    # ─────────────────────────────────────────────────────────────────────────

    def undo(self) -> bool:
        return self.history.undo()

    def redo(self) -> bool:
        return self.history.redo()

    def summary(self) -> List[FloorSummary]:
        return summarize(self.catalog, self.model_id, self.selection)
