"""
Module: configurator.config

Purpose:
    Configuration dataclass for a configurator session. Immutable
    configuration with validation on construction.

Key Classes:
    - ConfiguratorConfig: Canvas, viewport, hotspot and storage settings

Dependencies:
    - dataclasses (std)
    - pathlib (std)

Used By:
    - configurator.session: Session wiring
    - configurator.compositor: Canvas size, zoom limits, placeholders
    - configurator.hotspots: Coordinate key precision
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from home_configurator.core.models.catalog import ELEVATION_KEYWORDS


@dataclass(frozen=True)
class ConfiguratorConfig:
    """
    Configuration for a configurator session (immutable).

    Attributes:
        canvas_width: Canvas width in pixels
        canvas_height: Canvas height in pixels
        min_zoom: Lower zoom clamp
        max_zoom: Upper zoom clamp
        hotspot_precision: Decimals used for hotspot coordinate keys
        hotspot_size: Hotspot icon size in pixels
        snapshot_padding: Padding around the background in snapshots
        elevation_keywords: Name substrings marking untagged elevation floors
        store_path: JSON file for persisted selections (None disables persistence)
        asset_root: Directory relative asset identifiers resolve against
        placeholder_color: Background fill when no base image is available

    Example:
        >>> config = ConfiguratorConfig(canvas_width=1200, canvas_height=800)
    """

    # Canvas
    canvas_width: int = 1024
    canvas_height: int = 768

    # Viewport
    min_zoom: float = 0.2
    max_zoom: float = 5.0

    # Hotspots
    hotspot_precision: int = 4
    hotspot_size: int = 48

    # Snapshots
    snapshot_padding: int = 20

    # Catalog interpretation
    elevation_keywords: Tuple[str, ...] = ELEVATION_KEYWORDS

    # Storage
    store_path: Optional[Path] = None
    asset_root: Optional[Path] = None

    # Placeholders
    placeholder_color: str = "#ffffff"
    missing_background_color: str = "#f0f0f0"

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.canvas_width <= 0 or self.canvas_height <= 0:
            raise ValueError(
                f"canvas size must be positive: {self.canvas_width}x{self.canvas_height}"
            )
        if not 0 < self.min_zoom <= 1 <= self.max_zoom:
            raise ValueError(
                f"zoom limits must satisfy 0 < min <= 1 <= max: {self.min_zoom}, {self.max_zoom}"
            )
        if not 0 <= self.hotspot_precision <= 10:
            raise ValueError(f"hotspot_precision out of range: {self.hotspot_precision}")
        if self.snapshot_padding < 0:
            raise ValueError(f"snapshot_padding must be non-negative: {self.snapshot_padding}")

    @property
    def canvas_size(self) -> Tuple[int, int]:
        return (self.canvas_width, self.canvas_height)
