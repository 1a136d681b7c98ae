"""
Module: catalog

Purpose:
    Immutable snapshot of the configuration catalog: models, floors,
    option sets and options, plus the relationships between them.
    Loaded once per session from a catalog source and treated as
    read-only by everything downstream.

Key Classes:
    - Model, Floor, OptionSet, Option: Catalog entities
    - Placement: Overlay rectangle in percent-of-background coordinates
    - HotspotPoint: Hotspot coordinate in percent-of-background coordinates
    - Catalog: Indexed collection of all entities

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - core.utils.serialization
    - configurator.resolver
    - configurator.compositor
    - configurator.hotspots
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

ELEVATION_KEYWORDS: Tuple[str, ...] = ("elevation", "exterior")


class FloorKind(str, Enum):
    """Kind of floor step."""
    PLAN = "plan"            # Floor plan with per-option overlay rectangles
    ELEVATION = "elevation"  # Exterior style, one full-bleed image at a time

    def __str__(self) -> str:
        return self.value


class IconMode(str, Enum):
    """Where an option set places its hotspot icons."""
    SET_LEVEL = "set_level"        # One icon for the whole set
    OPTION_LEVEL = "option_level"  # One icon per option

    def __str__(self) -> str:
        return self.value


def infer_floor_kind(name: str, keywords: Iterable[str] = ELEVATION_KEYWORDS) -> FloorKind:
    """
    Infer a floor kind from its display name.

    Args:
        name: Floor name like "Front Elevation" or "Main Floor"
        keywords: Lowercase substrings that mark an elevation

    Returns:
        FloorKind.ELEVATION if any keyword occurs in the name, else PLAN
    """
    lowered = name.lower()
    if any(keyword in lowered for keyword in keywords):
        return FloorKind.ELEVATION
    return FloorKind.PLAN


@dataclass(frozen=True, slots=True)
class HotspotPoint:
    """
    Hotspot coordinate, in percent of the background image.

    Attributes:
        x: Horizontal position, 0-100
        y: Vertical position, 0-100
    """
    x: float
    y: float

    def key(self, precision: int = 4) -> str:
        """Rounded coordinate key used to collapse co-located hotspots."""
        return f"{self.x:.{precision}f},{self.y:.{precision}f}"

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional[HotspotPoint]:
        if not data or data.get("x") is None or data.get("y") is None:
            return None
        return cls(x=float(data["x"]), y=float(data["y"]))


@dataclass(frozen=True, slots=True)
class Placement:
    """
    Overlay rectangle in percent-of-background coordinates.

    Attributes:
        x: Left edge, percent of background width
        y: Top edge, percent of background height
        width: Width, percent of background width
        height: Height, percent of background height
    """
    x: float = 0.0
    y: float = 0.0
    width: float = 100.0
    height: float = 100.0

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Placement size must be non-negative: {self.width}x{self.height}")

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Placement:
        if not data:
            return cls()
        return cls(
            x=float(data.get("x", 0.0)),
            y=float(data.get("y", 0.0)),
            width=float(data.get("width", 100.0)),
            height=float(data.get("height", 100.0)),
        )


@dataclass(frozen=True, slots=True)
class Model:
    """A building model; root of a configuration tree."""
    id: int
    name: str
    cover_image: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "cover_image": self.cover_image}


@dataclass(frozen=True, slots=True)
class Floor:
    """
    A step of the configurator: a floor plan or an elevation.

    Attributes:
        id: Floor id
        name: Display name
        model_id: Owning model
        base_plan_image: Asset identifier of the background, if any
        kind: PLAN or ELEVATION
    """
    id: int
    name: str
    model_id: int
    base_plan_image: Optional[str] = None
    kind: FloorKind = FloorKind.PLAN

    @property
    def is_elevation(self) -> bool:
        return self.kind is FloorKind.ELEVATION

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "model_id": self.model_id,
            "base_plan_image": self.base_plan_image,
            "kind": self.kind.value,
        }


@dataclass(frozen=True, slots=True)
class OptionSet:
    """
    Named, ordered group of options on a floor.

    Attributes:
        id: Option set id
        name: Display name
        floor_id: Owning floor
        position: Order within the floor (unique per floor)
        allow_multiple: Multi-select when True, single-select otherwise
        hotspot: Set-level hotspot coordinate
        icon_mode: SET_LEVEL or OPTION_LEVEL hotspots
    """
    id: int
    name: str
    floor_id: int
    position: int = 0
    allow_multiple: bool = False
    hotspot: Optional[HotspotPoint] = None
    icon_mode: IconMode = IconMode.SET_LEVEL

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "floor_id": self.floor_id,
            "position": self.position,
            "allow_multiple": self.allow_multiple,
            "hotspot": self.hotspot.to_dict() if self.hotspot else None,
            "icon_mode": self.icon_mode.value,
        }


@dataclass(frozen=True, slots=True)
class Option:
    """
    A selectable configuration choice.

    Attributes:
        id: Option id
        name: Display name
        option_set_id: Owning option set
        position: Order within the set (unique per set)
        code: Optional catalog code shown on the review page
        thumbnail: Asset identifier of the picker thumbnail
        overlay_image: Asset identifier of the composited overlay
        placement: Overlay rectangle in percent of the background
        layer_order: Paint order, ascending
        requirements: Option ids of which at least one must be selected
        conflicts: Option ids that cannot be selected alongside this one
        hotspot: Option-level hotspot coordinate
        gallery_images: Extra design images for the option
    """
    id: int
    name: str
    option_set_id: int
    position: int = 0
    code: str = ""
    thumbnail: Optional[str] = None
    overlay_image: Optional[str] = None
    placement: Placement = field(default_factory=Placement)
    layer_order: int = 0
    requirements: Tuple[int, ...] = ()
    conflicts: Tuple[int, ...] = ()
    hotspot: Optional[HotspotPoint] = None
    gallery_images: Tuple[str, ...] = ()

    @property
    def has_overlay(self) -> bool:
        return bool(self.overlay_image) and self.overlay_image != "null"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "option_set_id": self.option_set_id,
            "position": self.position,
            "code": self.code,
            "thumbnail": self.thumbnail,
            "overlay_image": self.overlay_image,
            "placement": self.placement.to_dict(),
            "layer_order": self.layer_order,
            "requirements": list(self.requirements),
            "conflicts": list(self.conflicts),
            "hotspot": self.hotspot.to_dict() if self.hotspot else None,
            "gallery_images": list(self.gallery_images),
        }


class Catalog:
    """
    Read-only, indexed snapshot of the whole catalog.

    Built once per session. Lookups by id are O(1); per-floor and
    per-set listings are pre-sorted by position.

    Example:
        >>> catalog = Catalog(models, floors, option_sets, options)
        >>> catalog.option(12).name
        'Quartz Countertop'
        >>> [f.name for f in catalog.floors_for_model(1)]
        ['Front Elevation', 'Main Floor', 'Upper Floor']
    """

    def __init__(
        self,
        models: Iterable[Model] = (),
        floors: Iterable[Floor] = (),
        option_sets: Iterable[OptionSet] = (),
        options: Iterable[Option] = (),
    ) -> None:
        self._models: Dict[int, Model] = {m.id: m for m in models}
        self._floors: Dict[int, Floor] = {f.id: f for f in floors}
        self._option_sets: Dict[int, OptionSet] = {s.id: s for s in option_sets}
        self._options: Dict[int, Option] = {o.id: o for o in options}

        self._sets_by_floor: Dict[int, List[OptionSet]] = {}
        for option_set in self._option_sets.values():
            self._sets_by_floor.setdefault(option_set.floor_id, []).append(option_set)
        for sets in self._sets_by_floor.values():
            sets.sort(key=lambda s: (s.position, s.id))

        self._options_by_set: Dict[int, List[Option]] = {}
        for option in self._options.values():
            self._options_by_set.setdefault(option.option_set_id, []).append(option)
        for opts in self._options_by_set.values():
            opts.sort(key=lambda o: (o.position, o.id))

    # ─────────────────────────────────────────────────────────────────────────
    # Collections
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def models(self) -> List[Model]:
        return list(self._models.values())

    @property
    def floors(self) -> List[Floor]:
        return list(self._floors.values())

    @property
    def option_sets(self) -> List[OptionSet]:
        return list(self._option_sets.values())

    @property
    def options(self) -> List[Option]:
        return list(self._options.values())

    # ─────────────────────────────────────────────────────────────────────────
    # Lookups
    # ─────────────────────────────────────────────────────────────────────────

    def model(self, model_id: int) -> Optional[Model]:
        return self._models.get(model_id)

    def floor(self, floor_id: int) -> Optional[Floor]:
        return self._floors.get(floor_id)

    def option_set(self, set_id: int) -> Optional[OptionSet]:
        return self._option_sets.get(set_id)

    def option(self, option_id: int) -> Optional[Option]:
        return self._options.get(option_id)

    def has_option(self, option_id: int) -> bool:
        return option_id in self._options

    def option_name(self, option_id: int) -> str:
        """Display name for an option id, falling back to the id itself."""
        option = self._options.get(option_id)
        return option.name if option else str(option_id)

    def sets_for_floor(self, floor_id: int) -> List[OptionSet]:
        """Option sets on a floor, ordered by position."""
        return list(self._sets_by_floor.get(floor_id, []))

    def options_for_set(self, set_id: int) -> List[Option]:
        """Options in a set, ordered by position."""
        return list(self._options_by_set.get(set_id, []))

    def options_for_floor(self, floor_id: int) -> List[Option]:
        """All options on a floor, in set order then option order."""
        result: List[Option] = []
        for option_set in self.sets_for_floor(floor_id):
            result.extend(self.options_for_set(option_set.id))
        return result

    def floor_of_option(self, option_id: int) -> Optional[Floor]:
        option = self._options.get(option_id)
        if option is None:
            return None
        option_set = self._option_sets.get(option.option_set_id)
        if option_set is None:
            return None
        return self._floors.get(option_set.floor_id)

    def floors_for_model(self, model_id: int) -> List[Floor]:
        """
        Floors of a model in configurator order.

        Elevation floors come first, then everything else by ascending id.
        """
        floors = [f for f in self._floors.values() if f.model_id == model_id]
        return sorted(floors, key=lambda f: (not f.is_elevation, f.id))

    def __repr__(self) -> str:
        return (
            f"Catalog(models={len(self._models)}, floors={len(self._floors)}, "
            f"option_sets={len(self._option_sets)}, options={len(self._options)})"
        )
