"""
Module: configurator.markup

Purpose:
    User annotations drawn over the plan: straight lines, freehand
    paths and text labels, kept per floor. Switching floors swaps the
    visible markup instead of clearing it.

Key Classes:
    - MarkupLine, MarkupPath, MarkupText: Annotation items (canvas coordinates)
    - MarkupBoard: Per-floor markup with change notification

Key Functions:
    - markup_to_dict(), markup_from_dict(): JSON-ready conversion

Used By:
    - configurator.history: Snapshots and replay
    - configurator.compositor.renderer: Painting
    - configurator.session: Floor switches
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

DEFAULT_MARKUP_COLOR = "#ff0000"


@dataclass(frozen=True)
class MarkupLine:
    x1: float
    y1: float
    x2: float
    y2: float
    color: str = DEFAULT_MARKUP_COLOR
    width: int = 3

    def bounds(self) -> Tuple[float, float, float, float]:
        pad = self.width / 2
        return (
            min(self.x1, self.x2) - pad,
            min(self.y1, self.y2) - pad,
            max(self.x1, self.x2) + pad,
            max(self.y1, self.y2) + pad,
        )


@dataclass(frozen=True)
class MarkupText:
    x: float
    y: float
    text: str
    color: str = DEFAULT_MARKUP_COLOR
    font_size: int = 20

    def bounds(self) -> Tuple[float, float, float, float]:
        # Approximate; glyph widths are not known without a font
        width = len(self.text) * self.font_size * 0.6
        return (self.x, self.y, self.x + width, self.y + self.font_size * 1.2)


@dataclass(frozen=True)
class MarkupPath:
    """Freehand stroke through `points`, drawn as one polyline."""

    points: Tuple[Tuple[float, float], ...]
    color: str = DEFAULT_MARKUP_COLOR
    width: int = 3

    def __post_init__(self) -> None:
        if not self.points:
            raise ValueError("A markup path needs at least one point")

    def bounds(self) -> Tuple[float, float, float, float]:
        pad = self.width / 2
        xs = [p[0] for p in self.points]
        ys = [p[1] for p in self.points]
        return (min(xs) - pad, min(ys) - pad, max(xs) + pad, max(ys) + pad)


MarkupItem = Union[MarkupLine, MarkupPath, MarkupText]

# Board events
EDIT = "edit"
FLOOR = "floor"

Listener = Callable[["MarkupBoard", str], None]


_MARKUP_TYPES = {MarkupLine: "line", MarkupPath: "path", MarkupText: "text"}


def markup_to_dict(item: MarkupItem) -> Dict[str, Any]:
    data = asdict(item)
    if isinstance(item, MarkupPath):
        data["points"] = [list(p) for p in item.points]
    data["type"] = _MARKUP_TYPES[type(item)]
    return data


def markup_from_dict(data: Dict[str, Any]) -> MarkupItem:
    """
    Rebuild a markup item.

    Raises:
        ValueError: If the type is unknown or fields are missing
    """
    fields = {k: v for k, v in data.items() if k != "type"}
    kind = data.get("type")
    try:
        if kind == "line":
            return MarkupLine(**fields)
        if kind == "path":
            points = tuple((float(x), float(y)) for x, y in fields.pop("points", ()))
            return MarkupPath(points, **fields)
        if kind == "text":
            return MarkupText(**fields)
    except TypeError as e:
        raise ValueError(f"Invalid {kind} markup: {e}") from e
    raise ValueError(f"Unknown markup type: {kind!r}")


class MarkupBoard:
    """
    Markup for the active floor, with the other floors' markup parked.

    Listeners are called with (board, event) after every change; event
    is EDIT for item changes and FLOOR for floor switches.

    Example:
        >>> board = MarkupBoard(floor_id=1)
        >>> board.add(MarkupLine(10, 10, 200, 10))
        >>> board.switch_floor(2)
        >>> board.items
        ()
    """

    def __init__(self, floor_id: Optional[int] = None) -> None:
        self._floor_id = floor_id
        self._items: List[MarkupItem] = []
        self._parked: Dict[Optional[int], List[MarkupItem]] = {}
        self._listeners: List[Listener] = []

    @property
    def floor_id(self) -> Optional[int]:
        return self._floor_id

    @property
    def items(self) -> Tuple[MarkupItem, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _notify(self, event: str) -> None:
        for listener in list(self._listeners):
            listener(self, event)

    # ─────────────────────────────────────────────────────────────────────────
    # Editing
    # ─────────────────────────────────────────────────────────────────────────

    def add(self, item: MarkupItem) -> None:
        self._items.append(item)
        self._notify(EDIT)

    def update(self, index: int, item: MarkupItem) -> None:
        """Replace the item at `index` (moved, restyled or retyped)."""
        self._items[index] = item
        self._notify(EDIT)

    def remove(self, index: int) -> None:
        del self._items[index]
        self._notify(EDIT)

    def remove_last(self) -> bool:
        if not self._items:
            return False
        self.remove(len(self._items) - 1)
        return True

    def index_at(self, x: float, y: float) -> Optional[int]:
        """Topmost item whose bounds contain (x, y)."""
        for index in range(len(self._items) - 1, -1, -1):
            left, top, right, bottom = self._items[index].bounds()
            if left <= x <= right and top <= y <= bottom:
                return index
        return None

    def clear(self) -> None:
        if not self._items:
            return
        self._items = []
        self._notify(EDIT)

    # ─────────────────────────────────────────────────────────────────────────
    # Floors
    # ─────────────────────────────────────────────────────────────────────────

    def switch_floor(self, floor_id: int) -> None:
        """Park the current floor's markup and restore the target floor's."""
        if floor_id == self._floor_id:
            return
        self._parked[self._floor_id] = self._items
        self._items = list(self._parked.pop(floor_id, []))
        logger.debug(f"Markup switched to floor {floor_id} ({len(self._items)} item(s))")
        self._floor_id = floor_id
        self._notify(FLOOR)

    def for_floor(self, floor_id: int) -> Tuple[MarkupItem, ...]:
        """Markup of any floor, active or parked."""
        if floor_id == self._floor_id:
            return self.items
        return tuple(self._parked.get(floor_id, []))

    # ─────────────────────────────────────────────────────────────────────────
    # Snapshots
    # ─────────────────────────────────────────────────────────────────────────

    def serialize(self) -> str:
        return json.dumps([markup_to_dict(item) for item in self._items])

    def restore(self, snapshot: str) -> None:
        """Replace the active floor's markup with a serialized snapshot."""
        self._items = [markup_from_dict(d) for d in json.loads(snapshot)]
        self._notify(EDIT)

    def bounds(self) -> Optional[Tuple[float, float, float, float]]:
        return markup_bounds(self._items)


def markup_bounds(items: Iterable[MarkupItem]) -> Optional[Tuple[float, float, float, float]]:
    """Union of item bounds, or None for no items."""
    boxes = [item.bounds() for item in items]
    if not boxes:
        return None
    return (
        min(b[0] for b in boxes),
        min(b[1] for b in boxes),
        max(b[2] for b in boxes),
        max(b[3] for b in boxes),
    )
