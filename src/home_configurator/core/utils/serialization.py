"""
Serialization Utilities

Provides to/from JSON utilities for the catalog and the selection state.

- Catalog: `serialize_catalog` / `deserialize_catalog`, schema-validated
- Selection: `serialize_selection` / `deserialize_selection`, lenient

Selection payloads come from client-side persistence and are never
trusted: anything malformed yields an empty SelectionState instead of
an error. Catalog payloads come from the catalog collaborator and fail
loudly.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, Optional

from ..models.catalog import (
    ELEVATION_KEYWORDS,
    Catalog,
    Floor,
    FloorKind,
    HotspotPoint,
    IconMode,
    Model,
    Option,
    OptionSet,
    Placement,
    infer_floor_kind,
)
from ..models.selection import SelectionState
from ..schemas.validator import CATALOG_SCHEMA_VERSION, validate_catalog

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Catalog Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_catalog(catalog: Catalog) -> dict[str, Any]:
    """
    Serialize a Catalog to a dictionary.

    The output passes `validate_catalog` and round-trips through
    `deserialize_catalog`.
    """
    return {
        "schema_version": CATALOG_SCHEMA_VERSION,
        "models": [m.to_dict() for m in sorted(catalog.models, key=lambda m: m.id)],
        "floors": [f.to_dict() for f in sorted(catalog.floors, key=lambda f: f.id)],
        "option_sets": [s.to_dict() for s in sorted(catalog.option_sets, key=lambda s: s.id)],
        "options": [o.to_dict() for o in sorted(catalog.options, key=lambda o: o.id)],
    }


def deserialize_catalog(
    data: dict[str, Any],
    *,
    validate: bool = True,
    elevation_keywords: Iterable[str] = ELEVATION_KEYWORDS,
) -> Catalog:
    """
    Deserialize a Catalog from a dictionary.

    Args:
        data: Dictionary from JSON
        validate: Whether to validate against the schema first
        elevation_keywords: Name substrings marking untagged elevation floors

    Returns:
        Catalog instance

    Raises:
        CatalogValidationError: If validate=True and data is invalid
    """
    if validate:
        validate_catalog(data)

    keywords = tuple(elevation_keywords)
    models = [
        Model(id=m["id"], name=m["name"], cover_image=_asset_ref(m.get("cover_image")))
        for m in data["models"]
    ]
    floors = [
        Floor(
            id=f["id"],
            name=f["name"],
            model_id=f["model_id"],
            base_plan_image=_asset_ref(f.get("base_plan_image")),
            kind=FloorKind(f["kind"]) if f.get("kind") else infer_floor_kind(f["name"], keywords),
        )
        for f in data["floors"]
    ]
    option_sets = [
        OptionSet(
            id=s["id"],
            name=s["name"],
            floor_id=s["floor_id"],
            position=s.get("position", 0),
            allow_multiple=bool(s.get("allow_multiple", False)),
            hotspot=HotspotPoint.from_dict(s.get("hotspot")),
            icon_mode=IconMode(s["icon_mode"]) if s.get("icon_mode") else IconMode.SET_LEVEL,
        )
        for s in data["option_sets"]
    ]
    options = [_deserialize_option(o) for o in data["options"]]
    return Catalog(models, floors, option_sets, options)


def _deserialize_option(data: dict[str, Any]) -> Option:
    """Deserialize an Option, normalising nulls to defaults."""
    return Option(
        id=data["id"],
        name=data["name"],
        option_set_id=data["option_set_id"],
        position=data.get("position", 0),
        code=data.get("code") or "",
        thumbnail=_asset_ref(data.get("thumbnail")),
        overlay_image=_asset_ref(data.get("overlay_image")),
        placement=Placement.from_dict(data.get("placement")),
        layer_order=data.get("layer_order") or 0,
        requirements=tuple(data.get("requirements") or ()),
        conflicts=tuple(data.get("conflicts") or ()),
        hotspot=HotspotPoint.from_dict(data.get("hotspot")),
        gallery_images=tuple(data.get("gallery_images") or ()),
    )


def _asset_ref(value: Optional[str]) -> Optional[str]:
    # Catalog exports write the literal string "null" for missing uploads
    if not value or value == "null":
        return None
    return value


# ─────────────────────────────────────────────────────────────────────────────
# Selection Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_selection(selection: SelectionState) -> dict[str, list[int]]:
    """
    Serialize a SelectionState to a JSON-ready dictionary.

    Keys are option set ids as strings (JSON object keys), values are
    the ordered option id lists.
    """
    return {str(set_id): ids for set_id, ids in selection.items()}


def deserialize_selection(data: Any) -> SelectionState:
    """
    Deserialize a SelectionState from persisted data.

    Accepts the output of `serialize_selection`. A bare id in place of a
    list is accepted as a one-element list.

    Args:
        data: Parsed JSON value, or None when nothing was stored

    Returns:
        SelectionState; empty if data is absent or malformed
    """
    if data is None:
        return SelectionState()
    if not isinstance(data, dict):
        logger.warning(f"Discarding persisted selection: expected object, got {type(data).__name__}")
        return SelectionState()

    state = SelectionState()
    try:
        for raw_key, raw_ids in data.items():
            set_id = int(raw_key)
            ids = raw_ids if isinstance(raw_ids, list) else [raw_ids]
            for raw_id in ids:
                if isinstance(raw_id, bool) or not isinstance(raw_id, int):
                    raise ValueError(f"option id must be an integer: {raw_id!r}")
                state.add(set_id, raw_id)
    except (TypeError, ValueError) as e:
        logger.warning(f"Discarding malformed persisted selection: {e}")
        return SelectionState()
    return state


def selection_to_json(selection: SelectionState) -> str:
    return json.dumps(serialize_selection(selection))


def selection_from_json(text: Optional[str]) -> SelectionState:
    """Parse persisted selection JSON; corrupt text yields an empty state."""
    if not text:
        return SelectionState()
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning(f"Discarding corrupt persisted selection: {e}")
        return SelectionState()
    return deserialize_selection(data)
