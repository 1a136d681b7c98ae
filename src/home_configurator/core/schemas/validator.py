"""
Catalog Validation Utilities

Validates catalog payloads before they become a Catalog snapshot.

Two layers of checks:
- Structure: JSON Schema (catalog.schema.json) via jsonschema
- Integrity: unique ids, parent references, unique positions

Strict mode adds the authoring-time checks that the resolver tolerates
at runtime: dangling requirement/conflict references and requirement
cycles. Catalog editors should validate strictly; sessions load leniently.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Set, Tuple

import jsonschema

from ..errors import ConfiguratorError

if TYPE_CHECKING:
    from ..models.catalog import Catalog

logger = logging.getLogger(__name__)

CATALOG_SCHEMA_VERSION = 1

_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class CatalogValidationError(ConfiguratorError):
    """Raised when catalog data fails validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_catalog(data: Dict[str, Any], *, strict: bool = False) -> None:
    """
    Validate a catalog payload.

    Args:
        data: Parsed catalog document
        strict: Also reject dangling references and requirement cycles

    Raises:
        CatalogValidationError: Listing every problem found
    """
    schema = _load_schema("catalog")
    validator = jsonschema.Draft202012Validator(schema)
    schema_errors = sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path))
    if schema_errors:
        messages = [
            f"{'/'.join(str(p) for p in err.absolute_path) or '<root>'}: {err.message}"
            for err in schema_errors
        ]
        raise CatalogValidationError(
            f"Catalog does not match schema ({len(messages)} error(s))",
            path="schema",
            errors=messages,
        )

    errors = _integrity_errors(data, strict=strict)
    if strict:
        errors.extend(_cycle_errors(data))
    if errors:
        raise CatalogValidationError(
            f"Catalog failed integrity checks ({len(errors)} error(s))",
            path="integrity",
            errors=errors,
        )


def _duplicates(values: Iterable[Any]) -> Set[Any]:
    seen: Set[Any] = set()
    dupes: Set[Any] = set()
    for value in values:
        if value in seen:
            dupes.add(value)
        seen.add(value)
    return dupes


def _integrity_errors(data: Dict[str, Any], *, strict: bool) -> List[str]:
    errors: List[str] = []

    for collection in ("models", "floors", "option_sets", "options"):
        for dupe in sorted(_duplicates(item["id"] for item in data[collection])):
            errors.append(f"{collection}: duplicate id {dupe}")

    model_ids = {m["id"] for m in data["models"]}
    floor_ids = {f["id"] for f in data["floors"]}
    set_ids = {s["id"] for s in data["option_sets"]}
    option_ids = {o["id"] for o in data["options"]}

    for floor in data["floors"]:
        if floor["model_id"] not in model_ids:
            errors.append(f"floors/{floor['id']}: unknown model_id {floor['model_id']}")
    for option_set in data["option_sets"]:
        if option_set["floor_id"] not in floor_ids:
            errors.append(f"option_sets/{option_set['id']}: unknown floor_id {option_set['floor_id']}")
    for option in data["options"]:
        if option["option_set_id"] not in set_ids:
            errors.append(f"options/{option['id']}: unknown option_set_id {option['option_set_id']}")

    # Positions are unique within their parent
    set_positions: Dict[int, List[int]] = {}
    for option_set in data["option_sets"]:
        if "position" in option_set:
            set_positions.setdefault(option_set["floor_id"], []).append(option_set["position"])
    for floor_id, positions in set_positions.items():
        for dupe in sorted(_duplicates(positions)):
            errors.append(f"floors/{floor_id}: duplicate option set position {dupe}")

    option_positions: Dict[int, List[int]] = {}
    for option in data["options"]:
        if "position" in option:
            option_positions.setdefault(option["option_set_id"], []).append(option["position"])
    for set_id, positions in option_positions.items():
        for dupe in sorted(_duplicates(positions)):
            errors.append(f"option_sets/{set_id}: duplicate option position {dupe}")

    if strict:
        for option in data["options"]:
            for field_name in ("requirements", "conflicts"):
                for ref in option.get(field_name) or []:
                    if ref not in option_ids:
                        errors.append(f"options/{option['id']}: {field_name} references unknown option {ref}")

    return errors


def _cycle_errors(data: Dict[str, Any]) -> List[str]:
    graph = {o["id"]: tuple(o.get("requirements") or ()) for o in data["options"]}
    return [
        "requirement cycle: " + " -> ".join(str(i) for i in cycle)
        for cycle in _find_cycles(graph)
    ]


def find_requirement_cycles(catalog: "Catalog") -> List[Tuple[int, ...]]:
    """
    Find cycles in the requirements graph of a catalog.

    The resolver terminates on cycles via its visited set, treating the
    rest of the cycle as already resolved. That is rarely what the
    catalog author meant, so editors should reject cycles up front.

    Args:
        catalog: Catalog snapshot to inspect

    Returns:
        Each cycle as a tuple of option ids, closed (first id repeated last)

    Example:
        >>> find_requirement_cycles(catalog)
        [(4, 7, 4)]
    """
    graph = {o.id: o.requirements for o in catalog.options}
    return _find_cycles(graph)


def _find_cycles(graph: Dict[int, Tuple[int, ...]]) -> List[Tuple[int, ...]]:
    """Iterative three-colour DFS; reports each back edge as one cycle."""
    white, grey, black = 0, 1, 2
    colour = {node: white for node in graph}
    cycles: List[Tuple[int, ...]] = []

    for root in sorted(graph):
        if colour[root] != white:
            continue
        path: List[int] = [root]
        stack: List[Tuple[int, Iterable[int]]] = [(root, iter(graph[root]))]
        colour[root] = grey
        while stack:
            node, children = stack[-1]
            advanced = False
            for child in children:
                if child not in graph:
                    continue
                if colour[child] == grey:
                    start = path.index(child)
                    cycles.append(tuple(path[start:]) + (child,))
                elif colour[child] == white:
                    colour[child] = grey
                    path.append(child)
                    stack.append((child, iter(graph[child])))
                    advanced = True
                    break
            if not advanced:
                colour[node] = black
                path.pop()
                stack.pop()

    if cycles:
        logger.debug(f"Found {len(cycles)} requirement cycle(s)")
    return cycles
