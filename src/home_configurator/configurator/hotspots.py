"""
Module: configurator.hotspots

Purpose:
    Maps clickable hotspot coordinates on a floor to the option sets and
    options they open. Co-located hotspots collapse into one icon keyed
    by their rounded coordinate.

Key Classes:
    - HotspotTarget: (id, kind) entry behind a hotspot
    - HotspotGroup: All targets sharing one coordinate key
    - HotspotPanel: One option set's options, as shown when a hotspot opens
    - HotspotMapper: Grouping, resolution and panel building

Dependencies:
    - core.models: Catalog, SelectionState

Used By:
    - configurator.compositor: Hotspot icon layers
    - configurator.session: resolve_hotspot
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Tuple

from home_configurator.core.errors import UnknownFloorError
from home_configurator.core.models.catalog import (
    Catalog,
    HotspotPoint,
    IconMode,
    Option,
    OptionSet,
)
from home_configurator.core.models.selection import SelectionState

logger = logging.getLogger(__name__)


class TargetKind(str, Enum):
    SET = "set"
    OPTION = "option"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class HotspotTarget:
    id: int
    kind: TargetKind


@dataclass(frozen=True)
class HotspotGroup:
    """Targets sharing a coordinate key, in discovery order."""
    key: str
    point: HotspotPoint
    targets: Tuple[HotspotTarget, ...]


@dataclass(frozen=True)
class HotspotPanel:
    option_set: OptionSet
    options: Tuple[Option, ...]


class HotspotMapper:
    """
    Groups hotspots on a floor by rounded coordinate.

    Set-level hotspots come from option sets in set-level icon mode that
    carry a coordinate. Option-level hotspots come from options with a
    coordinate inside option-level sets; an option that has requirements
    only shows once at least one of them is selected.

    Example:
        >>> mapper = HotspotMapper(catalog)
        >>> [g.key for g in mapper.groups(floor_id=2, selection=selection)]
        ['41.2500,63.0000', '70.0000,12.5000']
    """

    def __init__(self, catalog: Catalog, precision: int = 4) -> None:
        self.catalog = catalog
        self.precision = precision

    def groups(self, floor_id: int, selection: SelectionState) -> List[HotspotGroup]:
        """Hotspot groups on a floor, ordered by first appearance."""
        if self.catalog.floor(floor_id) is None:
            raise UnknownFloorError(floor_id)

        points: Dict[str, HotspotPoint] = {}
        targets: Dict[str, List[HotspotTarget]] = {}

        def collect(point: HotspotPoint, target: HotspotTarget) -> None:
            key = point.key(self.precision)
            if key not in targets:
                points[key] = point
                targets[key] = []
            targets[key].append(target)

        selected = selection.all_selected()
        for option_set in self.catalog.sets_for_floor(floor_id):
            if option_set.icon_mode is IconMode.SET_LEVEL:
                if option_set.hotspot is not None:
                    collect(option_set.hotspot, HotspotTarget(option_set.id, TargetKind.SET))
                continue
            for option in self.catalog.options_for_set(option_set.id):
                if option.hotspot is None:
                    continue
                if option.requirements and not any(r in selected for r in option.requirements):
                    continue
                collect(option.hotspot, HotspotTarget(option.id, TargetKind.OPTION))

        return [HotspotGroup(key, points[key], tuple(targets[key])) for key in targets]

    def resolve(self, floor_id: int, selection: SelectionState, key: str) -> List[HotspotTarget]:
        """Targets behind a hotspot key; empty if the key is not on the floor."""
        for group in self.groups(floor_id, selection):
            if group.key == key:
                return list(group.targets)
        logger.debug(f"No hotspot at {key} on floor {floor_id}")
        return []

    def panel_for(self, targets: Iterable[HotspotTarget]) -> List[HotspotPanel]:
        """
        Option panels for a set of hotspot targets.

        Set targets expand to every option in the set. Options are
        grouped per set, sets ordered by position, options by position,
        each option listed once.
        """
        by_set: Dict[int, Dict[int, Option]] = {}
        for target in targets:
            if target.kind is TargetKind.SET:
                for option in self.catalog.options_for_set(target.id):
                    by_set.setdefault(target.id, {})[option.id] = option
            else:
                option = self.catalog.option(target.id)
                if option is not None:
                    by_set.setdefault(option.option_set_id, {})[option.id] = option

        panels: List[HotspotPanel] = []
        for set_id, options in by_set.items():
            option_set = self.catalog.option_set(set_id)
            if option_set is None:
                continue
            ordered = sorted(options.values(), key=lambda o: (o.position, o.id))
            panels.append(HotspotPanel(option_set, tuple(ordered)))
        panels.sort(key=lambda p: (p.option_set.position, p.option_set.id))
        return panels
