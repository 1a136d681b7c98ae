"""
Module: configurator.review

Purpose:
    Read-only summary of a model's selection, floor by floor, as shown
    on the review page.

Key Functions:
    - summarize(): Selection -> ordered FloorSummary list
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from home_configurator.core.models.catalog import Catalog, Floor, Option, OptionSet
from home_configurator.core.models.selection import SelectionState


@dataclass(frozen=True)
class SetSummary:
    option_set: OptionSet
    options: Tuple[Option, ...]


@dataclass(frozen=True)
class FloorSummary:
    floor: Floor
    sets: Tuple[SetSummary, ...]

    @property
    def codes(self) -> List[str]:
        """Option codes on this floor, skipping options without one."""
        return [o.code for s in self.sets for o in s.options if o.code]


def summarize(catalog: Catalog, model_id: int, selection: SelectionState) -> List[FloorSummary]:
    """
    Selected options per floor, in configurator floor order.

    Sets and options follow catalog position order; floors and sets with
    nothing selected are left out.
    """
    summaries: List[FloorSummary] = []
    for floor in catalog.floors_for_model(model_id):
        sets: List[SetSummary] = []
        for option_set in catalog.sets_for_floor(floor.id):
            chosen = tuple(
                o for o in catalog.options_for_set(option_set.id)
                if o.id in selection.selected_in(option_set.id)
            )
            if chosen:
                sets.append(SetSummary(option_set, chosen))
        if sets:
            summaries.append(FloorSummary(floor, tuple(sets)))
    return summaries
