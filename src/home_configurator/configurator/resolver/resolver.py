"""
Module: configurator.resolver.resolver

Purpose:
    Validates and atomically applies selection changes under the
    catalog's requirement and conflict rules.

Key Functions:
    - apply_action(): Functional entry point

Key Classes:
    - ConstraintResolver: Decision logic over Catalog + SelectionState

Algorithm (Select):
    1. Conflict check of the target against the current selection
    2. Depth-first walk of the requirements graph with a visited set;
       each required option not yet selected is conflict-checked
       against the current selection and queued
    3. Commit target + queued options into a staged copy
    4. Elevation exclusivity: clear sibling sets on an elevation floor
    5. Verify the staged copy still satisfies every invariant, then
       swap it in. Any failure leaves the selection untouched.

Dependencies:
    - core.models: Catalog, SelectionState
    - .rejections: Rejection values

Used By:
    - configurator.session: Applies UI actions
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Set, Tuple

from home_configurator.core.errors import UnknownOptionError
from home_configurator.core.models.catalog import Catalog, Option
from home_configurator.core.models.selection import SelectionState

from .actions import Action, Deselect, Select
from .rejections import (
    ApplyResult,
    BlockedByTransitiveConflict,
    ConflictDetected,
    Rejection,
    RequiredByOthers,
)

logger = logging.getLogger(__name__)


def apply_action(
    catalog: Catalog,
    selection: SelectionState,
    action: Action,
    *,
    active_floor_id: Optional[int] = None,
) -> ApplyResult:
    """
    Apply a selection change.

    Args:
        catalog: Catalog snapshot
        selection: Session selection, mutated in place on success only
        action: Select or Deselect
        active_floor_id: Floor currently shown, for elevation exclusivity

    Returns:
        ApplyResult; `error` is set and `selection` untouched on rejection

    Raises:
        UnknownOptionError: If the action names an option not in the catalog

    Example:
        >>> result = apply_action(catalog, selection, Select(12), active_floor_id=2)
        >>> result.ok
        True
    """
    return ConstraintResolver(catalog).apply(selection, action, active_floor_id=active_floor_id)


class ConstraintResolver:
    """
    Pure decision function over a catalog and a selection.

    Holds no selection state of its own; the session passes its
    SelectionState in on every call. Runs synchronously, so no other
    mutation can interleave with a resolution.
    """

    def __init__(self, catalog: Catalog) -> None:
        self.catalog = catalog

    def apply(
        self,
        selection: SelectionState,
        action: Action,
        *,
        active_floor_id: Optional[int] = None,
    ) -> ApplyResult:
        """Apply an action; see `apply_action`."""
        target = self._require_option(action.option_id)

        if isinstance(action, Deselect):
            error = self._deselect(selection, target)
        elif isinstance(action, Select):
            error = self._select(selection, target, active_floor_id)
        else:
            raise TypeError(f"Unsupported action: {action!r}")

        if error is not None:
            logger.info(f"Rejected {type(action).__name__}({target.id}): {type(error).__name__}")
        return ApplyResult(selection=selection, error=error)

    def toggle(
        self,
        selection: SelectionState,
        option_id: int,
        *,
        active_floor_id: Optional[int] = None,
    ) -> ApplyResult:
        """Deselect the option if selected, otherwise select it."""
        action: Action = Deselect(option_id) if selection.is_selected(option_id) else Select(option_id)
        return self.apply(selection, action, active_floor_id=active_floor_id)

    # ─────────────────────────────────────────────────────────────────────────
    # Deselect
    # ─────────────────────────────────────────────────────────────────────────

    def _deselect(self, selection: SelectionState, target: Option) -> Optional[Rejection]:
        if not selection.is_selected(target.id):
            return None

        dependents = self.reverse_dependents(selection, target.id)
        if dependents:
            return RequiredByOthers(
                option_id=target.id,
                option_name=target.name,
                dependent_ids=tuple(d.id for d in dependents),
                dependent_names=tuple(d.name for d in dependents),
            )

        option_set = self.catalog.option_set(target.option_set_id)
        if option_set is not None and not option_set.allow_multiple:
            selection.clear_set(target.option_set_id)
        else:
            selection.remove(target.option_set_id, target.id)
        logger.debug(f"Deselected option {target.id} ({target.name})")
        return None

    def reverse_dependents(self, selection: SelectionState, option_id: int) -> List[Option]:
        """Selected options (other than `option_id`) whose requirements include it."""
        dependents: List[Option] = []
        for selected_id in self._selected_in_order(selection):
            if selected_id == option_id:
                continue
            option = self.catalog.option(selected_id)
            if option is not None and option_id in option.requirements:
                dependents.append(option)
        return dependents

    # ─────────────────────────────────────────────────────────────────────────
    # Select
    # ─────────────────────────────────────────────────────────────────────────

    def _select(
        self,
        selection: SelectionState,
        target: Option,
        active_floor_id: Optional[int],
    ) -> Optional[Rejection]:
        if selection.is_selected(target.id):
            return None

        selected = selection.all_selected()

        conflicts = self.conflicts_with(selected, target)
        if conflicts:
            return ConflictDetected(
                option_id=target.id,
                option_name=target.name,
                conflict_ids=tuple(conflicts),
                conflict_names=tuple(self.catalog.option_name(c) for c in conflicts),
            )

        queued, blocker = self._collect_requirements(selected, target)
        if blocker is not None:
            source, blocking_ids = blocker
            return BlockedByTransitiveConflict(
                option_id=target.id,
                option_name=target.name,
                source_id=source.id,
                source_name=source.name,
                conflict_ids=tuple(blocking_ids),
                conflict_names=tuple(self.catalog.option_name(c) for c in blocking_ids),
            )

        staged = selection.copy()
        committed = [target] + queued
        for option in committed:
            self._insert(staged, option)

        self._apply_elevation_exclusivity(staged, target, committed, active_floor_id)

        error = self._verify(staged, selection, target, queued)
        if error is not None:
            return error

        selection.assign(staged)
        if queued:
            logger.debug(
                f"Selected option {target.id} ({target.name}) with requirements "
                f"{[o.id for o in queued]}"
            )
        else:
            logger.debug(f"Selected option {target.id} ({target.name})")
        return None

    def conflicts_with(self, selected: Set[int], option: Option) -> List[int]:
        """
        Selected option ids that conflict with `option`.

        Direct conflicts (listed on the option) come first, then reverse
        conflicts (selected options listing it), de-duplicated.
        """
        found: List[int] = [c for c in option.conflicts if c in selected]
        for selected_id in sorted(selected):
            other = self.catalog.option(selected_id)
            if other is not None and option.id in other.conflicts and selected_id not in found:
                found.append(selected_id)
        return found

    def _collect_requirements(
        self,
        selected: Set[int],
        target: Option,
    ) -> Tuple[List[Option], Optional[Tuple[Option, List[int]]]]:
        """
        Walk the requirements graph depth-first from `target`.

        Cycles terminate through the visited set; the remainder of a
        cycle is treated as already resolved. Required ids missing from
        the catalog are skipped.

        Returns:
            (queued options in walk order, blocker) where blocker is the
            first required option that conflicts with the current
            selection, paired with the conflicting ids
        """
        queued: List[Option] = []
        visited: Set[int] = {target.id}
        stack: List[int] = list(reversed(target.requirements))

        while stack:
            option_id = stack.pop()
            if option_id in visited:
                continue
            visited.add(option_id)

            option = self.catalog.option(option_id)
            if option is None:
                logger.debug(f"Skipping unknown required option {option_id}")
                continue

            if option_id not in selected:
                blocking = self.conflicts_with(selected, option)
                if blocking:
                    return queued, (option, blocking)
                queued.append(option)

            stack.extend(reversed(option.requirements))

        return queued, None

    def _insert(self, staged: SelectionState, option: Option) -> None:
        option_set = self.catalog.option_set(option.option_set_id)
        if option_set is not None and option_set.allow_multiple:
            staged.add(option.option_set_id, option.id)
        else:
            staged.replace(option.option_set_id, [option.id])

    def _apply_elevation_exclusivity(
        self,
        staged: SelectionState,
        target: Option,
        committed: List[Option],
        active_floor_id: Optional[int],
    ) -> None:
        """On an elevation floor, only the target's set may hold a choice."""
        if active_floor_id is None:
            return
        floor = self.catalog.floor(active_floor_id)
        if floor is None or not floor.is_elevation:
            return
        target_set = self.catalog.option_set(target.option_set_id)
        if target_set is None or target_set.floor_id != floor.id:
            return

        committed_sets = {o.option_set_id for o in committed}
        for sibling in self.catalog.sets_for_floor(floor.id):
            if sibling.id != target_set.id and sibling.id not in committed_sets:
                staged.clear_set(sibling.id)

    def _verify(
        self,
        staged: SelectionState,
        current: SelectionState,
        target: Option,
        queued: List[Option],
    ) -> Optional[Rejection]:
        """
        Check the staged selection before it replaces the current one.

        Catches what the per-option checks above cannot see: queued
        options conflicting with each other or with the target, and
        options displaced by single-select replacement or elevation
        exclusivity that other selected options still require.
        """
        staged_ids = staged.all_selected()

        for option in queued:
            clashes = [
                other_id for other_id in self.conflicts_with(staged_ids, option)
                if other_id != option.id
            ]
            if clashes:
                return BlockedByTransitiveConflict(
                    option_id=target.id,
                    option_name=target.name,
                    source_id=option.id,
                    source_name=option.name,
                    conflict_ids=tuple(clashes),
                    conflict_names=tuple(self.catalog.option_name(c) for c in clashes),
                )

        displaced = current.all_selected() - staged_ids
        if not displaced:
            return None

        for displaced_id in self._ordered(displaced, current):
            orphaned = [
                dependent for dependent in self.reverse_dependents(staged, displaced_id)
                if not any(req in staged_ids for req in dependent.requirements)
            ]
            if orphaned:
                return RequiredByOthers(
                    option_id=displaced_id,
                    option_name=self.catalog.option_name(displaced_id),
                    dependent_ids=tuple(d.id for d in orphaned),
                    dependent_names=tuple(d.name for d in orphaned),
                )
        return None

    # ─────────────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────────────

    def _require_option(self, option_id: int) -> Option:
        option = self.catalog.option(option_id)
        if option is None:
            raise UnknownOptionError(option_id)
        return option

    @staticmethod
    def _selected_in_order(selection: SelectionState) -> List[int]:
        ordered: List[int] = []
        for _, ids in selection.items():
            ordered.extend(ids)
        return ordered

    def _ordered(self, ids: Set[int], selection: SelectionState) -> List[int]:
        return [i for i in self._selected_in_order(selection) if i in ids]


def check_invariants(catalog: Catalog, selection: SelectionState) -> Dict[str, List[int]]:
    """
    Report invariant violations in a selection.

    Returns:
        Dict with "conflicts" (option ids in a conflicting pair),
        "unsatisfied" (option ids with no requirement selected) and
        "overfull_sets" (single-select set ids holding more than one id)
    """
    selected = selection.all_selected()
    report: Dict[str, List[int]] = {"conflicts": [], "unsatisfied": [], "overfull_sets": []}

    resolver = ConstraintResolver(catalog)
    for option_id in sorted(selected):
        option = catalog.option(option_id)
        if option is None:
            continue
        if resolver.conflicts_with(selected - {option_id}, option):
            report["conflicts"].append(option_id)
        if option.requirements and not any(r in selected for r in option.requirements):
            report["unsatisfied"].append(option_id)

    for set_id, ids in selection.items():
        option_set = catalog.option_set(set_id)
        if option_set is not None and not option_set.allow_multiple and len(ids) > 1:
            report["overfull_sets"].append(set_id)

    return report
