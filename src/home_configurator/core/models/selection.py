"""
Module: selection

Purpose:
    Provides SelectionState, the session-owned mapping of option set id
    to the ordered list of chosen option ids.

Key Functions:
    - SelectionState.selected_in(set_id): Chosen ids for one set
    - SelectionState.all_selected(): Every chosen id across sets
    - SelectionState.copy(): Independent copy for staging changes

Dependencies:
    - typing (std)

Used By:
    - configurator.resolver: The only writer
    - configurator.compositor: Reads to decide which layers exist
    - configurator.hotspots: Reads to filter option-level hotspots
    - core.utils.serialization: JSON round-trip

Invariants (maintained by the resolver, not enforced here):
    - Single-select sets hold at most one id
    - No two selected options conflict, directly or in reverse
    - Every selected option with requirements has one of them selected
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Set, Tuple


class SelectionState:
    """
    Mutable mapping of option set id -> ordered, duplicate-free option ids.

    Empty sets are dropped rather than stored, so two states with the
    same chosen options always compare equal.

    Example:
        >>> state = SelectionState()
        >>> state.replace(3, [12])
        >>> state.add(4, 20)
        >>> state.all_selected()
        {12, 20}
    """

    def __init__(self, initial: Dict[int, List[int]] | None = None) -> None:
        self._sets: Dict[int, List[int]] = {}
        for set_id, option_ids in (initial or {}).items():
            for option_id in option_ids:
                self.add(set_id, option_id)

    # ─────────────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────────────

    def selected_in(self, set_id: int) -> List[int]:
        """Chosen option ids for a set, in selection order."""
        return list(self._sets.get(set_id, []))

    def all_selected(self) -> Set[int]:
        """Every chosen option id across all sets."""
        return {option_id for ids in self._sets.values() for option_id in ids}

    def is_selected(self, option_id: int) -> bool:
        return any(option_id in ids for ids in self._sets.values())

    def items(self) -> Iterator[Tuple[int, List[int]]]:
        for set_id, ids in self._sets.items():
            yield set_id, list(ids)

    def is_empty(self) -> bool:
        return not self._sets

    # ─────────────────────────────────────────────────────────────────────────
    # Mutation
    # ─────────────────────────────────────────────────────────────────────────

    def add(self, set_id: int, option_id: int) -> None:
        """Append an option to a set, ignoring duplicates."""
        ids = self._sets.setdefault(set_id, [])
        if option_id not in ids:
            ids.append(option_id)

    def replace(self, set_id: int, option_ids: List[int]) -> None:
        """Replace a set's selection wholesale."""
        deduped: List[int] = []
        for option_id in option_ids:
            if option_id not in deduped:
                deduped.append(option_id)
        if deduped:
            self._sets[set_id] = deduped
        else:
            self._sets.pop(set_id, None)

    def remove(self, set_id: int, option_id: int) -> None:
        ids = self._sets.get(set_id)
        if not ids or option_id not in ids:
            return
        ids.remove(option_id)
        if not ids:
            del self._sets[set_id]

    def clear_set(self, set_id: int) -> None:
        self._sets.pop(set_id, None)

    def clear(self) -> None:
        self._sets.clear()

    def assign(self, other: SelectionState) -> None:
        """Overwrite this state with the contents of another."""
        self._sets = {set_id: list(ids) for set_id, ids in other._sets.items()}

    def copy(self) -> SelectionState:
        clone = SelectionState()
        clone._sets = {set_id: list(ids) for set_id, ids in self._sets.items()}
        return clone

    # ─────────────────────────────────────────────────────────────────────────
    # Dunder
    # ─────────────────────────────────────────────────────────────────────────

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SelectionState):
            return NotImplemented
        return self._sets == other._sets

    def __len__(self) -> int:
        return sum(len(ids) for ids in self._sets.values())

    def __repr__(self) -> str:
        return f"SelectionState({self._sets!r})"
