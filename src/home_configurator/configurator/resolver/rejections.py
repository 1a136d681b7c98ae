"""
Module: configurator.resolver.rejections

Purpose:
    Reasons the constraint resolver refuses a selection change. These are
    expected, recoverable outcomes returned as values, not raised.
    Each carries a user-facing `message` shown verbatim by the UI.

Key Classes:
    - Rejection: Base class
    - ConflictDetected: Target conflicts with the current selection
    - RequiredByOthers: Removing the option would orphan dependents
    - BlockedByTransitiveConflict: A required option conflicts with the selection
    - ApplyResult: Outcome of `ConstraintResolver.apply`
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from home_configurator.core.models.selection import SelectionState


@dataclass(frozen=True)
class Rejection:
    """Base class for rejected selection changes."""
    option_id: int
    option_name: str

    @property
    def message(self) -> str:
        return f"Cannot change {self.option_name}."

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class ConflictDetected(Rejection):
    """The target conflicts (directly or in reverse) with selected options."""
    conflict_ids: Tuple[int, ...] = ()
    conflict_names: Tuple[str, ...] = ()

    @property
    def message(self) -> str:
        return (
            f"Conflict detected. {self.option_name} cannot be used with: "
            f"{', '.join(self.conflict_names)}. "
            f"Please deselect conflicting options first."
        )


@dataclass(frozen=True)
class RequiredByOthers(Rejection):
    """Selected options require the option being removed."""
    dependent_ids: Tuple[int, ...] = ()
    dependent_names: Tuple[str, ...] = ()

    @property
    def message(self) -> str:
        return (
            f"Cannot deselect {self.option_name}. It is required by: "
            f"{', '.join(self.dependent_names)}. "
            f"Please deselect those options first."
        )


@dataclass(frozen=True)
class BlockedByTransitiveConflict(Rejection):
    """A (transitively) required option conflicts with the selection."""
    source_id: int = 0
    source_name: str = ""
    conflict_ids: Tuple[int, ...] = ()
    conflict_names: Tuple[str, ...] = ()

    @property
    def message(self) -> str:
        return (
            f"Cannot select {self.option_name}. It requires {self.source_name}, "
            f"which conflicts with: {', '.join(self.conflict_names)}."
        )


@dataclass(frozen=True)
class ApplyResult:
    """
    Outcome of applying an action.

    Attributes:
        selection: The session's selection (unchanged when rejected)
        error: Rejection reason, or None on success
    """
    selection: SelectionState
    error: Optional[Rejection] = None

    @property
    def ok(self) -> bool:
        return self.error is None
