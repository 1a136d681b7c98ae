"""
Module: configurator.resolver

Purpose:
    Selection constraint resolution. Keeps the session's SelectionState
    consistent under requirement and conflict rules, applying every
    change atomically or not at all.

Key Functions:
    - apply_action(): Functional entry point
    - check_invariants(): Report violations in a selection

Key Classes:
    - ConstraintResolver: Decision logic
    - Select, Deselect: Actions
    - ConflictDetected, RequiredByOthers, BlockedByTransitiveConflict: Rejections
    - ApplyResult: Outcome of an action

Used By:
    - configurator.session
"""

from .actions import Action, Deselect, Select
from .rejections import (
    ApplyResult,
    BlockedByTransitiveConflict,
    ConflictDetected,
    Rejection,
    RequiredByOthers,
)
from .resolver import ConstraintResolver, apply_action, check_invariants

__all__ = [
    "Action",
    "Select",
    "Deselect",
    "ApplyResult",
    "Rejection",
    "ConflictDetected",
    "RequiredByOthers",
    "BlockedByTransitiveConflict",
    "ConstraintResolver",
    "apply_action",
    "check_invariants",
]
