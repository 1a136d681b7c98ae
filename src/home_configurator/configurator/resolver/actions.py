"""
Module: configurator.resolver.actions

Purpose:
    Selection change requests accepted by the constraint resolver.

Key Classes:
    - Select: Add an option (and its transitive requirements)
    - Deselect: Remove an option
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Select:
    """Request to select an option."""
    option_id: int


@dataclass(frozen=True)
class Deselect:
    """Request to deselect an option."""
    option_id: int


Action = Union[Select, Deselect]
