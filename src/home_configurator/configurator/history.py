"""
Module: configurator.history

Purpose:
    Linear undo/redo over markup-only snapshots. Overlays and hotspots
    are never part of a snapshot; they follow the selection.

Key Classes:
    - AnnotationHistory: Snapshot list plus cursor, bound to a MarkupBoard
"""

from __future__ import annotations

import logging
from typing import List

from .markup import FLOOR, MarkupBoard

logger = logging.getLogger(__name__)


class AnnotationHistory:
    """
    Undo/redo stack for a MarkupBoard.

    Every edit on the board captures a snapshot, dropping anything after
    the cursor. Undo and redo replace the board's markup wholesale; the
    resulting change notification is ignored while replaying. A floor
    switch starts a fresh history whose base is the restored markup.

    Example:
        >>> history = AnnotationHistory(board)
        >>> board.add(MarkupLine(0, 0, 10, 10))
        >>> history.undo()
        True
        >>> len(board)
        0
    """

    def __init__(self, board: MarkupBoard) -> None:
        self.board = board
        self._states: List[str] = [board.serialize()]
        self._cursor = 0
        self._replaying = False
        board.subscribe(self._on_board_change)

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._states) - 1

    @property
    def cursor(self) -> int:
        return self._cursor

    def __len__(self) -> int:
        return len(self._states)

    def _on_board_change(self, board: MarkupBoard, event: str) -> None:
        if event == FLOOR:
            self.reset()
        else:
            self.capture()

    def capture(self) -> None:
        """Record the board's current markup as the newest state."""
        if self._replaying:
            return
        del self._states[self._cursor + 1:]
        self._states.append(self.board.serialize())
        self._cursor = len(self._states) - 1

    def undo(self) -> bool:
        """Step back one state. Returns False at the start of history."""
        if not self.can_undo:
            return False
        self._cursor -= 1
        self._replay()
        return True

    def redo(self) -> bool:
        """Step forward one state. Returns False at the end of history."""
        if not self.can_redo:
            return False
        self._cursor += 1
        self._replay()
        return True

    def reset(self) -> None:
        self._states = [self.board.serialize()]
        self._cursor = 0

    def _replay(self) -> None:
        self._replaying = True
        try:
            self.board.restore(self._states[self._cursor])
        finally:
            self._replaying = False
        logger.debug(f"History at {self._cursor + 1}/{len(self._states)}")
