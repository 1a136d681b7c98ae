"""
Unit Tests for Markup and Annotation History

History covers markup only; floor switches park markup per floor and
start a fresh history.
"""

import json

import pytest

from home_configurator.configurator.history import AnnotationHistory
from home_configurator.configurator.markup import (
    EDIT,
    FLOOR,
    MarkupBoard,
    MarkupLine,
    MarkupPath,
    MarkupText,
    markup_from_dict,
    markup_to_dict,
)

LINE_A = MarkupLine(0, 0, 10, 10)
LINE_B = MarkupLine(20, 20, 40, 20, color="#00ff00", width=5)
NOTE = MarkupText(5, 5, "Move wall")
STROKE = MarkupPath(((0, 0), (30, 10), (15, 40)), color="#0000ff", width=4)


@pytest.fixture
def board():
    return MarkupBoard(floor_id=20)


@pytest.fixture
def history(board):
    return AnnotationHistory(board)


class TestMarkupItems:
    """Tests for markup items and their dict form."""

    def test_to_dict_when_line_then_typed(self):
        assert markup_to_dict(LINE_B) == {
            "type": "line", "x1": 20, "y1": 20, "x2": 40, "y2": 20,
            "color": "#00ff00", "width": 5,
        }

    def test_from_dict_when_text_then_rebuilt(self):
        assert markup_from_dict(markup_to_dict(NOTE)) == NOTE

    def test_from_dict_when_unknown_type_then_raises(self):
        with pytest.raises(ValueError, match="Unknown markup type"):
            markup_from_dict({"type": "arrow"})

    def test_from_dict_when_field_missing_then_raises(self):
        with pytest.raises(ValueError, match="Invalid line markup"):
            markup_from_dict({"type": "line", "x1": 0})

    def test_bounds_when_line_then_padded_by_half_width(self):
        assert LINE_B.bounds() == (17.5, 17.5, 42.5, 22.5)

    def test_to_dict_when_path_then_points_as_lists(self):
        assert markup_to_dict(STROKE) == {
            "type": "path", "points": [[0, 0], [30, 10], [15, 40]],
            "color": "#0000ff", "width": 4,
        }

    def test_from_dict_when_path_then_rebuilt_with_tuples(self):
        assert markup_from_dict(markup_to_dict(STROKE)) == STROKE

    def test_from_dict_when_path_from_json_then_rebuilt(self):
        item = markup_from_dict(json.loads('{"type": "path", "points": [[1, 2], [3, 4]]}'))
        assert item == MarkupPath(((1.0, 2.0), (3.0, 4.0)))

    def test_from_dict_when_path_has_no_points_then_raises(self):
        with pytest.raises(ValueError, match="at least one point"):
            markup_from_dict({"type": "path", "points": []})

    def test_bounds_when_path_then_padded_by_half_width(self):
        assert STROKE.bounds() == (-2, -2, 32, 42)


class TestMarkupBoard:
    """Tests for MarkupBoard editing and floor parking."""

    def test_edit_when_items_change_then_listeners_notified(self, board):
        events = []
        board.subscribe(lambda b, event: events.append(event))
        board.add(LINE_A)
        board.update(0, LINE_B)
        board.remove(0)
        assert events == [EDIT, EDIT, EDIT]
        assert board.items == ()

    def test_clear_when_already_empty_then_no_event(self, board):
        events = []
        board.subscribe(lambda b, event: events.append(event))
        board.clear()
        assert events == []

    def test_switch_floor_when_called_then_markup_parked_and_restored(self, board):
        board.add(LINE_A)
        board.switch_floor(30)
        assert board.items == ()
        assert board.for_floor(20) == (LINE_A,)

        board.add(NOTE)
        board.switch_floor(20)
        assert board.items == (LINE_A,)
        assert board.for_floor(30) == (NOTE,)

    def test_switch_floor_when_same_floor_then_no_event(self, board):
        events = []
        board.subscribe(lambda b, event: events.append(event))
        board.switch_floor(20)
        board.switch_floor(30)
        assert events == [FLOOR]

    def test_remove_last_when_items_then_newest_removed(self, board):
        board.add(LINE_A)
        board.add(STROKE)
        assert board.remove_last()
        assert board.items == (LINE_A,)

    def test_remove_last_when_empty_then_false_and_no_event(self, board):
        events = []
        board.subscribe(lambda b, event: events.append(event))
        assert not board.remove_last()
        assert events == []

    def test_index_at_when_items_overlap_then_topmost(self, board):
        board.add(LINE_A)
        board.add(STROKE)
        assert board.index_at(5, 5) == 1
        assert board.index_at(31, 5) == 1
        assert board.index_at(100, 100) is None

    def test_bounds_when_items_then_union(self, board):
        board.add(LINE_A)
        board.add(LINE_B)
        assert board.bounds() == (-1.5, -1.5, 42.5, 22.5)


class TestAnnotationHistory:
    """Tests for undo/redo."""

    def test_undo_when_edits_then_steps_back(self, board, history):
        board.add(LINE_A)
        board.add(LINE_B)
        assert history.undo()
        assert board.items == (LINE_A,)
        assert history.undo()
        assert board.items == ()
        assert not history.undo()

    def test_redo_when_undone_then_steps_forward(self, board, history):
        board.add(LINE_A)
        history.undo()
        assert history.redo()
        assert board.items == (LINE_A,)
        assert not history.redo()

    def test_edit_when_after_undo_then_redo_branch_dropped(self, board, history):
        board.add(LINE_A)
        board.add(LINE_B)
        history.undo()
        board.add(NOTE)
        assert not history.can_redo
        assert board.items == (LINE_A, NOTE)
        assert len(history) == 3

    def test_undo_when_replaying_then_no_new_state_captured(self, board, history):
        board.add(LINE_A)
        board.add(LINE_B)
        history.undo()
        history.undo()
        assert len(history) == 3
        assert history.cursor == 0

    def test_switch_floor_when_called_then_history_restarts_from_parked_markup(self, board, history):
        board.add(LINE_A)
        board.switch_floor(30)
        assert not history.can_undo
        board.add(NOTE)
        board.switch_floor(20)

        assert board.items == (LINE_A,)
        assert not history.can_undo
        assert len(history) == 1

    def test_undo_when_path_added_then_removed_and_redo_restores(self, board, history):
        board.add(LINE_A)
        board.add(STROKE)
        assert history.undo()
        assert board.items == (LINE_A,)
        assert history.redo()
        assert board.items == (LINE_A, STROKE)

    def test_undo_when_path_removed_then_restored_in_place(self, board, history):
        board.add(STROKE)
        board.add(NOTE)
        board.remove(0)
        assert board.items == (NOTE,)
        history.undo()
        assert board.items == (STROKE, NOTE)

    def test_undo_when_last_deleted_then_item_returns(self, board, history):
        board.add(LINE_A)
        board.add(STROKE)
        board.remove_last()
        history.undo()
        assert board.items == (LINE_A, STROKE)
        assert history.can_redo

    def test_clear_when_undone_then_items_return(self, board, history):
        board.add(LINE_A)
        board.add(NOTE)
        board.clear()
        history.undo()
        assert board.items == (LINE_A, NOTE)
