"""
Unit Tests for Hotspot Grouping and Panels
"""

import pytest

from home_configurator.configurator.hotspots import HotspotMapper, HotspotTarget, TargetKind
from home_configurator.core.errors import UnknownFloorError
from home_configurator.core.models.selection import SelectionState


@pytest.fixture
def mapper(catalog):
    return HotspotMapper(catalog)


class TestGroups:
    """Tests for HotspotMapper.groups()."""

    def test_groups_when_coordinates_round_equal_then_merged(self, mapper):
        groups = mapper.groups(20, SelectionState())
        kitchen = groups[0]
        assert kitchen.key == "25.0000,40.0000"
        assert kitchen.targets == (
            HotspotTarget(200, TargetKind.SET),
            HotspotTarget(202, TargetKind.SET),
        )

    def test_groups_when_requirement_unselected_then_option_hidden(self, mapper):
        keys = [g.key for g in mapper.groups(20, SelectionState())]
        assert keys == ["25.0000,40.0000", "70.0000,50.0000"]

    def test_groups_when_requirement_selected_then_option_shown(self, mapper):
        keys = [g.key for g in mapper.groups(20, SelectionState({200: [2001]}))]
        assert keys == ["25.0000,40.0000", "60.0000,50.0000", "70.0000,50.0000"]

    def test_groups_when_precision_lowered_then_keys_shorter(self, catalog):
        keys = [g.key for g in HotspotMapper(catalog, precision=0).groups(20, SelectionState())]
        assert keys[0] == "25,40"

    def test_groups_when_floor_has_no_hotspots_then_empty(self, mapper):
        assert mapper.groups(10, SelectionState()) == []

    def test_groups_when_unknown_floor_then_raises(self, mapper):
        with pytest.raises(UnknownFloorError):
            mapper.groups(999, SelectionState())


class TestResolve:
    """Tests for HotspotMapper.resolve()."""

    def test_resolve_when_key_known_then_targets(self, mapper):
        targets = mapper.resolve(20, SelectionState(), "70.0000,50.0000")
        assert targets == [HotspotTarget(2011, TargetKind.OPTION)]

    def test_resolve_when_key_unknown_then_empty(self, mapper):
        assert mapper.resolve(20, SelectionState(), "1.0000,1.0000") == []


class TestPanelFor:
    """Tests for HotspotMapper.panel_for()."""

    def test_panel_for_when_set_targets_then_all_options_by_position(self, mapper):
        panels = mapper.panel_for([
            HotspotTarget(202, TargetKind.SET),
            HotspotTarget(200, TargetKind.SET),
        ])
        assert [p.option_set.id for p in panels] == [200, 202]
        assert [o.id for o in panels[0].options] == [2000, 2001]
        assert [o.id for o in panels[1].options] == [2020, 2021]

    def test_panel_for_when_option_targets_then_grouped_by_set(self, mapper):
        panels = mapper.panel_for([
            HotspotTarget(2011, TargetKind.OPTION),
            HotspotTarget(2010, TargetKind.OPTION),
        ])
        [panel] = panels
        assert panel.option_set.id == 201
        assert [o.id for o in panel.options] == [2010, 2011]

    def test_panel_for_when_option_repeated_then_listed_once(self, mapper):
        panels = mapper.panel_for([
            HotspotTarget(2011, TargetKind.OPTION),
            HotspotTarget(2011, TargetKind.OPTION),
        ])
        assert [o.id for o in panels[0].options] == [2011]

    def test_panel_for_when_unknown_option_then_skipped(self, mapper):
        assert mapper.panel_for([HotspotTarget(9999, TargetKind.OPTION)]) == []
