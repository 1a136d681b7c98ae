"""
Unit Tests for Catalog Models

Tests for the frozen catalog dataclasses and the indexed Catalog.
"""

import pytest

from home_configurator.core.models.catalog import (
    Catalog,
    Floor,
    FloorKind,
    HotspotPoint,
    Option,
    OptionSet,
    Placement,
    infer_floor_kind,
)


class TestHotspotPoint:
    """Tests for HotspotPoint."""

    def test_key_when_default_precision_then_four_decimals(self):
        """Keys use four decimals."""
        assert HotspotPoint(25, 40.5).key() == "25.0000,40.5000"

    def test_key_when_points_differ_below_precision_then_keys_match(self):
        """Near-identical points collapse to one key."""
        assert HotspotPoint(25.00001, 40).key() == HotspotPoint(25, 40).key()

    def test_from_dict_when_coordinate_missing_then_returns_none(self):
        assert HotspotPoint.from_dict({"x": 10, "y": None}) is None
        assert HotspotPoint.from_dict(None) is None


class TestPlacement:
    """Tests for Placement."""

    def test_from_dict_when_empty_then_full_background(self):
        assert Placement.from_dict(None) == Placement(0, 0, 100, 100)

    def test_init_when_negative_width_then_raises_error(self):
        with pytest.raises(ValueError, match="non-negative"):
            Placement(width=-1)

    def test_init_when_frozen_then_immutable(self):
        p = Placement()
        with pytest.raises(AttributeError):
            p.x = 5  # type: ignore


class TestFloorKind:
    """Tests for elevation inference from floor names."""

    @pytest.mark.parametrize("name", ["Front Elevation", "EXTERIOR", "Rear elevation view"])
    def test_infer_when_keyword_in_name_then_elevation(self, name):
        assert infer_floor_kind(name) is FloorKind.ELEVATION

    def test_infer_when_no_keyword_then_plan(self):
        assert infer_floor_kind("Main Floor") is FloorKind.PLAN


class TestCatalog:
    """Tests for Catalog indexing and ordering."""

    def test_sets_for_floor_when_called_then_ordered_by_position(self, catalog):
        assert [s.id for s in catalog.sets_for_floor(20)] == [200, 201, 202, 203]

    def test_options_for_set_when_positions_out_of_order_then_sorted(self):
        catalog = Catalog(
            options=[
                Option(id=2, name="B", option_set_id=1, position=1),
                Option(id=1, name="A", option_set_id=1, position=0),
            ],
            option_sets=[OptionSet(id=1, name="S", floor_id=1)],
        )
        assert [o.id for o in catalog.options_for_set(1)] == [1, 2]

    def test_floors_for_model_when_elevation_present_then_elevation_first(self, catalog):
        assert [f.id for f in catalog.floors_for_model(1)] == [10, 20, 30]

    def test_floors_for_model_when_ids_reversed_then_elevation_still_first(self):
        catalog = Catalog(floors=[
            Floor(id=1, name="Main", model_id=1),
            Floor(id=9, name="Elevation", model_id=1, kind=FloorKind.ELEVATION),
        ])
        assert [f.id for f in catalog.floors_for_model(1)] == [9, 1]

    def test_floor_of_option_when_known_then_returns_floor(self, catalog):
        assert catalog.floor_of_option(2010).id == 20

    def test_option_name_when_unknown_then_returns_id_string(self, catalog):
        assert catalog.option_name(999) == "999"

    def test_has_overlay_when_null_asset_then_false(self, catalog):
        assert catalog.option(2020).has_overlay is False
        assert catalog.option(2021).has_overlay is True
