"""
Unit Tests for Catalog Validation
"""

import pytest

from home_configurator.core.schemas import (
    CatalogValidationError,
    find_requirement_cycles,
    validate_catalog,
)
from home_configurator.core.utils.serialization import deserialize_catalog


def _option(option_id, requirements=(), conflicts=(), option_set_id=200, position=None):
    return {
        "id": option_id,
        "name": f"Option {option_id}",
        "option_set_id": option_set_id,
        "position": option_id if position is None else position,
        "requirements": list(requirements),
        "conflicts": list(conflicts),
    }


class TestValidateCatalog:
    """Tests for schema and integrity validation."""

    def test_validate_when_valid_then_passes(self, catalog_data):
        validate_catalog(catalog_data)
        validate_catalog(catalog_data, strict=True)

    def test_validate_when_wrong_type_then_schema_error(self, catalog_data):
        catalog_data["options"][0]["id"] = "1000"
        with pytest.raises(CatalogValidationError) as exc:
            validate_catalog(catalog_data)
        assert exc.value.path == "schema"
        assert any("options/0/id" in e for e in exc.value.errors)

    def test_validate_when_duplicate_id_then_integrity_error(self, catalog_data):
        catalog_data["options"].append(dict(catalog_data["options"][0], position=99))
        with pytest.raises(CatalogValidationError) as exc:
            validate_catalog(catalog_data)
        assert "options: duplicate id 1000" in exc.value.errors

    def test_validate_when_unknown_parent_then_integrity_error(self, catalog_data):
        catalog_data["option_sets"][0]["floor_id"] = 99
        with pytest.raises(CatalogValidationError) as exc:
            validate_catalog(catalog_data)
        assert "option_sets/100: unknown floor_id 99" in exc.value.errors

    def test_validate_when_duplicate_position_then_integrity_error(self, catalog_data):
        catalog_data["options"][1]["position"] = 0
        with pytest.raises(CatalogValidationError) as exc:
            validate_catalog(catalog_data)
        assert "option_sets/100: duplicate option position 0" in exc.value.errors

    def test_validate_when_dangling_reference_then_only_strict_fails(self, catalog_data):
        catalog_data["options"].append(_option(4000, requirements=[9999], position=50))
        validate_catalog(catalog_data)
        with pytest.raises(CatalogValidationError) as exc:
            validate_catalog(catalog_data, strict=True)
        assert "options/4000: requirements references unknown option 9999" in exc.value.errors

    def test_validate_when_requirement_cycle_then_only_strict_fails(self, catalog_data):
        catalog_data["options"] += [
            _option(4000, requirements=[4001], position=50),
            _option(4001, requirements=[4000], position=51),
        ]
        validate_catalog(catalog_data)
        with pytest.raises(CatalogValidationError) as exc:
            validate_catalog(catalog_data, strict=True)
        assert "requirement cycle: 4000 -> 4001 -> 4000" in exc.value.errors


class TestFindRequirementCycles:
    """Tests for authoring-time cycle detection."""

    def test_find_when_acyclic_then_empty(self, catalog):
        assert find_requirement_cycles(catalog) == []

    def test_find_when_self_requirement_then_reported(self, catalog_data):
        catalog_data["options"].append(_option(4000, requirements=[4000], position=50))
        catalog = deserialize_catalog(catalog_data)
        assert find_requirement_cycles(catalog) == [(4000, 4000)]

    def test_find_when_three_cycle_then_closed_path(self, catalog_data):
        catalog_data["options"] += [
            _option(4000, requirements=[4001], position=50),
            _option(4001, requirements=[4002], position=51),
            _option(4002, requirements=[4000], position=52),
        ]
        catalog = deserialize_catalog(catalog_data)
        assert find_requirement_cycles(catalog) == [(4000, 4001, 4002, 4000)]
