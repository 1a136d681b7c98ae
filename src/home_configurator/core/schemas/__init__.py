"""
Schemas Package

JSON schema definitions and catalog validation utilities.
"""

from .validator import (
    validate_catalog,
    find_requirement_cycles,
    CatalogValidationError,
    CATALOG_SCHEMA_VERSION,
)

__all__ = [
    "validate_catalog",
    "find_requirement_cycles",
    "CatalogValidationError",
    "CATALOG_SCHEMA_VERSION",
]
