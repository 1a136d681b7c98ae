"""
Module: configurator.catalog_source

Purpose:
    Catalog collaborators. A source fetches the catalog once per
    session; the result is a read-only snapshot.

Key Classes:
    - CatalogSource: Abstract async fetch
    - JsonCatalogSource: Catalog document on disk
    - DictCatalogSource: Catalog document already in memory

Dependencies:
    - core.utils.serialization: Validation and model building

Used By:
    - configurator.session: load()
"""

from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterable, Union

from home_configurator.core.errors import CatalogFetchError
from home_configurator.core.models.catalog import ELEVATION_KEYWORDS, Catalog
from home_configurator.core.schemas.validator import CatalogValidationError, validate_catalog
from home_configurator.core.utils.serialization import deserialize_catalog

logger = logging.getLogger(__name__)


class CatalogSource(ABC):
    """Supplies the catalog for a session."""

    @abstractmethod
    async def fetch(self) -> Catalog:
        """
        Fetch and build the catalog.

        Raises:
            CatalogFetchError: If the catalog cannot be read or is invalid
        """


class DictCatalogSource(CatalogSource):
    """Catalog from an already-parsed document."""

    def __init__(
        self,
        data: Dict[str, Any],
        *,
        strict: bool = False,
        elevation_keywords: Iterable[str] = ELEVATION_KEYWORDS,
    ) -> None:
        self.data = data
        self.strict = strict
        self.elevation_keywords = tuple(elevation_keywords)

    async def fetch(self) -> Catalog:
        return self._build(self.data, "<memory>")

    def _build(self, data: Any, origin: str) -> Catalog:
        try:
            validate_catalog(data, strict=self.strict)
        except CatalogValidationError as e:
            for line in e.errors:
                logger.error(f"{origin}: {line}")
            raise CatalogFetchError(f"Invalid catalog in {origin}: {e}", source=origin) from e
        catalog = deserialize_catalog(data, validate=False, elevation_keywords=self.elevation_keywords)
        logger.info(f"Loaded catalog from {origin}: {catalog!r}")
        return catalog


class JsonCatalogSource(DictCatalogSource):
    """
    Catalog from a JSON document on disk.

    Example:
        >>> catalog = asyncio.run(JsonCatalogSource("catalog.json").fetch())
    """

    def __init__(
        self,
        path: Union[str, Path],
        *,
        strict: bool = False,
        elevation_keywords: Iterable[str] = ELEVATION_KEYWORDS,
    ) -> None:
        super().__init__({}, strict=strict, elevation_keywords=elevation_keywords)
        self.path = Path(path)

    async def fetch(self) -> Catalog:
        try:
            text = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
        except OSError as e:
            raise CatalogFetchError(f"Cannot read catalog {self.path}: {e}", source=str(self.path)) from e
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise CatalogFetchError(f"Catalog {self.path} is not valid JSON: {e}", source=str(self.path)) from e
        return self._build(data, str(self.path))
