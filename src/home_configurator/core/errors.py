"""
Exception hierarchy shared across the configurator.

Constraint violations are NOT exceptions: the resolver returns them as
Rejection values. Exceptions here signal programming errors (unknown
ids), broken collaborators (catalog fetch) or bad catalog data.
"""

from __future__ import annotations


class ConfiguratorError(Exception):
    """Base class for configurator errors."""
    pass


class UnknownOptionError(ConfiguratorError, KeyError):
    """Option id not present in the catalog."""

    def __init__(self, option_id: int) -> None:
        super().__init__(f"Unknown option id: {option_id}")
        self.option_id = option_id

    def __str__(self) -> str:
        return self.args[0]


class UnknownFloorError(ConfiguratorError, KeyError):
    """Floor id not present in the catalog."""

    def __init__(self, floor_id: int) -> None:
        super().__init__(f"Unknown floor id: {floor_id}")
        self.floor_id = floor_id

    def __str__(self) -> str:
        return self.args[0]


class UnknownModelError(ConfiguratorError, KeyError):
    """Model id not present in the catalog."""

    def __init__(self, model_id: int) -> None:
        super().__init__(f"Unknown model id: {model_id}")
        self.model_id = model_id

    def __str__(self) -> str:
        return self.args[0]


class CatalogFetchError(ConfiguratorError):
    """Catalog could not be read, parsed or validated."""

    def __init__(self, message: str, source: str = "") -> None:
        super().__init__(message)
        self.source = source


class ImageLoadError(ConfiguratorError):
    """Image asset missing, unreachable or undecodable."""

    def __init__(self, identifier: str, reason: str = "") -> None:
        message = f"Could not load image {identifier!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.identifier = identifier
        self.reason = reason
