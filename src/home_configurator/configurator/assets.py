"""
Module: configurator.assets

Purpose:
    Resolves catalog asset identifiers to loadable locations.

Key Classes:
    - AssetResolver: Abstract identifier -> location mapping
    - DirectoryAssetResolver: Relative identifiers under an asset root

Used By:
    - configurator.compositor.loader: Image loading
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import Optional, Union

_PASSTHROUGH_SCHEMES = ("http://", "https://", "file://")


class AssetResolver(ABC):
    """Maps an asset identifier from the catalog to a URL or file path."""

    @abstractmethod
    def resolve(self, identifier: Optional[str]) -> Optional[str]:
        """
        Resolve an asset identifier.

        Args:
            identifier: Value from the catalog (may be None or "null")

        Returns:
            URL or filesystem path, or None when there is no asset
        """


class DirectoryAssetResolver(AssetResolver):
    """
    Resolves relative identifiers against a local asset directory.

    URLs and absolute paths pass through unchanged.

    Example:
        >>> DirectoryAssetResolver("/srv/assets").resolve("plans/ground.png")
        '/srv/assets/plans/ground.png'
    """

    def __init__(self, root: Union[str, Path, None] = None) -> None:
        self.root = Path(root) if root is not None else None

    def resolve(self, identifier: Optional[str]) -> Optional[str]:
        if not identifier or identifier == "null":
            return None
        if identifier.startswith(_PASSTHROUGH_SCHEMES):
            return identifier
        path = Path(identifier)
        if path.is_absolute() or self.root is None:
            return str(path)
        # Identifiers use forward slashes regardless of platform
        return str(self.root.joinpath(*PurePosixPath(identifier).parts))
