"""
Module: configurator.compositor.loader

Purpose:
    Asynchronous image loading for the compositor. Decoding runs in a
    worker thread so the event loop only suspends while waiting on it.

Key Classes:
    - ImageLoader: Abstract async loader
    - PillowImageLoader: Files and URLs decoded with Pillow, cached

Dependencies:
    - PIL: Decoding
    - requests: Fetching http(s) assets
    - configurator.assets: Identifier resolution

Used By:
    - configurator.compositor.compositor: Background and overlay loads
"""

from __future__ import annotations

import asyncio
import io
import logging
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Optional

import requests
from PIL import Image

from home_configurator.core.errors import ImageLoadError

from ..assets import AssetResolver, DirectoryAssetResolver

logger = logging.getLogger(__name__)


class ImageLoader(ABC):
    """Loads an asset identifier into an RGBA Pillow image."""

    @abstractmethod
    async def load(self, identifier: str) -> Image.Image:
        """
        Load an image.

        Raises:
            ImageLoadError: If the asset is missing or cannot be decoded
        """

    def clear_cache(self) -> None:
        """Forget cached images. Loaders without a cache do nothing."""


class PillowImageLoader(ImageLoader):
    """
    Decodes images with Pillow in a worker thread.

    Decoded images are kept in a small LRU cache keyed by resolved
    location; callers must not mutate returned images.
    """

    def __init__(
        self,
        resolver: Optional[AssetResolver] = None,
        *,
        cache_size: int = 64,
        timeout: float = 30.0,
    ) -> None:
        self.resolver = resolver or DirectoryAssetResolver()
        self.cache_size = cache_size
        self.timeout = timeout
        self._cache: "OrderedDict[str, Image.Image]" = OrderedDict()

    async def load(self, identifier: str) -> Image.Image:
        location = self.resolver.resolve(identifier)
        if location is None:
            raise ImageLoadError(str(identifier), "no asset")

        cached = self._cache.get(location)
        if cached is not None:
            self._cache.move_to_end(location)
            return cached

        image = await asyncio.to_thread(self._decode, location)
        self._remember(location, image)
        logger.debug(f"Loaded image {location} ({image.width}x{image.height})")
        return image

    def _decode(self, location: str) -> Image.Image:
        try:
            if location.startswith(("http://", "https://")):
                response = requests.get(location, timeout=self.timeout)
                response.raise_for_status()
                source = io.BytesIO(response.content)
            elif location.startswith("file://"):
                source = location[len("file://"):]
            else:
                source = location
            with Image.open(source) as img:
                img.load()
                return img.convert("RGBA")
        except (OSError, ValueError, requests.RequestException) as e:
            raise ImageLoadError(location, str(e)) from e

    def _remember(self, location: str, image: Image.Image) -> None:
        if self.cache_size <= 0:
            return
        self._cache[location] = image
        self._cache.move_to_end(location)
        while len(self._cache) > self.cache_size:
            self._cache.popitem(last=False)

    def clear_cache(self) -> None:
        logger.debug(f"Dropping {len(self._cache)} cached image(s)")
        self._cache.clear()
