"""
Image relay: serve external images through the cache-aside resolver.
"""

from dataclasses import dataclass
from typing import Optional

from shared.logging import get_logger
from ..cache.resolver import CachedResolver
from .codec import ImageReference


@dataclass(frozen=True)
class RelayedImage:
    """Image bytes with the content type to serve them under."""
    content: bytes
    content_type: str
    source_url: str


class ImageRelay:
    """Relays images and rewrites embedded image URLs to local paths."""

    def __init__(self, resolver: CachedResolver):
        self.resolver = resolver
        self.logger = get_logger("pokedex.image_relay")

    async def relay(self, scheme: str, host: str, path_tail: str) -> RelayedImage:
        """Fetch the image behind a local relay path.

        The extension is checked before anything is fetched, so an
        unsupported type never reaches the upstream origin.
        """
        reference = ImageReference.from_local(scheme, host, path_tail)
        content_type = reference.content_type
        content = await self.resolver.resolve(reference.absolute_url)
        return RelayedImage(content=content, content_type=content_type, source_url=reference.absolute_url)

    async def proxy(self, url: Optional[str], prefetch: bool = True) -> Optional[str]:
        """Rewrite an embedded image URL, warming the cache when ``prefetch`` is set."""
        if not url:
            return None

        reference = ImageReference.from_url(url)
        if prefetch:
            await self.resolver.resolve(reference.absolute_url)
        return reference.local_path
