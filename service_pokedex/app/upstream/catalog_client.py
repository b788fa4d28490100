"""
Catalog client for the upstream PokeAPI.
"""

import json
import re
from typing import Union
from urllib.parse import urljoin

from shared.config import DEFAULT_CATALOG_BASE_URL
from shared.errors import DecodeError, InvalidArgument
from shared.logging import get_logger
from ..cache.resolver import CachedResolver
from .record import Record


Segment = Union[str, int]

_UNSAFE_SEGMENT = re.compile(r"[/\\?#%:\s\x00-\x1f\x7f]")


class CatalogClient:
    """Builds catalog URLs from path segments and decodes the cached body."""

    SPECIES = "pokemon-species"
    POKEMON = "pokemon"
    TYPE = "type"

    def __init__(self, resolver: CachedResolver, base_url: str = DEFAULT_CATALOG_BASE_URL):
        self.resolver = resolver
        # urljoin drops the last path component unless the base ends in "/"
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.logger = get_logger("pokedex.catalog_client")

    def build_url(self, *segments: Segment) -> str:
        """Join the catalog base with validated segments."""
        if not segments:
            raise InvalidArgument("At least one path segment is required")
        return urljoin(self.base_url, "/".join(_segment_to_str(segment) for segment in segments))

    async def get(self, *segments: Segment) -> Record:
        url = self.build_url(*segments)
        data = await self.resolver.resolve(url)

        try:
            document = json.loads(data)
        except (UnicodeDecodeError, ValueError) as exc:
            self.logger.error("Malformed catalog document", url=url, error=str(exc))
            raise DecodeError(url, f"Malformed catalog document: {exc}") from exc

        if not isinstance(document, dict):
            raise DecodeError(url, "Catalog document is not an object")
        return Record(document)

    async def species_count(self) -> int:
        """Read the ``count`` field of the species listing."""
        listing = await self.get(self.SPECIES)
        count = listing.get("count")
        if not isinstance(count, int) or isinstance(count, bool) or count < 1:
            raise DecodeError(self.build_url(self.SPECIES), "Species listing has no usable count")
        return count

    async def species(self, species_id: Segment) -> Record:
        return await self.get(self.SPECIES, species_id)

    async def pokemon(self, pokemon_id: Segment) -> Record:
        return await self.get(self.POKEMON, pokemon_id)

    async def type(self, name: Segment) -> Record:
        return await self.get(self.TYPE, name)


def _segment_to_str(segment: Segment) -> str:
    if isinstance(segment, bool) or not isinstance(segment, (str, int)):
        raise InvalidArgument(
            "Path segments must be strings or integers",
            details={"segment": repr(segment)}
        )

    value = str(segment)
    if value in ("", ".", "..") or _UNSAFE_SEGMENT.search(value):
        raise InvalidArgument("Unsafe path segment", details={"segment": value})
    return value
