"""
Unit tests for the image reference codec and relay.
"""

import pytest

from service_pokedex.app.cache.resolver import CachedResolver
from service_pokedex.app.cache.store import MemoryCacheStore
from service_pokedex.app.images.codec import (
    ImageReference,
    content_type_for,
    decode_to_absolute_url,
    encode_local_path,
    split_local_path,
)
from service_pokedex.app.images.relay import ImageRelay
from shared.errors import InvalidArgument, UnsupportedMediaType, UpstreamError
from shared.test_helpers import PNG_BYTES, SPRITE_BASE, FakeFetcher


SPRITE_URL = f"{SPRITE_BASE}/25.png"


class TestImageCodec:
    """Test cases for the URL <-> local path codec."""

    def test_encode_local_path(self):
        assert encode_local_path(SPRITE_URL) == (
            "/img/https/raw.githubusercontent.com/PokeAPI/sprites/master/sprites/pokemon/25.png"
        )

    @pytest.mark.parametrize("url", [
        SPRITE_URL,
        "http://example.com/a.gif",
        "https://example.com:8443/deep/nested/path/Image.JPEG",
        "https://example.com/with%20space/x.svg",
        "https://example.com/trailing/",
        "https://example.com//a.png",
        "https://example.com/a//b.png",
    ])
    def test_round_trip(self, url):
        """Test decoding an encoded path rebuilds the URL exactly."""
        reference = split_local_path(encode_local_path(url))
        assert reference.absolute_url == url
        assert decode_to_absolute_url(reference.scheme, reference.host, reference.path[1:]) == url

    def test_decode_preserves_slashes_in_tail(self):
        """Test the tail is everything after the host, slashes included."""
        url = "https://raw.githubusercontent.com/PokeAPI/sprites/master/sprites/pokemon/1.png"
        tail = "PokeAPI/sprites/master/sprites/pokemon/1.png"

        assert decode_to_absolute_url("https", "raw.githubusercontent.com", tail) == url
        assert decode_to_absolute_url("https", "example.com", "/a.png") == "https://example.com//a.png"

    @pytest.mark.parametrize("url", [
        "ftp://example.com/a.png",
        "data:image/png;base64,AAAA",
        "https:///a.png",
        "https://example.com/a.png?size=2",
        "https://example.com/a.png#top",
        "https://user@example.com/a.png",
        "https://example.com",
    ])
    def test_encode_rejects_unrelayable_urls(self, url):
        with pytest.raises(InvalidArgument):
            encode_local_path(url)

    @pytest.mark.parametrize("scheme,host", [("file", "example.com"), ("https", ""), ("https", "a/b")])
    def test_decode_rejects_bad_parts(self, scheme, host):
        with pytest.raises(InvalidArgument):
            decode_to_absolute_url(scheme, host, "a.png")

    def test_split_rejects_foreign_path(self):
        with pytest.raises(InvalidArgument):
            split_local_path("/static/a.png")
        with pytest.raises(InvalidArgument):
            split_local_path("/img/https/example.com")

    @pytest.mark.parametrize("path,expected", [
        ("/a/b.jpg", "image/jpeg"),
        ("/a/b.JPEG", "image/jpeg"),
        ("/a/b.png", "image/png"),
        ("/a/b.Gif", "image/gif"),
        ("/a/b.webp", "image/webp"),
        ("/a/b.AVIF", "image/avif"),
        ("/a/b.svg", "image/svg+xml"),
        ("/dir.png/b.svg", "image/svg+xml"),
    ])
    def test_content_type_table(self, path, expected):
        assert content_type_for(path) == expected

    @pytest.mark.parametrize("path", ["/a/b.bmp", "/a/b", "/a.png/b", "/a/b.png.exe", "/a/.png"])
    def test_unknown_extension(self, path):
        with pytest.raises(UnsupportedMediaType):
            content_type_for(path)

    def test_reference_properties(self):
        reference = ImageReference.from_url(SPRITE_URL)
        assert reference.absolute_url == SPRITE_URL
        assert reference.content_type == "image/png"


class TestImageRelay:
    """Test cases for ImageRelay."""

    @pytest.fixture
    def fetcher(self):
        return FakeFetcher({SPRITE_URL: PNG_BYTES, "https://example.com/logo.svg": b"<svg/>"})

    @pytest.fixture
    def relay(self, fetcher):
        return ImageRelay(CachedResolver(fetcher, MemoryCacheStore()))

    @pytest.mark.asyncio
    async def test_relay_returns_bytes_and_content_type(self, relay, fetcher):
        image = await relay.relay("https", "raw.githubusercontent.com", "PokeAPI/sprites/master/sprites/pokemon/25.png")

        assert image.content == PNG_BYTES
        assert image.content_type == "image/png"
        assert image.source_url == SPRITE_URL
        assert fetcher.calls == [SPRITE_URL]

    @pytest.mark.asyncio
    async def test_relay_is_cached(self, relay, fetcher):
        await relay.relay("https", "example.com", "logo.svg")
        image = await relay.relay("https", "example.com", "logo.svg")

        assert image.content_type == "image/svg+xml"
        assert fetcher.calls_for("https://example.com/logo.svg") == 1

    @pytest.mark.asyncio
    async def test_unsupported_extension_never_fetches(self, relay, fetcher):
        """Test the media type is checked before anything is fetched."""
        with pytest.raises(UnsupportedMediaType):
            await relay.relay("https", "example.com", "archive/file.zip")

        assert fetcher.calls == []

    @pytest.mark.asyncio
    async def test_relay_upstream_error(self, relay):
        with pytest.raises(UpstreamError):
            await relay.relay("https", "example.com", "missing.png")

    @pytest.mark.asyncio
    async def test_proxy_prefetches(self, relay, fetcher):
        """Test proxy warms the cache and returns the local path."""
        local = await relay.proxy(SPRITE_URL)

        assert local == encode_local_path(SPRITE_URL)
        assert fetcher.calls == [SPRITE_URL]

    @pytest.mark.asyncio
    async def test_proxy_without_prefetch(self, relay, fetcher):
        assert await relay.proxy(SPRITE_URL, prefetch=False) == encode_local_path(SPRITE_URL)
        assert fetcher.calls == []

    @pytest.mark.asyncio
    async def test_proxy_empty_url(self, relay):
        assert await relay.proxy(None) is None
        assert await relay.proxy("") is None
