"""
Unit tests for the catalog client and record wrapper.
"""

import pytest

from service_pokedex.app.cache.resolver import CachedResolver
from service_pokedex.app.cache.store import MemoryCacheStore
from service_pokedex.app.upstream.catalog_client import CatalogClient
from service_pokedex.app.upstream.record import Record
from shared.config import DEFAULT_CATALOG_BASE_URL
from shared.errors import DecodeError, InvalidArgument, UpstreamError
from shared.test_helpers import FakeFetcher, catalog_responses


BASE = DEFAULT_CATALOG_BASE_URL


class TestCatalogClient:
    """Test cases for CatalogClient."""

    @pytest.fixture
    def fetcher(self):
        return FakeFetcher(catalog_responses())

    @pytest.fixture
    def client(self, fetcher):
        return CatalogClient(CachedResolver(fetcher, MemoryCacheStore()))

    def test_build_url_joins_segments(self, client):
        """Test segments of either type are joined onto the base."""
        assert client.build_url("pokemon-species", 1) == f"{BASE}pokemon-species/1"
        assert client.build_url("type", "grass") == f"{BASE}type/grass"

    def test_base_without_trailing_slash(self):
        """Test a base missing its trailing slash keeps its last component."""
        client = CatalogClient(CachedResolver(FakeFetcher(), MemoryCacheStore()), "https://pokeapi.co/api/v2")
        assert client.build_url("pokemon", 7) == "https://pokeapi.co/api/v2/pokemon/7"

    @pytest.mark.parametrize("segment", ["", ".", "..", "a/b", "..\\x", "1?x=1", "1#frag", "%2e%2e", "a b", "javascript:alert"])
    def test_unsafe_segments_rejected(self, client, segment):
        """Test segments that could escape the resource path are rejected."""
        with pytest.raises(InvalidArgument):
            client.build_url("pokemon", segment)

    @pytest.mark.parametrize("segment", [None, 1.5, True, b"1"])
    def test_non_string_segments_rejected(self, client, segment):
        """Test only str and int segments are accepted."""
        with pytest.raises(InvalidArgument):
            client.build_url("pokemon", segment)

    def test_no_segments_rejected(self, client):
        with pytest.raises(InvalidArgument):
            client.build_url()

    @pytest.mark.asyncio
    async def test_get_decodes_record(self, client):
        """Test a JSON body is decoded into a Record."""
        record = await client.get("pokemon", 1)

        assert isinstance(record, Record)
        assert record["id"] == 1
        assert record.name == "bulbasaur"
        assert record.path("types", 0, "type", "name") == "grass"

    @pytest.mark.asyncio
    async def test_get_uses_cache(self, client, fetcher):
        """Test repeated reads resolve through the cache."""
        await client.species(1)
        await client.species(1)

        assert fetcher.calls_for(f"{BASE}pokemon-species/1") == 1

    @pytest.mark.asyncio
    async def test_species_count(self, client):
        """Test the listing count is read."""
        assert await client.species_count() == 3

    @pytest.mark.asyncio
    async def test_species_count_missing(self, fetcher, client):
        """Test a listing without a usable count is a decode error."""
        fetcher.responses[f"{BASE}pokemon-species"] = b'{"results": []}'

        with pytest.raises(DecodeError):
            await client.species_count()

    @pytest.mark.asyncio
    async def test_malformed_body_raises_decode_error(self, fetcher, client):
        """Test a non-JSON body raises DecodeError with the URL."""
        url = f"{BASE}pokemon/404"
        fetcher.responses[url] = b"<html>oops</html>"

        with pytest.raises(DecodeError) as exc_info:
            await client.get("pokemon", 404)

        assert exc_info.value.url == url

    @pytest.mark.asyncio
    async def test_non_object_body_raises_decode_error(self, fetcher, client):
        fetcher.responses[f"{BASE}pokemon/5"] = b"[1, 2, 3]"

        with pytest.raises(DecodeError):
            await client.pokemon(5)

    @pytest.mark.asyncio
    async def test_upstream_error_propagates(self, client):
        """Test a missing upstream record raises UpstreamError."""
        with pytest.raises(UpstreamError) as exc_info:
            await client.type("shadow")

        assert exc_info.value.url == f"{BASE}type/shadow"


class TestRecord:
    """Test cases for Record."""

    @pytest.fixture
    def record(self):
        return Record({
            "id": 6,
            "sprites": {"front_default": "https://example.com/6.png", "back_default": None},
            "types": [{"type": {"name": "fire"}}, {"type": {"name": "flying"}}],
        })

    def test_nested_values_are_wrapped(self, record):
        assert isinstance(record.sprites, Record)
        assert isinstance(record.types, tuple)
        assert record.types[1].type.name == "flying"

    def test_missing_key_fails_on_read(self, record):
        """Test absent fields fail only when accessed."""
        with pytest.raises(KeyError):
            record["weight"]
        with pytest.raises(AttributeError):
            record.weight
        with pytest.raises(KeyError):
            record.path("types", 5, "type")

    def test_get_path_default(self, record):
        assert record.get_path("sprites", "other", "home", default="none") == "none"
        assert record.get_path("sprites", "front_default") == "https://example.com/6.png"

    def test_read_only(self, record):
        with pytest.raises(AttributeError):
            record.id = 7

    def test_to_dict(self, record):
        assert record.to_dict()["id"] == 6
