"""
Pokédex relay service: catalog pages and the image relay.
"""

import random
from contextlib import asynccontextmanager
from typing import Dict, Optional

import httpx
from fastapi import FastAPI, Form, Request, Response
from fastapi.responses import RedirectResponse

from shared.base_service import BaseService
from shared.config import ServiceConfig, get_config
from shared.metrics import MetricsCollector
from .cache.redis_store import RedisCacheStore
from .cache.resolver import CachedResolver
from .cache.store import CacheStore, MemoryCacheStore
from .domain.views import PokedexViews, PokemonView, QuizResult
from .images.codec import split_local_path
from .images.relay import ImageRelay
from .upstream.catalog_client import CatalogClient
from .upstream.fetcher import HTTPFetcher, build_http_client


SERVICE_NAME = "pokedex"
SERVICE_PORT = 8000


def build_store(config: ServiceConfig) -> CacheStore:
    """Pick the cache backend named in the configuration."""
    if config.cache_backend == "memory":
        return MemoryCacheStore()
    return RedisCacheStore(config.redis_url)


class PokedexService(BaseService):
    """Pokédex relay service implementation.

    The HTTP client, cache store and random source are built once here
    and handed to every component, so tests can swap in fakes.
    """

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        store: Optional[CacheStore] = None,
        rng: Optional[random.Random] = None,
        metrics: Optional[MetricsCollector] = None,
        prefetch_images: bool = True,
    ):
        config = config or get_config(SERVICE_NAME, SERVICE_PORT)
        self.http_client = http_client or build_http_client(
            timeout=config.http_timeout_seconds,
            user_agent=config.user_agent,
        )
        self.store = store or build_store(config)
        super().__init__(SERVICE_NAME, SERVICE_PORT, config=config, metrics=metrics)

        self.fetcher = HTTPFetcher(self.http_client, metrics=self.metrics)
        self.resolver = CachedResolver(
            self.fetcher,
            self.store,
            failure_policy=self.config.cache_failure_policy,
            metrics=self.metrics,
        )
        self.catalog = CatalogClient(self.resolver, self.config.catalog_base_url)
        self.images = ImageRelay(self.resolver)
        self.views = PokedexViews(
            self.catalog,
            self.images,
            rng=rng,
            name_locales=self.config.preferred_locale_list,
            flavor_locales=self.config.flavor_locale_list,
            prefetch_images=prefetch_images,
        )

        self._setup_pokedex_routes()
        self.app.state.pokedex_service = self

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        self.logger.info(
            "Pokedex service starting",
            catalog_base_url=self.config.catalog_base_url,
            cache_backend=self.config.cache_backend,
            cache_failure_policy=self.config.cache_failure_policy,
        )
        try:
            yield
        finally:
            await self.fetcher.close()
            await self.store.close()
            self.logger.info("Pokedex service stopped")

    async def _check_dependencies(self) -> Dict[str, str]:
        return {"cache": "ok" if await self.store.ping() else "unavailable"}

    def _setup_pokedex_routes(self):
        """Set up catalog page and image relay routes."""

        @self.app.get("/")
        async def random_pokemon():
            pokemon_id = await self.views.random_id()
            return RedirectResponse(f"/pokemon/{pokemon_id}", status_code=302)

        @self.app.get("/pokemon/{pokemon_id}", response_model=PokemonView)
        async def show_pokemon(pokemon_id: int):
            return await self.views.show(pokemon_id)

        @self.app.get("/quiz", response_model=PokemonView, response_model_exclude={"name"})
        async def quiz():
            return await self.views.random_quiz()

        @self.app.post("/quiz", response_model=QuizResult)
        async def answer_quiz(pokeid: str = Form(""), answer: str = Form("")):
            try:
                pokemon_id = int(pokeid)
            except ValueError:
                pokemon_id = 0
            if pokemon_id <= 0:
                return RedirectResponse("/quiz", status_code=303)
            return await self.views.answer_quiz(pokemon_id, answer)

        @self.app.get("/img/{scheme}/{host}/{path_tail:path}")
        async def relay_image(request: Request, scheme: str, host: str, path_tail: str):
            # Rebuild from the raw path so percent-escapes reach the origin untouched
            raw_path = request.scope.get("raw_path") or request.url.path.encode("utf-8")
            reference = split_local_path(raw_path.decode("latin-1"))
            image = await self.images.relay(reference.scheme, reference.host, reference.path[1:])
            self.logger.debug(
                "Image relayed",
                source_url=image.source_url,
                content_type=image.content_type,
                size=len(image.content),
            )
            return Response(content=image.content, media_type=image.content_type)


def create_app(config: Optional[ServiceConfig] = None, **kwargs) -> FastAPI:
    """Create FastAPI app instance."""
    return PokedexService(config, **kwargs).app


if __name__ == "__main__":
    PokedexService().run()
