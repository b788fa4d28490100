"""
View models assembled from catalog records for the HTTP routes.
"""

import asyncio
import random
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from shared.errors import InvalidArgument
from shared.logging import get_logger
from ..images.relay import ImageRelay
from ..localization.selector import select_all, select_one
from ..upstream.catalog_client import CatalogClient
from ..upstream.record import Record


DEFAULT_NAME_LOCALES = ("ja", "ja-Hrkt", "en")
DEFAULT_FLAVOR_LOCALES = ("ja", "ja-Hrkt")

# Sprite fields rewritten to relay paths, keyed by view name
SPRITE_PATHS = {
    "front_default": ("front_default",),
    "back_default": ("back_default",),
    "official_artwork": ("other", "official-artwork", "front_default"),
}


class TypeView(BaseModel):
    name: str
    display_name: Optional[str] = None


class PokemonView(BaseModel):
    """Everything the show and quiz pages render."""
    id: int
    prev_id: int
    next_id: int
    total: int
    name: Optional[str] = None
    genus: Optional[str] = None
    flavor_text: Optional[str] = None
    types: List[TypeView] = Field(default_factory=list)
    sprites: Dict[str, str] = Field(default_factory=dict)


class QuizResult(PokemonView):
    answer: str
    ok: bool


def neighbour_ids(pokemon_id: int, total: int) -> tuple:
    """Previous and next ids, wrapping around the ends of the catalog."""
    prev_id = pokemon_id - 1 if pokemon_id > 1 else total
    next_id = pokemon_id + 1 if pokemon_id < total else 1
    return prev_id, next_id


class PokedexViews:
    """Builds page view models from the catalog client."""

    def __init__(
        self,
        catalog: CatalogClient,
        images: ImageRelay,
        *,
        rng: Optional[random.Random] = None,
        name_locales: Sequence[str] = DEFAULT_NAME_LOCALES,
        flavor_locales: Sequence[str] = DEFAULT_FLAVOR_LOCALES,
        prefetch_images: bool = True,
    ):
        self.catalog = catalog
        self.images = images
        self.rng = rng or random.Random()
        self.name_locales = tuple(name_locales)
        self.flavor_locales = tuple(flavor_locales)
        self.prefetch_images = prefetch_images
        self.logger = get_logger("pokedex.views")

    async def random_id(self) -> int:
        total = await self.catalog.species_count()
        return self.rng.randint(1, total)

    async def show(self, pokemon_id: int) -> PokemonView:
        if pokemon_id < 1:
            raise InvalidArgument("Pokémon id must be positive", details={"id": pokemon_id})
        total = await self.catalog.species_count()

        species, pokemon = await asyncio.gather(
            self.catalog.species(pokemon_id),
            self.catalog.pokemon(pokemon_id),
        )
        prev_id, next_id = neighbour_ids(pokemon_id, total)

        return PokemonView(
            id=pokemon_id,
            prev_id=prev_id,
            next_id=next_id,
            total=total,
            name=self.localized_name(species),
            genus=self._field(select_one(species.get("genera", ()), self.name_locales), "genus"),
            flavor_text=self._sample_flavor(species),
            types=await self._types(pokemon),
            sprites=await self._sprites(pokemon),
        )

    async def random_quiz(self) -> PokemonView:
        return await self.show(await self.random_id())

    async def answer_quiz(self, pokemon_id: int, answer: str) -> QuizResult:
        view = await self.show(pokemon_id)
        # Served from cache; show() just resolved it
        species = await self.catalog.species(pokemon_id)
        return QuizResult(**view.model_dump(), answer=answer, ok=self.is_correct(species, answer))

    def is_correct(self, species: Record, answer: str) -> bool:
        """True when ``answer`` is the species name in any accepted locale."""
        names = species.get("names", ())
        return any(
            self._field(select_one(names, (locale,)), "name") == answer
            for locale in self.name_locales
        )

    def localized_name(self, record: Record) -> Optional[str]:
        return self._field(select_one(record.get("names", ()), self.name_locales), "name")

    def _sample_flavor(self, species: Record) -> Optional[str]:
        entries = select_all(species.get("flavor_text_entries", ()), self.flavor_locales)
        if not entries:
            return None
        return self._field(self.rng.choice(entries), "flavor_text")

    async def _types(self, pokemon: Record) -> List[TypeView]:
        names = [slot.path("type", "name") for slot in pokemon.get("types", ())]
        records = await asyncio.gather(*(self.catalog.type(name) for name in names))
        return [
            TypeView(name=name, display_name=self.localized_name(record))
            for name, record in zip(names, records)
        ]

    async def _sprites(self, pokemon: Record) -> Dict[str, str]:
        sprites: Dict[str, str] = {}
        for view_name, path in SPRITE_PATHS.items():
            url = pokemon.get_path("sprites", *path)
            if not url:
                continue
            sprites[view_name] = await self.images.proxy(url, prefetch=self.prefetch_images)
        return sprites

    @staticmethod
    def _field(item: Any, name: str) -> Optional[Any]:
        if item is None:
            return None
        return item.get(name)
