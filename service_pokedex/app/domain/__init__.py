from .views import PokedexViews, PokemonView, QuizResult, TypeView, neighbour_ids

__all__ = ["PokedexViews", "PokemonView", "QuizResult", "TypeView", "neighbour_ids"]
