"""
Adapters package for the Pokedex Service.

Contains HTTP client wrappers for the upstream APIs (PokeAPI and
FunTranslations). These adapters encapsulate:

- Base URLs and request shapes
- Circuit breakers
- Error handling that maps to shared errors

Adapters never touch the cache; they report outcomes and leave policy to
the orchestrator.
"""

from .pokeapi_client import PokeApiClient
from .translation_client import TranslationClient

__all__ = [
    "PokeApiClient",
    "TranslationClient",
]
