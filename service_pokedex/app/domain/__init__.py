"""
Domain rules for the Pokedex Service.

Pure functions only: no I/O, no cache access. The orchestrator composes
them with the adapters and the cache store.
"""

from .descriptions import derive_profile, normalize_description, select_english_description
from .routing import select_style

__all__ = [
    "derive_profile",
    "normalize_description",
    "select_english_description",
    "select_style",
]
