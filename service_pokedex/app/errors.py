"""
Proxy-level errors surfaced by the Pokedex Service.

The set is closed: every upstream failure is collapsed into one of these two
outcomes before it leaves the orchestrator.
"""

from typing import Any, Dict, Optional

from shared.errors import PokedexException


class ProfileNotFound(PokedexException):
    """The profile upstream has no usable profile for the requested name."""

    status_code = 404

    def __init__(self, name: str, details: Optional[Dict[str, Any]] = None):
        self.name = name
        super().__init__("PROFILE_NOT_FOUND", "Pokemon not found", {"name": name, **(details or {})})


class TranslationRateLimited(PokedexException):
    """The translation upstream refused or failed to translate."""

    status_code = 429

    def __init__(self, name: str, details: Optional[Dict[str, Any]] = None):
        self.name = name
        super().__init__("TRANSLATION_FAILED", "Translation failed", {"name": name, **(details or {})})

