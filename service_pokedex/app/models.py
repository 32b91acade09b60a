"""
Data models for the Pokedex Service.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field


class TranslationStyle(str, Enum):
    """Translation styles offered by the translation upstream."""
    YODA = "yoda"
    SHAKESPEARE = "shakespeare"


@dataclass(frozen=True)
class DescriptionEntry:
    """One localized description as returned upstream."""

    language: str
    text: str


@dataclass(frozen=True)
class RawProfile:
    """Profile data as reported by the profile upstream, before derivation."""

    name: str
    descriptions: Tuple[DescriptionEntry, ...] = field(default_factory=tuple)
    habitat: Optional[str] = None
    is_legendary: bool = False


@dataclass(frozen=True)
class Profile:
    """Canonical creature profile served by the proxy."""

    name: str
    description: str
    habitat: str
    is_legendary: bool

    def with_description(self, description: str) -> "Profile":
        """Return a copy carrying a different description."""
        return replace(self, description=description)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the profile to its public JSON shape."""
        return {
            "name": self.name,
            "description": self.description,
            "habitat": self.habitat,
            "is_legendary": self.is_legendary,
        }


class ProfileResponse(BaseModel):
    """Response model for profile endpoints."""
    name: str = Field(..., description="Creature name")
    description: str = Field(..., description="Single-line description")
    habitat: str = Field(..., description="Habitat category")
    is_legendary: bool = Field(..., description="Legendary flag")

    @classmethod
    def from_profile(cls, profile: Profile) -> "ProfileResponse":
        return cls(**profile.to_dict())
