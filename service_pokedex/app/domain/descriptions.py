"""
Description selection and profile derivation.
"""

from typing import Iterable

from ..models import DescriptionEntry, Profile, RawProfile

ENGLISH = "en"


class IncompleteProfileError(ValueError):
    """Raised when an upstream profile lacks a field the proxy requires."""


def select_english_description(entries: Iterable[DescriptionEntry]) -> str:
    """Return the first description tagged exactly ``en``, or ``""``."""
    for entry in entries:
        if entry.language == ENGLISH:
            return entry.text
    return ""


def normalize_description(text: str) -> str:
    """Flatten a description onto one line with single spaces."""
    # Flavor texts carry hard line breaks (\n) and form feeds (\f) between
    # text boxes; every non-printable character becomes a space.
    printable = "".join(ch if ch.isprintable() else " " for ch in text)
    return " ".join(printable.split())


def derive_profile(raw: RawProfile) -> Profile:
    """Build the served profile from an upstream profile.

    Raises:
        IncompleteProfileError: if the upstream profile has no habitat.
    """
    if not raw.habitat:
        raise IncompleteProfileError(f"profile '{raw.name}' has no habitat")

    description = normalize_description(select_english_description(raw.descriptions))
    return Profile(
        name=raw.name,
        description=description,
        habitat=raw.habitat,
        is_legendary=raw.is_legendary,
    )
