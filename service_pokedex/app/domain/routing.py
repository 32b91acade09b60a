"""
Translation style routing.
"""

from ..models import TranslationStyle

CAVE_HABITAT = "cave"


def select_style(habitat: str, is_legendary: bool) -> TranslationStyle:
    """Pick the translation style for a profile.

    Cave dwellers and legendary creatures get Yoda; everything else gets
    Shakespeare.
    """
    if habitat == CAVE_HABITAT or is_legendary:
        return TranslationStyle.YODA
    return TranslationStyle.SHAKESPEARE
