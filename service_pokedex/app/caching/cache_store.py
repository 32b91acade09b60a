"""
Lock-guarded in-process cache tables for the Pokedex Service.
"""

import threading
from typing import Dict, Generic, Optional, Tuple, TypeVar

from shared.logging import get_logger
from ..models import Profile

V = TypeVar("V")


class CacheTable(Generic[V]):
    """Unbounded key-value table safe for concurrent use.

    The lock only guards the dictionary operation itself; callers must never
    hold it across an upstream call.
    """

    def __init__(self, name: str):
        self.name = name
        self._entries: Dict[str, V] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Tuple[Optional[V], bool]:
        """Return ``(value, True)`` on a hit and ``(None, False)`` on a miss."""
        with self._lock:
            if key in self._entries:
                return self._entries[key], True
        return None, False

    def put(self, key: str, value: V) -> None:
        """Insert or overwrite ``key``; the last writer wins."""
        with self._lock:
            self._entries[key] = value

    def size(self) -> int:
        with self._lock:
            return len(self._entries)


class ProfileCacheStore:
    """The two independent tables shared by all requests.

    ``profiles`` maps a query name to its derived Profile and
    ``translations`` maps a query name to its translated description. Keys are
    the exact, case-sensitive query strings.
    """

    PROFILES = "profiles"
    TRANSLATIONS = "translations"

    def __init__(self):
        self.logger = get_logger("pokedex.cache_store")
        self.profiles: CacheTable[Profile] = CacheTable(self.PROFILES)
        self.translations: CacheTable[str] = CacheTable(self.TRANSLATIONS)

    def get_profile(self, name: str) -> Tuple[Optional[Profile], bool]:
        return self.profiles.get(name)

    def put_profile(self, name: str, profile: Profile) -> None:
        self.profiles.put(name, profile)
        self.logger.debug("Cached profile", name=name)

    def get_translation(self, name: str) -> Tuple[Optional[str], bool]:
        return self.translations.get(name)

    def put_translation(self, name: str, translated_description: str) -> None:
        self.translations.put(name, translated_description)
        self.logger.debug("Cached translation", name=name)

    def get_stats(self) -> Dict[str, int]:
        """Get entry counts per table."""
        return {
            self.PROFILES: self.profiles.size(),
            self.TRANSLATIONS: self.translations.size(),
        }
