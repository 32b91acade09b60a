"""
Pokedex caching package.

In-process cache tables shielding the rate-limited upstreams. Entries are
kept for the life of the process: there is no TTL and no eviction.
"""

from .cache_store import CacheTable, ProfileCacheStore

__all__ = ["CacheTable", "ProfileCacheStore"]
