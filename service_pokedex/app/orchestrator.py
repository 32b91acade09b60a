"""
Request orchestration for the Pokedex Service.

Both flows are read-through: consult the cache store, fall back to the
upstream on a miss, and cache only successful results. Upstream failures are
collapsed into ProfileNotFound or TranslationRateLimited here and nowhere
else.
"""

from contextlib import nullcontext
from typing import Optional, Protocol, TYPE_CHECKING

from shared.logging import get_logger
from shared.errors import ExternalServiceError, RateLimitError
from .caching import ProfileCacheStore
from .domain import derive_profile, select_style
from .domain.descriptions import IncompleteProfileError
from .errors import ProfileNotFound, TranslationRateLimited
from .models import Profile, RawProfile, TranslationStyle

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


PROFILE_UPSTREAM = "pokeapi"
TRANSLATION_UPSTREAM = "funtranslations"


class ProfileSource(Protocol):
    async def fetch_profile(self, name: str) -> Optional[RawProfile]: ...


class TranslationSource(Protocol):
    async def translate(self, text: str, style: TranslationStyle) -> str: ...


class PokedexOrchestrator:
    """Coordinates the cache store and the two upstream sources."""

    def __init__(
        self,
        profile_source: ProfileSource,
        translation_source: TranslationSource,
        cache_store: Optional[ProfileCacheStore] = None,
        *,
        metrics: Optional["MetricsCollector"] = None,
    ):
        self.profile_source = profile_source
        self.translation_source = translation_source
        self.cache_store = cache_store if cache_store is not None else ProfileCacheStore()
        self.metrics = metrics
        self.logger = get_logger("pokedex.orchestrator")

    async def get_profile(self, name: str) -> Profile:
        """Return the profile for ``name``, fetching it on a cache miss.

        Raises:
            ProfileNotFound: the name is unknown upstream, its profile has no
                habitat, or the profile upstream failed.
        """
        cached, found = self.cache_store.get_profile(name)
        self._record_lookup(ProfileCacheStore.PROFILES, found)
        if found:
            self.logger.debug("Profile cache hit", name=name)
            return cached

        raw = await self._fetch_raw_profile(name)
        try:
            profile = derive_profile(raw)
        except IncompleteProfileError as exc:
            self.logger.warning("Upstream profile incomplete", name=name, error=str(exc))
            self._record_upstream(PROFILE_UPSTREAM, "incomplete")
            raise ProfileNotFound(name, details={"reason": "missing_habitat"}) from exc

        self.cache_store.put_profile(name, profile)
        self._record_upstream(PROFILE_UPSTREAM, "success")
        return profile

    async def get_translated_profile(self, name: str) -> Profile:
        """Return the profile for ``name`` with a translated description.

        A cached translation is reused for as long as the process lives,
        even if the underlying description later changes.

        Raises:
            ProfileNotFound: as for get_profile.
            TranslationRateLimited: the translation upstream is rate limited
                or failed; no untranslated fallback is returned.
        """
        profile = await self.get_profile(name)

        cached, found = self.cache_store.get_translation(name)
        self._record_lookup(ProfileCacheStore.TRANSLATIONS, found)
        if found:
            self.logger.debug("Translation cache hit", name=name)
            return profile.with_description(cached)

        style = select_style(profile.habitat, profile.is_legendary)
        translated = await self._translate(name, profile.description, style)

        self.cache_store.put_translation(name, translated)
        return profile.with_description(translated)

    async def _fetch_raw_profile(self, name: str) -> RawProfile:
        try:
            with self._timed(PROFILE_UPSTREAM):
                raw = await self.profile_source.fetch_profile(name)
        except ExternalServiceError as exc:
            self.logger.warning("Profile upstream failed", name=name, error=exc.message)
            self._record_upstream(PROFILE_UPSTREAM, "error")
            raise ProfileNotFound(name, details={"reason": "upstream_error"}) from exc

        if raw is None:
            self._record_upstream(PROFILE_UPSTREAM, "not_found")
            raise ProfileNotFound(name)
        return raw

    async def _translate(self, name: str, text: str, style: TranslationStyle) -> str:
        try:
            with self._timed(TRANSLATION_UPSTREAM):
                translated = await self.translation_source.translate(text, style)
        except RateLimitError as exc:
            self.logger.warning("Translation rate limited", name=name, style=style.value)
            self._record_upstream(TRANSLATION_UPSTREAM, "rate_limited")
            raise TranslationRateLimited(name, details={"style": style.value, "reason": "rate_limited"}) from exc
        except ExternalServiceError as exc:
            self.logger.warning(
                "Translation upstream failed",
                name=name,
                style=style.value,
                error=exc.message
            )
            self._record_upstream(TRANSLATION_UPSTREAM, "error")
            raise TranslationRateLimited(name, details={"style": style.value, "reason": "upstream_error"}) from exc

        self._record_upstream(TRANSLATION_UPSTREAM, "success")
        if self.metrics:
            self.metrics.increment_counter("translations_total", style=style.value)
        return translated

    def _record_lookup(self, cache_type: str, hit: bool) -> None:
        if self.metrics:
            self.metrics.record_cache_lookup(cache_type, hit)

    def _record_upstream(self, upstream: str, outcome: str) -> None:
        if self.metrics:
            self.metrics.record_upstream_request(upstream, outcome)

    def _timed(self, upstream: str):
        if self.metrics:
            return self.metrics.time_operation("upstream_request_duration_seconds", upstream=upstream)
        return nullcontext()
