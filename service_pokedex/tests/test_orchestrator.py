"""
Unit tests for the Pokedex orchestrator.
"""

import asyncio

import pytest
from unittest.mock import AsyncMock

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from service_pokedex.app.caching import ProfileCacheStore
from service_pokedex.app.errors import ProfileNotFound, TranslationRateLimited
from service_pokedex.app.models import DescriptionEntry, Profile, RawProfile, TranslationStyle
from service_pokedex.app.orchestrator import PokedexOrchestrator
from shared.errors import ExternalServiceError, RateLimitError
from shared.metrics import MetricsCollector

PIKACHU_DESCRIPTION = (
    "When several of these creatures gather, their electricity could build "
    "and cause lightning storms."
)
PIKACHU_SHAKESPEARE = (
    "At which hour several of these creatures gather, their electricity couldst "
    "buildeth and cause lightning storms."
)
ZUBAT_YODA = "Forms colonies in perpetually dark places. Ultrasonic waves to identify and approach targets, uses."


def raw_profile(name, habitat, is_legendary=False, text="Some text."):
    return RawProfile(
        name=name,
        descriptions=(
            DescriptionEntry("fr", "Du texte."),
            DescriptionEntry("en", text),
        ),
        habitat=habitat,
        is_legendary=is_legendary,
    )


class TestPokedexOrchestrator:
    """Test cases for PokedexOrchestrator."""

    @pytest.fixture
    def profile_source(self):
        source = AsyncMock()
        source.fetch_profile.return_value = raw_profile("pikachu", "forest", text=PIKACHU_DESCRIPTION)
        return source

    @pytest.fixture
    def translation_source(self):
        source = AsyncMock()
        source.translate.return_value = PIKACHU_SHAKESPEARE
        return source

    @pytest.fixture
    def cache_store(self):
        return ProfileCacheStore()

    @pytest.fixture
    def metrics(self):
        return MetricsCollector("pokedex")

    @pytest.fixture
    def orchestrator(self, profile_source, translation_source, cache_store, metrics):
        return PokedexOrchestrator(profile_source, translation_source, cache_store, metrics=metrics)

    @pytest.mark.asyncio
    async def test_get_profile_fetches_and_caches(self, orchestrator, profile_source, cache_store):
        """A cold name is fetched once, derived, and cached."""
        profile = await orchestrator.get_profile("pikachu")

        assert profile == Profile(
            name="pikachu",
            description=PIKACHU_DESCRIPTION,
            habitat="forest",
            is_legendary=False,
        )
        profile_source.fetch_profile.assert_awaited_once_with("pikachu")
        assert cache_store.get_profile("pikachu") == (profile, True)

    @pytest.mark.asyncio
    async def test_get_profile_twice_hits_cache(self, orchestrator, profile_source, metrics):
        """Second call is served purely from cache."""
        first = await orchestrator.get_profile("pikachu")
        second = await orchestrator.get_profile("pikachu")

        assert first == second
        assert profile_source.fetch_profile.await_count == 1
        assert metrics.get_counter_value("cache_misses_total", cache_type="profiles") == 1
        assert metrics.get_counter_value("cache_hits_total", cache_type="profiles") == 1

    @pytest.mark.asyncio
    async def test_get_profile_not_found(self, orchestrator, profile_source, cache_store):
        """Unknown names raise ProfileNotFound and cache nothing."""
        profile_source.fetch_profile.return_value = None

        with pytest.raises(ProfileNotFound) as exc_info:
            await orchestrator.get_profile("NoPokemon")

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Pokemon not found"
        assert cache_store.get_stats() == {"profiles": 0, "translations": 0}

    @pytest.mark.asyncio
    async def test_not_found_is_not_cached(self, orchestrator, profile_source):
        """A miss is retried upstream on the next call."""
        profile_source.fetch_profile.return_value = None

        for _ in range(2):
            with pytest.raises(ProfileNotFound):
                await orchestrator.get_profile("NoPokemon")

        assert profile_source.fetch_profile.await_count == 2

    @pytest.mark.asyncio
    async def test_missing_habitat_is_not_found(self, orchestrator, profile_source, cache_store):
        profile_source.fetch_profile.return_value = raw_profile("eternatus", None, is_legendary=True)

        with pytest.raises(ProfileNotFound) as exc_info:
            await orchestrator.get_profile("eternatus")

        assert exc_info.value.details["reason"] == "missing_habitat"
        assert cache_store.get_stats()["profiles"] == 0

    @pytest.mark.asyncio
    async def test_profile_upstream_error_is_not_found(self, orchestrator, profile_source, cache_store, metrics):
        profile_source.fetch_profile.side_effect = ExternalServiceError("pokeapi", "Unexpected status 500")

        with pytest.raises(ProfileNotFound):
            await orchestrator.get_profile("pikachu")

        assert cache_store.get_stats()["profiles"] == 0
        assert metrics.get_counter_value("upstream_requests_total", upstream="pokeapi", outcome="error") == 1

    @pytest.mark.asyncio
    async def test_translated_profile_uses_shakespeare_for_forest(self, orchestrator, translation_source):
        """Forest, non-legendary profiles are translated to Shakespeare."""
        source_profile = await orchestrator.get_profile("pikachu")

        translated = await orchestrator.get_translated_profile("pikachu")

        translation_source.translate.assert_awaited_once_with(
            PIKACHU_DESCRIPTION, TranslationStyle.SHAKESPEARE
        )
        assert translated.description == PIKACHU_SHAKESPEARE
        assert translated.name == source_profile.name
        assert translated.habitat == source_profile.habitat
        assert translated.is_legendary == source_profile.is_legendary

    @pytest.mark.asyncio
    async def test_translated_profile_uses_yoda_for_cave(self, orchestrator, profile_source, translation_source):
        profile_source.fetch_profile.return_value = raw_profile(
            "zubat", "cave", text="Forms colonies in perpetually dark places."
        )
        translation_source.translate.return_value = ZUBAT_YODA

        translated = await orchestrator.get_translated_profile("zubat")

        assert translated.description == ZUBAT_YODA
        styles = [call.args[1] for call in translation_source.translate.await_args_list]
        assert styles == [TranslationStyle.YODA]
        assert TranslationStyle.SHAKESPEARE not in styles

    @pytest.mark.asyncio
    async def test_translated_profile_uses_yoda_for_legendary(self, orchestrator, profile_source, translation_source):
        profile_source.fetch_profile.return_value = raw_profile("mewtwo", "rare", is_legendary=True)

        await orchestrator.get_translated_profile("mewtwo")

        assert translation_source.translate.await_args.args[1] == TranslationStyle.YODA

    @pytest.mark.asyncio
    async def test_translated_profile_does_not_alter_cached_profile(self, orchestrator, cache_store):
        translated = await orchestrator.get_translated_profile("pikachu")

        cached, _ = cache_store.get_profile("pikachu")
        assert cached.description == PIKACHU_DESCRIPTION
        assert translated.description == PIKACHU_SHAKESPEARE
        assert cache_store.get_translation("pikachu") == (PIKACHU_SHAKESPEARE, True)

    @pytest.mark.asyncio
    async def test_translated_profile_warm_caches(self, orchestrator, profile_source, translation_source):
        """Once both caches are warm no upstream is called again."""
        first = await orchestrator.get_translated_profile("pikachu")
        second = await orchestrator.get_translated_profile("pikachu")

        assert first == second
        assert profile_source.fetch_profile.await_count == 1
        assert translation_source.translate.await_count == 1

    @pytest.mark.asyncio
    async def test_translation_cache_is_keyed_by_name(self, orchestrator, cache_store, translation_source):
        """A cached translation short-circuits even if the description differs."""
        cache_store.put_profile(
            "pikachu",
            Profile(name="pikachu", description="A newer description.", habitat="forest", is_legendary=False),
        )
        cache_store.put_translation("pikachu", PIKACHU_SHAKESPEARE)

        translated = await orchestrator.get_translated_profile("pikachu")

        assert translated.description == PIKACHU_SHAKESPEARE
        translation_source.translate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_translated_profile_not_found(self, orchestrator, profile_source, translation_source, cache_store):
        profile_source.fetch_profile.return_value = None

        with pytest.raises(ProfileNotFound):
            await orchestrator.get_translated_profile("NoPokemon")

        translation_source.translate.assert_not_awaited()
        assert cache_store.get_stats() == {"profiles": 0, "translations": 0}

    @pytest.mark.asyncio
    async def test_rate_limited_translation(self, orchestrator, translation_source, cache_store):
        """Rate limiting fails the request, caches nothing, and is retried later."""
        translation_source.translate.side_effect = RateLimitError("Translation rate limit reached")

        with pytest.raises(TranslationRateLimited) as exc_info:
            await orchestrator.get_translated_profile("pikachu")

        assert exc_info.value.status_code == 429
        assert exc_info.value.message == "Translation failed"
        assert cache_store.get_translation("pikachu") == (None, False)

        translation_source.translate.side_effect = None
        translation_source.translate.return_value = PIKACHU_SHAKESPEARE

        translated = await orchestrator.get_translated_profile("pikachu")

        assert translated.description == PIKACHU_SHAKESPEARE
        assert translation_source.translate.await_count == 2

    @pytest.mark.asyncio
    async def test_other_translation_failure_is_rate_limited(self, orchestrator, translation_source, cache_store):
        translation_source.translate.side_effect = ExternalServiceError("funtranslations", "Unexpected status 500")

        with pytest.raises(TranslationRateLimited) as exc_info:
            await orchestrator.get_translated_profile("pikachu")

        assert exc_info.value.details["reason"] == "upstream_error"
        assert cache_store.get_stats()["translations"] == 0
        # The profile itself was still fetched and cached
        assert cache_store.get_stats()["profiles"] == 1

    @pytest.mark.asyncio
    async def test_concurrent_cold_requests(self, orchestrator, profile_source):
        """Concurrent cold misses may both fetch; the cache stays consistent."""
        async def slow_fetch(name):
            await asyncio.sleep(0.01)
            return raw_profile(name, "forest", text=PIKACHU_DESCRIPTION)

        profile_source.fetch_profile.side_effect = slow_fetch

        results = await asyncio.gather(*(orchestrator.get_profile("pikachu") for _ in range(5)))

        assert all(result == results[0] for result in results)
        assert 1 <= profile_source.fetch_profile.await_count <= 5
        assert orchestrator.cache_store.get_stats()["profiles"] == 1

    @pytest.mark.asyncio
    async def test_translation_metrics(self, orchestrator, metrics):
        await orchestrator.get_translated_profile("pikachu")

        assert metrics.get_counter_value("translations_total", style="shakespeare") == 1
        assert metrics.get_counter_value(
            "upstream_requests_total", upstream="funtranslations", outcome="success"
        ) == 1

    @pytest.mark.asyncio
    async def test_works_without_metrics(self, profile_source, translation_source):
        orchestrator = PokedexOrchestrator(profile_source, translation_source)

        translated = await orchestrator.get_translated_profile("pikachu")

        assert translated.description == PIKACHU_SHAKESPEARE
