"""
Pokedex service for the Pokedex Access Layer.
"""

from typing import Any, Dict

from shared.base_service import BaseService
from shared.circuit_breaker import circuit_breaker_manager

from .adapters import PokeApiClient, TranslationClient
from .caching import ProfileCacheStore
from .models import ProfileResponse
from .orchestrator import PokedexOrchestrator

NOT_FOUND_RESPONSE = {404: {"description": "Pokemon not found"}}
TRANSLATION_RESPONSES = {
    **NOT_FOUND_RESPONSE,
    429: {"description": "Translation failed"},
}


class PokedexService(BaseService):
    """Pokedex service implementation."""

    def __init__(self):
        super().__init__("pokedex")

        self.pokeapi_client = PokeApiClient(
            self.config.pokeapi_url,
            timeout=self.config.upstream_timeout_seconds,
            failure_threshold=self.config.circuit_failure_threshold,
            recovery_timeout=self.config.circuit_recovery_timeout,
        )
        self.translation_client = TranslationClient(
            self.config.translation_api_url,
            timeout=self.config.upstream_timeout_seconds,
            failure_threshold=self.config.circuit_failure_threshold,
            recovery_timeout=self.config.circuit_recovery_timeout,
        )
        self.cache_store = ProfileCacheStore()
        self.orchestrator = PokedexOrchestrator(
            self.pokeapi_client,
            self.translation_client,
            self.cache_store,
            metrics=self.metrics,
        )

        self._setup_pokedex_routes()

        # Expose service instance via app state for introspection/testing
        self.app.state.pokedex_service = self

    def _setup_pokedex_routes(self):
        """Set up pokedex-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "pokedex",
                "message": "Pokedex Access Layer - Pokedex Service",
                "version": "1.0.0",
                "endpoints": ["/pokemon/{name}", "/translated/{name}"],
            }

        @self.app.get(
            "/pokemon/{name}",
            response_model=ProfileResponse,
            responses=NOT_FOUND_RESPONSE,
        )
        async def get_pokemon(name: str):
            """Return the canonical profile for a creature."""
            profile = await self.orchestrator.get_profile(name)
            return ProfileResponse.from_profile(profile)

        @self.app.get(
            "/translated/{name}",
            response_model=ProfileResponse,
            responses=TRANSLATION_RESPONSES,
        )
        async def get_translated_pokemon(name: str):
            """Return the profile with a Yoda or Shakespeare description."""
            profile = await self.orchestrator.get_translated_profile(name)
            return ProfileResponse.from_profile(profile)

    async def _check_dependencies(self) -> Dict[str, Any]:
        """Report cache sizes and upstream circuit states."""
        return {
            "cache": self.cache_store.get_stats(),
            "circuit_breakers": circuit_breaker_manager.get_all_states(),
        }


def create_app():
    """Create pokedex service application."""
    service = PokedexService()
    return service.app


if __name__ == "__main__":
    service = PokedexService()
    service.run()
