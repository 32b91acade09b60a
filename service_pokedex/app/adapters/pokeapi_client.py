"""
PokeAPI client for the Pokedex Service.
"""

from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from shared.logging import get_logger
from shared.errors import ExternalServiceError
from shared.circuit_breaker import get_circuit_breaker
from ..models import DescriptionEntry, RawProfile


class PokeApiClient:
    """Client for fetching creature profiles from PokeAPI."""

    SERVICE = "pokeapi"

    def __init__(
        self,
        pokeapi_url: str,
        *,
        timeout: float = 10.0,
        failure_threshold: int = 5,
        recovery_timeout: float = 60.0,
    ):
        self.base_url = pokeapi_url.rstrip('/')
        self.timeout = timeout
        self.logger = get_logger("pokedex.pokeapi_client")
        self.circuit_breaker = get_circuit_breaker(
            self.SERVICE,
            failure_threshold=failure_threshold,
            recovery_timeout=recovery_timeout
        )

    async def fetch_profile(self, name: str) -> Optional[RawProfile]:
        """Fetch the raw profile for ``name``.

        Returns None when PokeAPI does not know the name. Any other failure
        is raised as ExternalServiceError.
        """

        async def _request() -> Optional[RawProfile]:
            pokemon_url = f"{self.base_url}/pokemon/{quote(name, safe='')}"
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(pokemon_url)
                if response.status_code == 404:
                    self.logger.info("Pokemon not found upstream", name=name)
                    return None
                pokemon = self._read_json(response, pokemon_url)

                species_url = self._species_url(pokemon)
                species_response = await client.get(species_url)
                species = self._read_json(species_response, species_url)

            return self._parse_profile(pokemon, species)

        try:
            return await self.circuit_breaker.call(_request)
        except ExternalServiceError:
            raise
        except Exception as exc:
            self.logger.error("PokeAPI request error", name=name, error=str(exc))
            raise ExternalServiceError(
                service=self.SERVICE,
                message=str(exc),
                details={"name": name}
            ) from exc

    def _read_json(self, response: httpx.Response, url: str) -> Dict[str, Any]:
        if response.status_code != 200:
            self.logger.error(
                "PokeAPI request failed",
                url=url,
                status_code=response.status_code
            )
            raise ExternalServiceError(
                service=self.SERVICE,
                message=f"Unexpected status {response.status_code}",
                details={"status_code": response.status_code, "url": url}
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise ExternalServiceError(
                service=self.SERVICE,
                message="Response is not valid JSON",
                details={"url": url}
            ) from exc
        if not isinstance(payload, dict):
            raise ExternalServiceError(
                service=self.SERVICE,
                message="Response is not a JSON object",
                details={"url": url}
            )
        return payload

    def _species_url(self, pokemon: Dict[str, Any]) -> str:
        try:
            return pokemon["species"]["url"]
        except (KeyError, TypeError) as exc:
            raise ExternalServiceError(
                service=self.SERVICE,
                message="Pokemon payload has no species link",
                details={"name": pokemon.get("name")}
            ) from exc

    def _parse_profile(self, pokemon: Dict[str, Any], species: Dict[str, Any]) -> RawProfile:
        """Map the pokemon and species payloads onto a RawProfile."""
        try:
            descriptions = tuple(
                DescriptionEntry(
                    language=entry["language"]["name"],
                    text=entry["flavor_text"],
                )
                for entry in species.get("flavor_text_entries") or []
            )
            habitat = species.get("habitat")
            return RawProfile(
                name=pokemon["name"],
                descriptions=descriptions,
                habitat=habitat["name"] if habitat else None,
                is_legendary=bool(species.get("is_legendary", False)),
            )
        except (KeyError, TypeError) as exc:
            raise ExternalServiceError(
                service=self.SERVICE,
                message="Malformed species payload",
                details={"error": str(exc)}
            ) from exc
