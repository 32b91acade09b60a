"""
FunTranslations client for the Pokedex Service.
"""

import httpx

from shared.logging import get_logger
from shared.errors import ExternalServiceError, RateLimitError
from shared.circuit_breaker import get_circuit_breaker
from ..models import TranslationStyle


class TranslationClient:
    """Client for translating text through FunTranslations."""

    SERVICE = "funtranslations"

    def __init__(
        self,
        translation_api_url: str,
        *,
        timeout: float = 10.0,
        failure_threshold: int = 5,
        recovery_timeout: float = 60.0,
    ):
        self.base_url = translation_api_url.rstrip('/')
        self.timeout = timeout
        self.logger = get_logger("pokedex.translation_client")
        # Quota exhaustion says nothing about upstream health
        self.circuit_breaker = get_circuit_breaker(
            self.SERVICE,
            failure_threshold=failure_threshold,
            recovery_timeout=recovery_timeout,
            ignored_exceptions=(RateLimitError,)
        )

    async def translate(self, text: str, style: TranslationStyle) -> str:
        """Translate ``text`` into ``style``.

        Raises RateLimitError when the upstream quota is exhausted (HTTP 429)
        and ExternalServiceError for every other failure.
        """
        url = f"{self.base_url}/{style.value}"

        async def _request() -> str:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json={"text": text})

            if response.status_code == 429:
                self.logger.warning("Translation rate limit reached", style=style.value)
                raise RateLimitError(
                    "Translation rate limit reached",
                    details={"style": style.value, "body": response.text}
                )

            if response.status_code != 200:
                self.logger.error(
                    "Translation request failed",
                    url=url,
                    status_code=response.status_code,
                    response=response.text
                )
                raise ExternalServiceError(
                    service=self.SERVICE,
                    message=f"Unexpected status {response.status_code}",
                    details={"status_code": response.status_code, "style": style.value}
                )

            try:
                translated = response.json()["contents"]["translated"]
            except (ValueError, KeyError, TypeError) as exc:
                raise ExternalServiceError(
                    service=self.SERVICE,
                    message="Malformed translation payload",
                    details={"style": style.value}
                ) from exc
            if not isinstance(translated, str):
                raise ExternalServiceError(
                    service=self.SERVICE,
                    message="Translated text is not a string",
                    details={"style": style.value}
                )

            # The upstream pads sentence joins with a double space
            return translated.replace("  ", " ")

        try:
            return await self.circuit_breaker.call(_request)
        except (RateLimitError, ExternalServiceError):
            raise
        except Exception as exc:
            self.logger.error("Translation service error", style=style.value, error=str(exc))
            raise ExternalServiceError(
                service=self.SERVICE,
                message=str(exc),
                details={"style": style.value}
            ) from exc
