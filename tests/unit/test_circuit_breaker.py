"""
Unit tests for the shared circuit breaker.
"""

import pytest
from unittest.mock import AsyncMock, patch

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from shared.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerManager,
    CircuitBreakerOpenException,
    CircuitBreakerState,
)
from shared.errors import RateLimitError


class TestCircuitBreaker:
    """Test cases for CircuitBreaker."""

    @pytest.fixture
    def breaker(self):
        return CircuitBreaker(failure_threshold=2, recovery_timeout=30.0, name="test")

    @pytest.mark.asyncio
    async def test_successful_call(self, breaker):
        func = AsyncMock(return_value="ok")

        assert await breaker.call(func, "a", key="b") == "ok"
        func.assert_awaited_once_with("a", key="b")
        assert breaker.get_state()["state"] == "closed"

    @pytest.mark.asyncio
    async def test_opens_after_threshold(self, breaker):
        func = AsyncMock(side_effect=ConnectionError("down"))

        for _ in range(2):
            with pytest.raises(ConnectionError):
                await breaker.call(func)

        assert breaker.is_open()
        with pytest.raises(CircuitBreakerOpenException):
            await breaker.call(func)
        assert func.await_count == 2

    @pytest.mark.asyncio
    async def test_success_resets_failure_count(self, breaker):
        failing = AsyncMock(side_effect=ConnectionError("down"))

        with pytest.raises(ConnectionError):
            await breaker.call(failing)
        await breaker.call(AsyncMock(return_value="ok"))

        assert breaker.get_state()["failure_count"] == 0

    @pytest.mark.asyncio
    async def test_half_open_after_recovery_timeout(self, breaker):
        failing = AsyncMock(side_effect=ConnectionError("down"))
        for _ in range(2):
            with pytest.raises(ConnectionError):
                await breaker.call(failing)

        with patch("shared.circuit_breaker.time.time", return_value=breaker._last_failure_time + 31):
            result = await breaker.call(AsyncMock(return_value="recovered"))

        assert result == "recovered"
        assert breaker.get_state()["state"] == CircuitBreakerState.CLOSED.value

    @pytest.mark.asyncio
    async def test_half_open_failure_reopens(self, breaker):
        failing = AsyncMock(side_effect=ConnectionError("down"))
        for _ in range(2):
            with pytest.raises(ConnectionError):
                await breaker.call(failing)

        with patch("shared.circuit_breaker.time.time", return_value=breaker._last_failure_time + 31):
            with pytest.raises(ConnectionError):
                await breaker.call(failing)

        assert breaker.is_open()

    @pytest.mark.asyncio
    async def test_ignored_exceptions_are_not_failures(self):
        breaker = CircuitBreaker(failure_threshold=1, ignored_exceptions=(RateLimitError,), name="quota")
        func = AsyncMock(side_effect=RateLimitError())

        for _ in range(3):
            with pytest.raises(RateLimitError):
                await breaker.call(func)

        assert not breaker.is_open()


class TestCircuitBreakerManager:
    """Test cases for CircuitBreakerManager."""

    def test_get_or_create(self):
        manager = CircuitBreakerManager()

        first = manager.get_circuit_breaker("pokeapi", failure_threshold=3)
        second = manager.get_circuit_breaker("pokeapi", failure_threshold=9)

        assert first is second
        assert first.failure_threshold == 3

    def test_states_and_reset(self):
        manager = CircuitBreakerManager()
        manager.get_circuit_breaker("pokeapi")
        manager.get_circuit_breaker("funtranslations")

        states = manager.get_all_states()
        assert set(states) == {"pokeapi", "funtranslations"}
        assert states["pokeapi"]["state"] == "closed"

        manager.reset()

        assert manager.get_all_states() == {}
