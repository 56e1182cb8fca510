"""Unit tests for ProviderChain.

Tests cover fallback order, per-attempt timeouts, sequential attempts,
synthetic fallback and cancellation.
"""

import asyncio
import logging

import pytest

from conftest import StubProvider, make_quote
from app.services.base import NetworkError, RateLimitError
from app.services.data_ingestion.provider_chain import ProviderChain


def _chain(providers, fallback, timeout=1.0):
    return ProviderChain("quote", providers, fallback, timeout)


class TestFallbackOrder:
    """Test provider priority and short-circuiting."""

    def test_failing_primary_falls_through_to_secondary(self):
        primary = StubProvider("primary", NetworkError("primary", "down"))
        secondary = StubProvider("secondary", make_quote(price=42.0))
        fallback = StubProvider("synthetic", make_quote(price=1.0))

        result = asyncio.run(_chain([primary, secondary], fallback).run("AAPL"))

        assert primary.calls == ["AAPL"]
        assert secondary.calls == ["AAPL"]
        assert fallback.calls == []
        assert result.value.price == 42.0
        assert result.source == "secondary"
        assert result.is_synthetic is False

    def test_successful_primary_short_circuits(self):
        primary = StubProvider("primary", make_quote(price=10.0))
        secondary = StubProvider("secondary", make_quote(price=20.0))
        fallback = StubProvider("synthetic", make_quote(price=1.0))

        result = asyncio.run(_chain([primary, secondary], fallback).run("AAPL"))

        assert result.value.price == 10.0
        assert secondary.calls == []
        assert len(result.outcomes) == 1

    def test_all_failures_reach_synthetic(self):
        primary = StubProvider("primary", RateLimitError("primary", "quota"))
        secondary = StubProvider("secondary", NetworkError("secondary", "HTTP 503"))
        fallback = StubProvider("synthetic", make_quote(price=77.0))

        result = asyncio.run(_chain([primary, secondary], fallback).run("AAPL"))

        assert result.value.price == 77.0
        assert result.source == "synthetic"
        assert result.is_synthetic is True
        assert fallback.calls == ["AAPL"]
        assert [o.reason for o in result.failures] == ["rate_limited", "network_error"]

    def test_no_upstream_providers_uses_fallback(self):
        fallback = StubProvider("synthetic", make_quote(price=5.0))

        result = asyncio.run(_chain([], fallback).run("AAPL"))

        assert result.is_synthetic is True
        assert result.value.price == 5.0

    def test_unexpected_exception_is_a_provider_failure(self):
        primary = StubProvider("primary", KeyError("05. price"))
        secondary = StubProvider("secondary", make_quote(price=3.0))
        fallback = StubProvider("synthetic", make_quote(price=1.0))

        result = asyncio.run(_chain([primary, secondary], fallback).run("AAPL"))

        assert result.value.price == 3.0
        assert result.outcomes[0].reason == "unexpected_error"
        assert "KeyError" in result.outcomes[0].message

    def test_no_retry_within_provider(self):
        primary = StubProvider("primary", NetworkError("primary", "reset"))
        fallback = StubProvider("synthetic", make_quote())

        asyncio.run(_chain([primary], fallback).run("AAPL"))

        assert len(primary.calls) == 1


class TestTimeouts:
    """Test per-attempt timeouts."""

    def test_slow_provider_times_out_and_falls_through(self):
        slow = StubProvider("slow", make_quote(price=10.0), delay=1.0)
        fast = StubProvider("fast", make_quote(price=20.0))
        fallback = StubProvider("synthetic", make_quote(price=1.0))

        result = asyncio.run(_chain([slow, fast], fallback, timeout=0.05).run("AAPL"))

        assert result.value.price == 20.0
        assert result.outcomes[0].reason == "timeout"
        assert result.outcomes[0].provider == "slow"

    def test_each_attempt_gets_its_own_timeout(self):
        first = StubProvider("first", make_quote(price=10.0), delay=0.5)
        second = StubProvider("second", make_quote(price=20.0), delay=0.1)
        fallback = StubProvider("synthetic", make_quote(price=1.0))

        result = asyncio.run(_chain([first, second], fallback, timeout=0.3).run("AAPL"))

        # 0.5s exceeds the timeout, 0.1s fits a fresh 0.3s window
        assert result.source == "second"


class TestSequencing:
    """Test attempts run one after another."""

    def test_next_provider_starts_after_previous_settles(self):
        events = []
        primary = StubProvider("primary", NetworkError("primary", "x"), delay=0.05, events=events)
        secondary = StubProvider("secondary", make_quote(), events=events)
        fallback = StubProvider("synthetic", make_quote(), events=events)

        asyncio.run(_chain([primary, secondary], fallback).run("AAPL"))

        assert events == [
            ("start", "primary"),
            ("end", "primary"),
            ("start", "secondary"),
            ("end", "secondary"),
        ]


class TestCancellation:
    """Test cancelling a request mid-chain."""

    def test_cancel_aborts_in_flight_call_and_skips_rest(self):
        slow = StubProvider("slow", make_quote(price=10.0), delay=5.0)
        secondary = StubProvider("secondary", make_quote(price=20.0))
        fallback = StubProvider("synthetic", make_quote(price=1.0))
        chain = _chain([slow, secondary], fallback, timeout=10.0)

        async def scenario():
            task = asyncio.create_task(chain.run("AAPL"))
            await asyncio.sleep(0.05)
            task.cancel()
            await task

        with pytest.raises(asyncio.CancelledError):
            asyncio.run(scenario())

        assert slow.calls == ["AAPL"]
        assert secondary.calls == []
        assert fallback.calls == []


class TestClose:
    """Test close() reaches every provider."""

    def test_close_closes_all_providers(self):
        primary = StubProvider("primary", make_quote())
        fallback = StubProvider("synthetic", make_quote())

        asyncio.run(_chain([primary], fallback).close())

        assert primary.closed and fallback.closed


class TestFallbackOverride:
    """Test a per-call terminal provider."""

    def test_call_fallback_replaces_chain_fallback(self):
        primary = StubProvider("primary", NetworkError("primary", "down"))
        default = StubProvider("synthetic", make_quote(price=1.0))
        override = StubProvider("synthetic", make_quote(price=2.0))

        result = asyncio.run(_chain([primary], default).run("AAPL", fallback=override))

        assert result.value.price == 2.0
        assert default.calls == []
        assert override.calls == ["AAPL"]


class TestFallbackLogging:
    """Test the warning emitted when synthetic data is used."""

    def test_no_configured_sources_message(self, caplog):
        fallback = StubProvider("synthetic", make_quote())

        with caplog.at_level(logging.WARNING):
            asyncio.run(_chain([], fallback).run("AAPL"))

        assert "no upstream sources configured" in caplog.text
        assert "0 upstream" not in caplog.text

    def test_all_sources_failed_message(self, caplog):
        primary = StubProvider("primary", NetworkError("primary", "down"))
        fallback = StubProvider("synthetic", make_quote())

        with caplog.at_level(logging.WARNING):
            asyncio.run(_chain([primary], fallback).run("AAPL"))

        assert "all 1 upstream source(s) failed" in caplog.text
