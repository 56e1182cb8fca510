"""
Provider Fallback Chain

Tries market data providers in priority order and falls through on any
failure, ending at a synthetic provider that cannot fail:

    primary -> secondary -> ... -> synthetic

Each attempt gets its own timeout. Attempts run strictly one after another
so rate-limited quota is only spent when the previous source has settled.
A timeout, a provider error and an unexpected exception are all handled the
same way: record the failure, move on. Cancellation is not a failure and
propagates to whoever cancelled the request.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Generic, Optional, Sequence, TypeVar

from app.services.base import ProviderError
from app.services.data_ingestion.interface import MarketDataProvider, ProviderOutcome

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class ChainResult(Generic[T]):
    """Value returned by a chain plus the attempts that led to it."""

    value: T
    source: str
    outcomes: list[ProviderOutcome] = field(default_factory=list)
    is_synthetic: bool = False

    @property
    def failures(self) -> list[ProviderOutcome]:
        return [o for o in self.outcomes if not o.ok]


class ProviderChain(Generic[T]):
    """
    Ordered fallback over providers sharing one capability.

    Args:
        label: Chain name for logging ("quote", "history")
        providers: Upstream providers, highest priority first
        fallback: Terminal provider; must not fail
        timeout: Seconds allowed per upstream attempt
    """

    def __init__(
        self,
        label: str,
        providers: Sequence[MarketDataProvider[T]],
        fallback: MarketDataProvider[T],
        timeout: float,
    ):
        self._label = label
        self._providers = list(providers)
        self._fallback = fallback
        self._timeout = timeout

    @property
    def providers(self) -> list[MarketDataProvider[T]]:
        return list(self._providers)

    async def _attempt(
        self, provider: MarketDataProvider[T], symbol: str
    ) -> ProviderOutcome[T]:
        """Run one provider under the timeout and classify the result."""
        started = time.monotonic()

        def elapsed() -> int:
            return int((time.monotonic() - started) * 1000)

        try:
            value = await asyncio.wait_for(provider.fetch(symbol), timeout=self._timeout)
        except asyncio.TimeoutError:
            return ProviderOutcome.failure(
                provider.name, "timeout", f"no response within {self._timeout}s", elapsed()
            )
        except ProviderError as e:
            return ProviderOutcome.failure(provider.name, e.reason, e.message, elapsed())
        except Exception as e:
            logger.debug(f"{provider.name} raised unexpectedly", exc_info=True)
            return ProviderOutcome.failure(
                provider.name, "unexpected_error", f"{type(e).__name__}: {e}", elapsed()
            )

        return ProviderOutcome.success(provider.name, value, elapsed())

    async def run(
        self, symbol: str, fallback: Optional[MarketDataProvider[T]] = None
    ) -> ChainResult[T]:
        """
        Return the first successful provider's value, else the fallback's.

        `fallback` replaces the chain's terminal provider for this call only.
        """
        fallback = fallback or self._fallback
        outcomes: list[ProviderOutcome] = []

        for provider in self._providers:
            outcome = await self._attempt(provider, symbol)
            outcomes.append(outcome)

            if outcome.ok:
                logger.info(
                    f"{self._label} {symbol}: {provider.name} ok ({outcome.elapsed_ms}ms)"
                )
                return ChainResult(value=outcome.value, source=provider.name, outcomes=outcomes)

            logger.warning(
                f"{self._label} {symbol}: {provider.name} failed "
                f"[{outcome.reason}] {outcome.message}"
            )

        value = await fallback.fetch(symbol)
        outcomes.append(ProviderOutcome.success(fallback.name, value))
        if self._providers:
            logger.warning(
                f"{self._label} {symbol}: using {fallback.name} data "
                f"(all {len(self._providers)} upstream source(s) failed)"
            )
        else:
            logger.warning(
                f"{self._label} {symbol}: using {fallback.name} data "
                "(no upstream sources configured)"
            )
        return ChainResult(
            value=value,
            source=fallback.name,
            outcomes=outcomes,
            is_synthetic=True,
        )

    async def close(self) -> None:
        """Close every provider in the chain."""
        for provider in self._providers + [self._fallback]:
            await provider.close()
