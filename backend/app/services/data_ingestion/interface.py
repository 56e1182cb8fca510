"""
Data Ingestion Service Interface

Defines the contract for the market data layer and for the
providers that the fallback chains are built from.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from app.services.base import BaseService
from app.schemas.market import Quote, TimeSeries
from app.schemas.prediction import StockAnalysis

T = TypeVar("T")


class MarketDataProvider(ABC, Generic[T]):
    """
    One source of market data, tried as a step in a provider chain.

    fetch() either returns a normalized value or raises a ProviderError.
    Providers never retry; the chain decides what happens next.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name for logging and outcome reporting."""
        pass

    @abstractmethod
    async def fetch(self, symbol: str) -> T:
        """Fetch data for an uppercase symbol."""
        pass

    async def close(self) -> None:
        """Release any connections held by the provider."""
        return None


@dataclass(frozen=True)
class ProviderOutcome(Generic[T]):
    """Result of a single provider attempt: success(value) or failure(reason)."""

    provider: str
    value: Optional[T] = None
    reason: Optional[str] = None
    message: Optional[str] = None
    elapsed_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.reason is None

    @classmethod
    def success(cls, provider: str, value: T, elapsed_ms: int = 0) -> "ProviderOutcome[T]":
        return cls(provider=provider, value=value, elapsed_ms=elapsed_ms)

    @classmethod
    def failure(
        cls, provider: str, reason: str, message: str = "", elapsed_ms: int = 0
    ) -> "ProviderOutcome[T]":
        return cls(
            provider=provider, reason=reason, message=message, elapsed_ms=elapsed_ms
        )


class MarketDataServiceInterface(BaseService[str, StockAnalysis]):
    """
    Market Data Service Contract.

    INPUT: symbol
        - Ticker symbol, any case

    OUTPUT: StockAnalysis
        - quote: current Quote (never missing)
        - history: daily closes, ascending
        - prediction / projection: forecast outputs
    """

    @property
    def name(self) -> str:
        return "MarketDataService"

    @abstractmethod
    async def execute(self, input_data: str) -> StockAnalysis:
        """Fetch data and forecast for one symbol."""
        pass

    @abstractmethod
    async def fetch_quote(self, symbol: str) -> Quote:
        """Current quote. Falls back to synthetic data; never fails."""
        pass

    @abstractmethod
    async def fetch_time_series(self, symbol: str) -> TimeSeries:
        """Daily closes. Falls back to synthetic data; never fails."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check the service can answer requests."""
        pass
