"""
Market Data Service Implementation

Acquires a quote and daily history for a symbol through fallback chains
and runs the forecast on top.
Quote:   Alpha Vantage -> Yahoo Finance (yfinance) -> Synthetic
History: Yahoo Finance (chart endpoint) -> Synthetic
"""

import asyncio
import logging
import random
from datetime import date, datetime, timezone
from typing import Callable, Optional, Sequence

from app.core.config import Settings
from app.schemas.market import Quote, TimeSeries
from app.schemas.prediction import StockAnalysis
from app.services.data_ingestion.alpha_vantage_adapter import AlphaVantageQuoteProvider
from app.services.data_ingestion.interface import (
    MarketDataProvider,
    MarketDataServiceInterface,
)
from app.services.data_ingestion.mock_data import (
    SyntheticHistoryProvider,
    SyntheticMarketData,
    SyntheticQuoteProvider,
)
from app.services.data_ingestion.provider_chain import ProviderChain
from app.services.data_ingestion.yahoo_adapter import (
    YahooHistoryProvider,
    YahooQuoteProvider,
)
from app.services.prediction import forecast, project

logger = logging.getLogger(__name__)


def build_quote_providers(settings: Settings) -> list[MarketDataProvider[Quote]]:
    """Upstream quote providers in priority order, honoring feature flags."""
    providers: list[MarketDataProvider[Quote]] = []
    if settings.enable_alpha_vantage:
        providers.append(AlphaVantageQuoteProvider(settings))
    if settings.enable_yahoo_quote:
        providers.append(YahooQuoteProvider())
    return providers


def build_history_providers(settings: Settings) -> list[MarketDataProvider[TimeSeries]]:
    """Upstream history providers in priority order, honoring feature flags."""
    providers: list[MarketDataProvider[TimeSeries]] = []
    if settings.enable_yahoo_history:
        providers.append(YahooHistoryProvider(settings))
    return providers


def normalize_symbol(symbol: str) -> str:
    """Uppercase, trimmed ticker. Raises ValueError when empty."""
    symbol = (symbol or "").strip().upper()
    if not symbol:
        raise ValueError("symbol must be a non-empty string")
    return symbol


class MarketDataService(MarketDataServiceInterface):
    """
    Market Data Service.

    Each request builds its own data; the service holds only configuration,
    provider clients and a factory for per-request random sources.
    """

    def __init__(
        self,
        settings: Settings,
        quote_providers: Optional[Sequence[MarketDataProvider[Quote]]] = None,
        history_providers: Optional[Sequence[MarketDataProvider[TimeSeries]]] = None,
        rng_factory: Callable[[], random.Random] = random.Random,
        clock: Callable[[], date] = date.today,
    ):
        if quote_providers is None:
            quote_providers = build_quote_providers(settings)
        if history_providers is None:
            history_providers = build_history_providers(settings)

        self._rng_factory = rng_factory
        self._clock = clock
        self._quote_chain: ProviderChain[Quote] = ProviderChain(
            label="quote",
            providers=quote_providers,
            fallback=SyntheticQuoteProvider(rng_factory, clock),
            timeout=settings.quote_timeout_seconds,
        )
        self._history_chain: ProviderChain[TimeSeries] = ProviderChain(
            label="history",
            providers=history_providers,
            fallback=SyntheticHistoryProvider(rng_factory, clock),
            timeout=settings.history_timeout_seconds,
        )

    async def fetch_quote(self, symbol: str) -> Quote:
        """Current quote for a symbol. Never fails for a non-empty symbol."""
        result = await self._quote_chain.run(normalize_symbol(symbol))
        return result.value

    async def fetch_time_series(self, symbol: str) -> TimeSeries:
        """Daily closes, ascending. Never fails for a non-empty symbol."""
        result = await self._history_chain.run(normalize_symbol(symbol))
        return result.value

    async def analyze(self, symbol: str) -> StockAnalysis:
        """
        Quote, history, forecast and projection for one symbol.

        The two chains run concurrently; the forecast starts once both
        have settled. Cancelling the caller cancels both chains.
        """
        symbol = normalize_symbol(symbol)

        # fallback quote and fallback series share one base price
        synthetic = SyntheticMarketData(symbol, self._rng_factory(), self._clock())

        quote_result, history_result = await asyncio.gather(
            self._quote_chain.run(symbol, fallback=SyntheticQuoteProvider(data=synthetic)),
            self._history_chain.run(
                symbol, fallback=SyntheticHistoryProvider(data=synthetic)
            ),
        )

        quote = quote_result.value
        history = history_result.value

        rng = self._rng_factory()
        prediction = forecast([p.value for p in history], rng)
        projection = project(history, rng)

        is_synthetic = quote_result.is_synthetic or history_result.is_synthetic
        logger.info(
            f"Analysis for {symbol}: price {quote.price:.2f} -> {prediction.next_price:.2f} "
            f"({prediction.trend.value}, confidence {prediction.confidence:.0%}, "
            f"quote: {quote_result.source}, history: {history_result.source})"
        )
        if is_synthetic:
            logger.warning(f"Analysis for {symbol} includes synthetic data")

        return StockAnalysis(
            symbol=symbol,
            quote=quote,
            history=history,
            prediction=prediction,
            prediction_change=prediction.next_price - quote.price,
            projection=projection,
            quote_source=quote_result.source,
            history_source=history_result.source,
            is_synthetic=is_synthetic,
            generated_at=datetime.now(timezone.utc),
        )

    async def validate_input(self, input_data: str) -> str:
        return normalize_symbol(input_data)

    async def execute(self, input_data: str) -> StockAnalysis:
        symbol = await self.validate_input(input_data)
        return await self.analyze(symbol)

    async def health_check(self) -> bool:
        """Always answerable: the synthetic fallback cannot fail."""
        return True

    def get_data_sources(self) -> dict:
        """Configured provider order per chain."""
        return {
            "quote": [p.name for p in self._quote_chain.providers],
            "history": [p.name for p in self._history_chain.providers],
        }

    async def close(self) -> None:
        """Close provider connections."""
        await self._quote_chain.close()
        await self._history_chain.close()
