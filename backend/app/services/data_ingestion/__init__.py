"""
Data Ingestion Service

CONTRACT:
    Input:  symbol
    Output: Quote, TimeSeries (and StockAnalysis with the forecast)

RESPONSIBILITIES:
    - Fetch quotes from Alpha Vantage, then Yahoo Finance
    - Fetch daily history from Yahoo Finance
    - Normalize payloads to the standard schemas
    - Fall back to synthetic data when every source fails

NEVER FAILS for a non-empty symbol - upstream errors stop at the chain.
"""

from app.services.data_ingestion.interface import (
    MarketDataProvider,
    MarketDataServiceInterface,
    ProviderOutcome,
)
from app.services.data_ingestion.provider_chain import ChainResult, ProviderChain
from app.services.data_ingestion.service import MarketDataService

__all__ = [
    "MarketDataProvider",
    "MarketDataServiceInterface",
    "ProviderOutcome",
    "ChainResult",
    "ProviderChain",
    "MarketDataService",
]
