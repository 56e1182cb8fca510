"""
Market Data API Endpoints

Quote, history, forecast and projection for a symbol.
Data endpoints never fail on upstream problems; at worst they
return synthetic data.
"""

import random

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request

from app.schemas.market import Quote, StockInfo, TimeSeriesPoint
from app.schemas.prediction import (
    ForecastRequest,
    PredictionResult,
    ProjectionRequest,
    StockAnalysis,
)
from app.services.data_ingestion import MarketDataService
from app.services.data_ingestion.service import normalize_symbol
from app.services.data_ingestion.stock_list import get_popular_stocks
from app.services.prediction import forecast, project

router = APIRouter()

SymbolPath = Path(..., min_length=1, max_length=15, description="Ticker symbol, e.g. AAPL")


def get_market_data_service(request: Request) -> MarketDataService:
    """Service instance created at application startup."""
    return request.app.state.market_data_service


def _checked_symbol(symbol: str) -> str:
    try:
        return normalize_symbol(symbol)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.get("/quote/{symbol}", response_model=Quote)
async def get_quote(
    symbol: str = SymbolPath,
    service: MarketDataService = Depends(get_market_data_service),
):
    """
    Get current quote for a symbol.

    Sources in order: Alpha Vantage, Yahoo Finance, synthetic.
    """
    return await service.fetch_quote(_checked_symbol(symbol))


@router.get("/history/{symbol}", response_model=list[TimeSeriesPoint])
async def get_history(
    symbol: str = SymbolPath,
    service: MarketDataService = Depends(get_market_data_service),
):
    """
    Get daily closes (about one month, ascending).
    """
    return await service.fetch_time_series(_checked_symbol(symbol))


@router.get("/analysis/{symbol}", response_model=StockAnalysis)
async def get_analysis(
    symbol: str = SymbolPath,
    service: MarketDataService = Depends(get_market_data_service),
):
    """
    Get quote, history, next-price forecast and 7-day projection.
    """
    return await service.analyze(_checked_symbol(symbol))


@router.post("/forecast", response_model=PredictionResult)
async def post_forecast(request: ForecastRequest):
    """
    Forecast the next price from a caller-supplied history (oldest first).

    Pass `seed` for a reproducible result.
    """
    return forecast(request.prices, random.Random(request.seed))


@router.post("/projection", response_model=list[TimeSeriesPoint])
async def post_projection(request: ProjectionRequest):
    """
    Project 7 daily points after the last date of a caller-supplied series.
    """
    return project(request.series, random.Random(request.seed))


@router.get("/popular", response_model=list[StockInfo])
async def get_popular(count: int = Query(default=6, ge=1, le=20)):
    """
    Get popular symbols for default display.
    """
    return get_popular_stocks(count)
