"""
StockCast Backend - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import Settings, get_settings
from app.core.logging_config import configure_logging
from app.api.v1 import router as api_v1_router
from app.services.data_ingestion import MarketDataService

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    market_data_service: Optional[MarketDataService] = None,
) -> FastAPI:
    """Build the application. Both arguments default to production wiring."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        # Startup
        configure_logging(settings.log_level)
        logger.info(f"Starting {settings.app_name} v{settings.app_version}")
        logger.info(f"Environment: {settings.environment}")

        service = market_data_service or MarketDataService(settings)
        app.state.market_data_service = service
        sources = service.get_data_sources()
        logger.info(
            f"Quote sources: {sources['quote'] or ['none']} -> Synthetic; "
            f"history sources: {sources['history'] or ['none']} -> Synthetic"
        )

        yield

        # Shutdown
        logger.info("Shutting down...")
        await service.close()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="""
        StockCast Market Data & Forecast API

        ## Architecture
        - **Data Ingestion**: Alpha Vantage / Yahoo Finance with synthetic fallback
        - **Indicator Library**: Moving average, momentum, volatility, support/resistance
        - **Forecast Engine**: Heuristic next-price estimate with confidence and trend
        - **Projection**: 7-day forward extrapolation for charting

        ## Core Principles
        - Data endpoints always answer; upstream failures fall back to synthetic data
        - Confidence is a heuristic score, not a probability
        """,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API routes
    app.include_router(api_v1_router, prefix="/api/v1")

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        service: MarketDataService = app.state.market_data_service
        return {
            "status": "healthy" if await service.health_check() else "degraded",
            "app": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
            "data_sources": service.get_data_sources(),
        }

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": "StockCast Backend API",
            "docs": "/docs",
            "health": "/health",
        }

    return app


app = create_app()
