"""
StockCast Services

data_ingestion: quotes and daily history behind provider fallback chains
indicators:     technical indicator functions
prediction:     next-price forecast and 7-day projection
"""

from app.services.base import BaseService, ServiceError

__all__ = ["BaseService", "ServiceError"]
