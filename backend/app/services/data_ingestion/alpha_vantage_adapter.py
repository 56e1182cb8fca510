"""
Alpha Vantage Data Adapter

Primary quote source (GLOBAL_QUOTE endpoint).
The free tier signals throttling in-band with a "Note" or "Information"
key on an HTTP 200 response, so the payload is inspected before parsing.
"""

import logging

from app.core.config import Settings
from app.schemas.market import Quote
from app.services.base import MalformedResponseError, NoDataError, RateLimitError
from app.services.data_ingestion.http_provider import HttpMarketDataProvider
from app.services.data_ingestion.normalize import derive_change_percent, to_float
from app.services.data_ingestion.stock_list import get_company_name

logger = logging.getLogger(__name__)

SOURCE_NAME = "Alpha Vantage"

RATE_LIMIT_KEYS = ("Note", "Information")
ERROR_KEY = "Error Message"
QUOTE_KEY = "Global Quote"


def parse_global_quote(payload: object, symbol: str) -> Quote:
    """
    Convert a GLOBAL_QUOTE payload into a Quote.

    Raises:
        RateLimitError: throttling message in the payload
        NoDataError: error message, empty quote, or zero/missing price
        MalformedResponseError: payload is not the expected mapping
    """
    if not isinstance(payload, dict):
        raise MalformedResponseError(SOURCE_NAME, "Payload is not a JSON object")

    for key in RATE_LIMIT_KEYS:
        if key in payload:
            raise RateLimitError(SOURCE_NAME, str(payload[key])[:200])

    if ERROR_KEY in payload:
        raise NoDataError(SOURCE_NAME, str(payload[ERROR_KEY])[:200])

    quote = payload.get(QUOTE_KEY)
    if not quote:
        raise NoDataError(SOURCE_NAME, f"No quote data for {symbol}")
    if not isinstance(quote, dict):
        raise MalformedResponseError(SOURCE_NAME, f"{QUOTE_KEY} is not an object")

    price = to_float(quote.get("05. price"))
    if not price or price <= 0:
        raise NoDataError(SOURCE_NAME, f"Missing or zero price for {symbol}")

    change = to_float(quote.get("09. change")) or 0.0
    change_percent = to_float(quote.get("10. change percent"))
    if change_percent is None:
        change_percent = derive_change_percent(price, change)

    volume = to_float(quote.get("06. volume"))

    return Quote(
        symbol=str(quote.get("01. symbol") or symbol).upper(),
        name=get_company_name(symbol),
        price=price,
        change=change,
        change_percent=change_percent,
        volume=int(volume) if volume and volume > 0 else 0,
    )


class AlphaVantageQuoteProvider(HttpMarketDataProvider[Quote]):
    """Alpha Vantage GLOBAL_QUOTE client."""

    def __init__(self, settings: Settings):
        super().__init__()
        self._api_key = settings.alpha_vantage_api_key
        self._base_url = settings.alpha_vantage_base_url

    @property
    def name(self) -> str:
        return SOURCE_NAME

    async def fetch(self, symbol: str) -> Quote:
        logger.debug(f"Fetching {symbol} quote from Alpha Vantage...")
        payload = await self._get_json(
            self._base_url,
            params={
                "function": "GLOBAL_QUOTE",
                "symbol": symbol,
                "apikey": self._api_key,
            },
        )
        return parse_global_quote(payload, symbol)
