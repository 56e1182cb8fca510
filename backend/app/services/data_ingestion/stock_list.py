"""
Stock List

Static symbol -> company name directory used for display names
and the popular-symbols shortcut list.
"""

POPULAR_STOCKS = [
    {"symbol": "AAPL", "name": "Apple Inc."},
    {"symbol": "GOOGL", "name": "Alphabet Inc."},
    {"symbol": "MSFT", "name": "Microsoft Corp."},
    {"symbol": "TSLA", "name": "Tesla Inc."},
    {"symbol": "AMZN", "name": "Amazon.com Inc."},
    {"symbol": "NVDA", "name": "NVIDIA Corp."},
]

OTHER_STOCKS = [
    {"symbol": "META", "name": "Meta Platforms Inc."},
    {"symbol": "NFLX", "name": "Netflix Inc."},
    {"symbol": "AMD", "name": "Advanced Micro Devices Inc."},
    {"symbol": "INTC", "name": "Intel Corp."},
    {"symbol": "IBM", "name": "International Business Machines Corp."},
    {"symbol": "JPM", "name": "JPMorgan Chase & Co."},
    {"symbol": "V", "name": "Visa Inc."},
    {"symbol": "DIS", "name": "The Walt Disney Co."},
]

COMPANY_NAMES = {s["symbol"]: s["name"] for s in POPULAR_STOCKS + OTHER_STOCKS}


def get_company_name(symbol: str) -> str:
    """Display name for a symbol, defaulting to "<SYMBOL> Inc."."""
    symbol = symbol.upper().strip()
    return COMPANY_NAMES.get(symbol, f"{symbol} Inc.")


def get_popular_stocks(count: int = 6) -> list[dict]:
    """Get most popular stocks for default display."""
    return POPULAR_STOCKS[:count]
