"""
Live check of the upstream data sources.
Hits the real APIs; not part of the test suite.
Run with: python check_data_sources.py [SYMBOL ...]
"""

import asyncio
import os
import sys

# Set working directory to backend folder
backend_dir = os.path.dirname(os.path.abspath(__file__))
os.chdir(backend_dir)
sys.path.insert(0, backend_dir)

# Load environment variables from .env
from dotenv import load_dotenv
load_dotenv(os.path.join(backend_dir, ".env"))


async def check_data_sources(symbols):
    """Query each provider directly, then run a full analysis."""
    print("\n" + "=" * 60)
    print("STOCKCAST - DATA SOURCE CHECK")
    print("=" * 60)

    from app.core.config import get_settings
    from app.core.logging_config import configure_logging
    from app.services.base import ProviderError
    from app.services.data_ingestion import MarketDataService
    from app.services.data_ingestion.service import (
        build_history_providers,
        build_quote_providers,
    )

    settings = get_settings()
    configure_logging(settings.log_level)

    # Check 1: each upstream provider on its own
    print("\n[1] Upstream Providers...")
    print("-" * 40)

    providers = [("quote", p) for p in build_quote_providers(settings)]
    providers += [("history", p) for p in build_history_providers(settings)]

    for kind, provider in providers:
        for symbol in symbols:
            try:
                result = await asyncio.wait_for(provider.fetch(symbol), timeout=15)
            except ProviderError as e:
                print(f"{provider.name} ({kind}) {symbol}: FAILED [{e.reason}] {e.message}")
                continue
            except asyncio.TimeoutError:
                print(f"{provider.name} ({kind}) {symbol}: FAILED [timeout]")
                continue

            if kind == "quote":
                print(
                    f"{provider.name} ({kind}) {symbol}: OK "
                    f"${result.price:.2f} ({result.change_percent:+.2f}%) {result.name}"
                )
            else:
                print(
                    f"{provider.name} ({kind}) {symbol}: OK {len(result)} points, "
                    f"{result[0].time} .. {result[-1].time}"
                )
        await provider.close()

    # Check 2: full analysis through the fallback chains
    print("\n\n[2] Analysis Through Fallback Chains...")
    print("-" * 40)

    service = MarketDataService(settings)
    try:
        for symbol in symbols:
            analysis = await service.analyze(symbol)
            print(f"\n{symbol}:")
            print(f"  Price: ${analysis.quote.price:.2f} (source: {analysis.quote_source})")
            print(f"  History: {len(analysis.history)} points (source: {analysis.history_source})")
            print(
                f"  Forecast: ${analysis.prediction.next_price:.2f} "
                f"({analysis.prediction_change:+.2f}), {analysis.prediction.trend.value}, "
                f"confidence {analysis.prediction.confidence:.0%}"
            )
            if analysis.is_synthetic:
                print("  WARNING: includes synthetic data")
    finally:
        await service.close()

    print("\n" + "=" * 60)


if __name__ == "__main__":
    asyncio.run(check_data_sources(sys.argv[1:] or ["AAPL", "MSFT", "IBM"]))
