"""
Options-chain client backed by Yahoo Finance (yfinance)

MAIN METHODS:
    fetch(symbol, date=None, ticker=None) - one expiration grouping for a symbol
    ticker(symbol) - provider handle shared by the fetches of one aggregation

Response shape (provider grouping):
    {
        "underlyingSymbol": "AAPL",
        "expirationDates": ["2025-01-17", "2025-01-24", ...],
        "quote": {...underlying quote fields...},
        "options": [{"expirationDate": "2025-01-17", "calls": [...], "puts": [...]}]
    }

yfinance is synchronous, so every provider call runs in a worker thread.
"""
import asyncio
import json
import time
from typing import Any, Callable, Dict, List, Optional

import pandas as pd
import yfinance as yf

from modules.tools.responses import ToolResponse, ToolSuccess, ToolError
from utils.logger import get_logger

logger = get_logger(__name__)


class OptionsNotFound(LookupError):
    """The provider has no chain for the requested symbol/expiration"""


def _frame_to_records(df: Optional[pd.DataFrame]) -> List[Dict[str, Any]]:
    """DataFrame -> list of JSON-safe dicts (NaN -> None, timestamps -> ISO)"""
    if df is None or df.empty:
        return []
    return json.loads(df.to_json(orient="records", date_format="iso"))


class OptionsChainClient:
    """
    Fetches option chains one expiration at a time.

    Args:
        ticker_factory: Callable symbol -> object exposing `.options` and
            `.option_chain(date)` (defaults to yfinance.Ticker)
    """

    def __init__(self, ticker_factory: Optional[Callable[[str], Any]] = None):
        self.ticker_factory = ticker_factory or yf.Ticker

    def ticker(self, symbol: str) -> Any:
        """
        Provider handle for one symbol.

        yfinance caches the expiration list on the Ticker, so fetches that
        share a handle look the list up once.
        """
        return self.ticker_factory(symbol.upper())

    def _fetch_sync(self, symbol: str, date: Optional[str], ticker: Any = None) -> Dict[str, Any]:
        ticker = ticker if ticker is not None else self.ticker(symbol)
        expirations = list(ticker.options or [])
        if not expirations:
            raise OptionsNotFound(symbol)

        target = date or expirations[0]
        if target not in expirations:
            raise OptionsNotFound(f"{symbol} {target}")

        chain = ticker.option_chain(target)
        quote = getattr(chain, "underlying", None) or {}

        return {
            "underlyingSymbol": symbol,
            "expirationDates": expirations,
            "quote": dict(quote),
            "options": [{
                "expirationDate": target,
                "calls": _frame_to_records(chain.calls),
                "puts": _frame_to_records(chain.puts),
            }],
        }

    async def fetch(self, symbol: str, date: Optional[str] = None, ticker: Any = None) -> ToolResponse:
        """
        Fetch the chain for one expiration.

        Args:
            symbol: Underlying ticker symbol
            date: Expiration date (YYYY-MM-DD); nearest expiration when omitted
            ticker: Handle from ticker(symbol) to reuse across fetches; a new
                one is built when omitted

        Returns:
            ToolSuccess with the grouping shape, or ToolError (404 when the
            provider simply has no data)
        """
        symbol = symbol.upper()
        start = time.time()
        try:
            data = await asyncio.to_thread(self._fetch_sync, symbol, date, ticker)
        except OptionsNotFound:
            logger.info(f"No options found for {symbol} (date={date})")
            return ToolError(error=f"No options found for {symbol}", status=404)
        except Exception as e:
            logger.error(f"Options provider failed for {symbol} (date={date}): {e}")
            return ToolError(error=f"Failed to fetch options for {symbol}", status=502)

        duration_ms = (time.time() - start) * 1000
        logger.info(f"Options chain {symbol} {data['options'][0]['expirationDate']} ({duration_ms:.0f}ms)")
        return ToolSuccess(data=data)
