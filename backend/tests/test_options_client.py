"""
Options client tests (yfinance replaced by a fake ticker factory)
"""
from types import SimpleNamespace

import pandas as pd
import pytest

from modules.agent.context import AgentContext
from modules.tools.clients.options import OptionsChainClient
from modules.tools.implementations.options_chain import get_options_chain_impl


class FakeTicker:
    def __init__(self, symbol, expirations, raise_on_chain=None):
        self.symbol = symbol
        self.options = tuple(expirations)
        self.raise_on_chain = raise_on_chain
        self.requested = []

    def option_chain(self, date):
        self.requested.append(date)
        if self.raise_on_chain:
            raise self.raise_on_chain
        calls = pd.DataFrame([
            {"contractSymbol": f"{self.symbol}250117C00150000", "strike": 150.0, "lastPrice": 42.1,
             "volume": 12.0, "openInterest": float("nan")},
        ])
        puts = pd.DataFrame([
            {"contractSymbol": f"{self.symbol}250117P00150000", "strike": 150.0, "lastPrice": 0.5,
             "volume": 3.0, "openInterest": 40.0},
        ])
        return SimpleNamespace(calls=calls, puts=puts, underlying={"regularMarketPrice": 191.2})


def factory_for(ticker):
    return lambda symbol: ticker


class TestOptionsChainClient:

    @pytest.mark.asyncio
    async def test_nearest_expiration_by_default(self):
        ticker = FakeTicker("AAPL", ["2025-01-17", "2025-01-24"])
        client = OptionsChainClient(ticker_factory=factory_for(ticker))

        result = await client.fetch("aapl")

        assert result.success
        assert ticker.requested == ["2025-01-17"]
        data = result.data
        assert data["underlyingSymbol"] == "AAPL"
        assert data["expirationDates"] == ["2025-01-17", "2025-01-24"]
        assert data["quote"] == {"regularMarketPrice": 191.2}
        group = data["options"][0]
        assert group["expirationDate"] == "2025-01-17"
        assert group["calls"][0]["contractSymbol"] == "AAPL250117C00150000"
        assert group["calls"][0]["openInterest"] is None
        assert group["puts"][0]["openInterest"] == 40.0

    @pytest.mark.asyncio
    async def test_specific_date(self):
        ticker = FakeTicker("AAPL", ["2025-01-17", "2025-01-24"])
        client = OptionsChainClient(ticker_factory=factory_for(ticker))

        result = await client.fetch("AAPL", "2025-01-24")

        assert result.data["options"][0]["expirationDate"] == "2025-01-24"
        assert ticker.requested == ["2025-01-24"]

    @pytest.mark.asyncio
    async def test_no_expirations_is_not_found(self):
        client = OptionsChainClient(ticker_factory=factory_for(FakeTicker("ZZZZ", [])))

        result = await client.fetch("ZZZZ")

        assert result.error == "No options found for ZZZZ"
        assert result.status == 404

    @pytest.mark.asyncio
    async def test_unlisted_date_is_not_found(self):
        ticker = FakeTicker("AAPL", ["2025-01-17"])
        client = OptionsChainClient(ticker_factory=factory_for(ticker))

        result = await client.fetch("AAPL", "2030-01-01")

        assert result.status == 404
        assert ticker.requested == []

    @pytest.mark.asyncio
    async def test_provider_failure(self):
        ticker = FakeTicker("AAPL", ["2025-01-17"], raise_on_chain=RuntimeError("yahoo down"))
        client = OptionsChainClient(ticker_factory=factory_for(ticker))

        result = await client.fetch("AAPL")

        assert result.error == "Failed to fetch options for AAPL"
        assert result.status == 502


class CountingTicker:
    """Counts provider round trips; the expiration list is cached like yfinance's Ticker"""

    def __init__(self, symbol, expirations):
        self.symbol = symbol
        self._all_expirations = tuple(expirations)
        self._expirations = None
        self.requests = 0

    @property
    def options(self):
        if self._expirations is None:
            self.requests += 1
            self._expirations = self._all_expirations
        return self._expirations

    def option_chain(self, date):
        self.requests += 1
        empty = pd.DataFrame()
        return SimpleNamespace(calls=empty, puts=empty, underlying={"regularMarketPrice": 10.0})


class TestProviderRequests:

    @pytest.mark.asyncio
    async def test_aggregation_makes_one_request_per_date(self):
        built = []

        def factory(symbol):
            ticker = CountingTicker(symbol, ["2025-01-17", "2025-01-24", "2025-01-31"])
            built.append(ticker)
            return ticker

        client = OptionsChainClient(ticker_factory=factory)
        context = AgentContext(fmp=None, options=client)

        result = await get_options_chain_impl(context, "AAPL")

        assert result.data["datesFetched"] == ["2025-01-17", "2025-01-24", "2025-01-31"]
        assert len(built) == 1
        # expiration list once, nearest chain once, then one chain per date
        assert built[0].requests == 5

    @pytest.mark.asyncio
    async def test_fetch_without_ticker_builds_its_own(self):
        built = []

        def factory(symbol):
            ticker = CountingTicker(symbol, ["2025-01-17"])
            built.append(ticker)
            return ticker

        client = OptionsChainClient(ticker_factory=factory)

        await client.fetch("AAPL")
        await client.fetch("AAPL", "2025-01-17")

        assert len(built) == 2
