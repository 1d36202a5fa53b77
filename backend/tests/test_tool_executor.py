"""
Tool runner, batch executor and market data executor tests
"""
import asyncio
import json

import pytest

from modules.agent.context import AgentContext
from modules.tools import (
    tool,
    ToolRegistry,
    ToolRunner,
    ToolExecutor,
    ToolCallRequest,
    ToolSuccess,
    ToolError,
)
from modules.tools.implementations import market_data
import modules.tools.definitions  # noqa: F401 - registers the catalog


@pytest.fixture
def local_registry():
    """Registry with a few test tools, isolated from the global catalog"""
    registry = ToolRegistry()
    ready = asyncio.Event()

    @tool(description="Echo the symbol", registry=registry)
    async def echo(*, context: AgentContext, symbol: str):
        return ToolSuccess(data={"symbol": symbol})

    @tool(description="Always raises", registry=registry)
    async def explode(*, context: AgentContext):
        raise RuntimeError("kaboom")

    @tool(description="Upstream error", registry=registry)
    async def upstream_error(*, context: AgentContext):
        return ToolError(error="FMP API Error: 503 down", status=503)

    @tool(description="Waits for set_ready", registry=registry)
    async def wait_ready(*, context: AgentContext):
        await asyncio.wait_for(ready.wait(), timeout=1.0)
        return ToolSuccess(data="waited")

    @tool(description="Releases wait_ready", registry=registry)
    async def set_ready(*, context: AgentContext):
        ready.set()
        return ToolSuccess(data="set")

    return registry


@pytest.fixture
def executor(local_registry):
    return ToolExecutor(runner=ToolRunner(registry=local_registry))


class TestToolRunner:

    @pytest.mark.asyncio
    async def test_unknown_tool(self, local_registry, context):
        result = await ToolRunner(registry=local_registry).execute("nope", {}, context)
        assert result.error == "Tool nope not found."

    @pytest.mark.asyncio
    async def test_missing_required_parameters(self, local_registry, context):
        result = await ToolRunner(registry=local_registry).execute("echo", {}, context)
        assert result.error == "Missing required parameters: symbol"
        assert result.status == 400

    @pytest.mark.asyncio
    async def test_exception_absorbed(self, local_registry, context):
        result = await ToolRunner(registry=local_registry).execute("explode", {}, context)
        assert not result.success
        assert result.status == 500
        assert "kaboom" in result.error

    @pytest.mark.asyncio
    async def test_unknown_arguments_ignored(self, local_registry, context):
        result = await ToolRunner(registry=local_registry).execute(
            "echo", {"symbol": "AAPL", "extra": 1}, context
        )
        assert result.data == {"symbol": "AAPL"}


class TestToolExecutor:

    @pytest.mark.asyncio
    async def test_order_preserved_and_failures_isolated(self, executor, context):
        calls = [
            ToolCallRequest(id="c1", name="explode", arguments={}),
            ToolCallRequest(id="c2", name="echo", arguments={"symbol": "AAPL"}),
            ToolCallRequest(id="c3", name="nope", arguments={}),
            ToolCallRequest(id="c4", name="upstream_error", arguments={}),
        ]

        batch = await executor.execute_batch(calls, context)

        assert [r.tool_call_id for r in batch.results] == ["c1", "c2", "c3", "c4"]
        assert [m["tool_call_id"] for m in batch.tool_messages] == ["c1", "c2", "c3", "c4"]
        assert batch.results[1].shaped_result == {"data": {"symbol": "AAPL"}}
        assert batch.results[2].shaped_result == {"error": "Tool nope not found."}
        assert batch.results[3].shaped_result == {"error": "FMP API Error: 503 down", "status": 503}
        assert [r.tool_call_id for r in batch.get_failed_tools()] == ["c1", "c3", "c4"]
        assert not batch.all_succeeded()

    @pytest.mark.asyncio
    async def test_tool_messages_openai_format(self, executor, context):
        batch = await executor.execute_batch(
            [ToolCallRequest(id="c1", name="echo", arguments={"symbol": "MSFT"})], context
        )

        message = batch.tool_messages[0]
        assert message["role"] == "tool"
        assert message["name"] == "echo"
        assert json.loads(message["content"]) == {"data": {"symbol": "MSFT"}}

    @pytest.mark.asyncio
    async def test_calls_run_concurrently(self, executor, context):
        # wait_ready only finishes if set_ready runs while it is waiting
        calls = [
            ToolCallRequest(id="a", name="wait_ready", arguments={}),
            ToolCallRequest(id="b", name="set_ready", arguments={}),
        ]

        batch = await executor.execute_batch(calls, context)

        assert batch.all_succeeded()
        assert batch.get_result_by_id("a").shaped_result == {"data": "waited"}

    @pytest.mark.asyncio
    async def test_cancelling_batch_cancels_pending_calls(self, context):
        registry = ToolRegistry()
        started = []
        cancelled = []

        @tool(description="Sleeps until cancelled", registry=registry)
        async def slow(*, context: AgentContext, label: str):
            started.append(label)
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.append(label)
                raise
            return ToolSuccess(data=label)

        executor = ToolExecutor(runner=ToolRunner(registry=registry))
        task = asyncio.create_task(executor.execute_batch([
            ToolCallRequest(id="a", name="slow", arguments={"label": "a"}),
            ToolCallRequest(id="b", name="slow", arguments={"label": "b"}),
        ], context))

        for _ in range(100):
            if len(started) == 2:
                break
            await asyncio.sleep(0)
        assert started == ["a", "b"]

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert sorted(cancelled) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_empty_news_through_catalog(self, context, fake_fmp):
        fake_fmp.get.return_value = ToolSuccess(data=[])

        batch = await ToolExecutor().execute_batch(
            [ToolCallRequest(id="n1", name="get_fmp_news", arguments={"symbol": "aapl"})], context
        )

        assert batch.results[0].shaped_result == {
            "status": "No news found",
            "symbol": "AAPL",
            "message": "No recent news articles were found for AAPL."
        }


class TestMarketDataEndpoints:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("impl,kwargs,endpoint", [
        (market_data.get_latest_quote_impl, {"symbol": "aapl"}, "/v3/quote-short/AAPL"),
        (market_data.get_fmp_news_impl, {"symbol": "TSLA", "limit": 3}, "/v3/stock_news?tickers=TSLA&limit=3"),
        (market_data.get_analyst_ratings_impl, {"symbol": "nvda"}, "/v3/analyst-stock-recommendations/NVDA"),
        (market_data.get_stock_peers_impl, {"symbol": "AAPL"}, "/v4/stock_peers?symbol=AAPL"),
        (market_data.get_historical_dividends_impl, {"symbol": "KO"},
         "/v3/historical-price-full/stock_dividend/KO"),
        (market_data.get_insider_transactions_impl, {"symbol": "AAPL", "limit": 50},
         "/v4/insider-trading?symbol=AAPL&page=0&limit=20"),
        (market_data.get_sec_filings_impl, {"symbol": "AAPL", "limit": 0}, "/v3/sec_filings/AAPL?limit=1"),
        (market_data.get_sec_filings_impl, {"symbol": "AAPL", "limit": 25}, "/v3/sec_filings/AAPL?limit=10"),
        (market_data.get_market_movers_impl, {"category": "gainers"}, "/v3/stock_market/gainers"),
        (market_data.get_market_movers_impl, {"category": "sideways"}, "/v3/stock_market/actives"),
        (market_data.get_fmp_data_impl, {"endpoint": "/v3/profile/AAPL"}, "/v3/profile/AAPL"),
    ])
    async def test_endpoint(self, context, fake_fmp, impl, kwargs, endpoint):
        await impl(context, **kwargs)
        fake_fmp.get.assert_awaited_once_with(endpoint)

    @pytest.mark.asyncio
    async def test_upstream_error_passes_through(self, context, fake_fmp):
        error = ToolError(error="FMP API Error: 401 Invalid API KEY.", status=401)
        fake_fmp.get.return_value = error

        result = await market_data.get_sec_filings_impl(context, "AAPL", 5)

        assert result == error

    @pytest.mark.asyncio
    async def test_context_wrapped_with_payload(self, context, fake_fmp):
        fake_fmp.get.return_value = ToolSuccess(data=[{"type": "10-K"}])

        result = await market_data.get_sec_filings_impl(context, "aapl", 3)

        assert result.data == {"symbol": "AAPL", "limit": 3, "filings": [{"type": "10-K"}]}
