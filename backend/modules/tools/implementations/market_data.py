"""
Market data tool implementations - Financial Modeling Prep

Each *_impl fetches from FMP and returns the raw payload together with the
request context the shaper needs (symbol, limit, category). Upstream errors
are returned unchanged as ToolError; nothing here raises.
"""
from typing import Optional
from urllib.parse import quote

from modules.agent.context import AgentContext
from modules.tools.responses import ToolResponse, ToolSuccess

MAX_INSIDER_LIMIT = 20
MAX_SEC_LIMIT = 10
MOVER_CATEGORIES = ("actives", "gainers", "losers")


def clamp(value: Optional[int], default: int, upper: int) -> int:
    """Coerce a model-supplied limit into [1, upper]"""
    try:
        value = int(value) if value is not None else default
    except (TypeError, ValueError):
        value = default
    return max(1, min(value, upper))


def _symbol(symbol: str) -> str:
    return quote(symbol.strip().upper(), safe="")


def _with_context(result: ToolResponse, key: str, **context) -> ToolResponse:
    """Wrap a successful payload as {**context, key: payload}"""
    if not result.success:
        return result
    return ToolSuccess(data={**context, key: result.data})


async def get_fmp_data_impl(context: AgentContext, endpoint: str) -> ToolResponse:
    """Generic passthrough for any FMP endpoint"""
    return await context.fmp.get(endpoint)


async def get_latest_quote_impl(context: AgentContext, symbol: str) -> ToolResponse:
    return await context.fmp.get(f"/v3/quote-short/{_symbol(symbol)}")


async def get_fmp_news_impl(context: AgentContext, symbol: str, limit: int = 10) -> ToolResponse:
    sym = _symbol(symbol)
    limit = clamp(limit, 10, 50)
    result = await context.fmp.get(f"/v3/stock_news?tickers={sym}&limit={limit}")
    return _with_context(result, "articles", symbol=sym)


async def get_analyst_ratings_impl(context: AgentContext, symbol: str) -> ToolResponse:
    sym = _symbol(symbol)
    result = await context.fmp.get(f"/v3/analyst-stock-recommendations/{sym}")
    return _with_context(result, "ratings", symbol=sym)


async def get_stock_peers_impl(context: AgentContext, symbol: str) -> ToolResponse:
    sym = _symbol(symbol)
    result = await context.fmp.get(f"/v4/stock_peers?symbol={sym}")
    return _with_context(result, "payload", symbol=sym)


async def get_historical_dividends_impl(context: AgentContext, symbol: str) -> ToolResponse:
    sym = _symbol(symbol)
    result = await context.fmp.get(f"/v3/historical-price-full/stock_dividend/{sym}")
    if not result.success:
        return result
    payload = result.data if isinstance(result.data, dict) else {}
    return ToolSuccess(data={"symbol": sym, "historical": payload.get("historical") or []})


async def get_insider_transactions_impl(
    context: AgentContext,
    symbol: str,
    limit: Optional[int] = 10
) -> ToolResponse:
    sym = _symbol(symbol)
    limit = clamp(limit, 10, MAX_INSIDER_LIMIT)
    result = await context.fmp.get(f"/v4/insider-trading?symbol={sym}&page=0&limit={limit}")
    return _with_context(result, "transactions", symbol=sym, limit=limit)


async def get_sec_filings_impl(
    context: AgentContext,
    symbol: str,
    limit: Optional[int] = 5
) -> ToolResponse:
    sym = _symbol(symbol)
    limit = clamp(limit, 5, MAX_SEC_LIMIT)
    result = await context.fmp.get(f"/v3/sec_filings/{sym}?limit={limit}")
    return _with_context(result, "filings", symbol=sym, limit=limit)


async def get_market_movers_impl(context: AgentContext, category: Optional[str] = "actives") -> ToolResponse:
    category = (category or "actives").lower()
    if category not in MOVER_CATEGORIES:
        category = "actives"
    result = await context.fmp.get(f"/v3/stock_market/{category}")
    return _with_context(result, "movers", category=category)
