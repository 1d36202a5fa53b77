"""
Central tool definitions file - Registry only
All LLM-callable tools are defined here using the @tool decorator.
Implementations are in modules/tools/implementations/
"""
from typing import Literal, Optional

from modules.tools import tool
from modules.tools.responses import ToolResponse
from modules.agent.context import AgentContext

# Import tool descriptions
from modules.tools.descriptions import (
    # FMP market data
    GET_FMP_DATA_DESC, GET_LATEST_QUOTE_DESC, GET_FMP_NEWS_DESC,
    GET_ANALYST_RATINGS_DESC, GET_STOCK_PEERS_DESC, GET_HISTORICAL_DIVIDENDS_DESC,
    GET_INSIDER_TRANSACTIONS_DESC, GET_SEC_FILINGS_DESC, GET_MARKET_MOVERS_DESC,
    # Options
    GET_OPTIONS_CHAIN_DESC
)

# Import implementations
from modules.tools.implementations import market_data, options_chain


# ============================================================================
# FMP MARKET DATA TOOLS
# ============================================================================

@tool(description=GET_FMP_DATA_DESC)
async def get_fmp_data(*, context: AgentContext, endpoint: str) -> ToolResponse:
    """
    Args:
        endpoint: FMP path including version, e.g. /v3/profile/AAPL
    """
    return await market_data.get_fmp_data_impl(context, endpoint)


@tool(description=GET_LATEST_QUOTE_DESC)
async def get_latest_quote(*, context: AgentContext, symbol: str) -> ToolResponse:
    """
    Args:
        symbol: Stock ticker symbol, e.g. AAPL
    """
    return await market_data.get_latest_quote_impl(context, symbol)


@tool(description=GET_FMP_NEWS_DESC)
async def get_fmp_news(*, context: AgentContext, symbol: str, limit: int = 10) -> ToolResponse:
    """
    Args:
        symbol: Stock ticker symbol, e.g. AAPL
        limit: Number of articles to request from the provider
    """
    return await market_data.get_fmp_news_impl(context, symbol, limit)


@tool(description=GET_ANALYST_RATINGS_DESC)
async def get_analyst_ratings(*, context: AgentContext, symbol: str) -> ToolResponse:
    """
    Args:
        symbol: Stock ticker symbol, e.g. AAPL
    """
    return await market_data.get_analyst_ratings_impl(context, symbol)


@tool(description=GET_STOCK_PEERS_DESC)
async def get_stock_peers(*, context: AgentContext, symbol: str) -> ToolResponse:
    """
    Args:
        symbol: Stock ticker symbol, e.g. AAPL
    """
    return await market_data.get_stock_peers_impl(context, symbol)


@tool(description=GET_HISTORICAL_DIVIDENDS_DESC)
async def get_historical_dividends(*, context: AgentContext, symbol: str) -> ToolResponse:
    """
    Args:
        symbol: Stock ticker symbol, e.g. KO
    """
    return await market_data.get_historical_dividends_impl(context, symbol)


@tool(description=GET_INSIDER_TRANSACTIONS_DESC)
async def get_insider_transactions(
    *,
    context: AgentContext,
    symbol: str,
    limit: int = 10
) -> ToolResponse:
    """
    Args:
        symbol: Stock ticker symbol, e.g. AAPL
        limit: Number of transactions (1-20)
    """
    return await market_data.get_insider_transactions_impl(context, symbol, limit)


@tool(description=GET_SEC_FILINGS_DESC)
async def get_sec_filings(*, context: AgentContext, symbol: str, limit: int = 5) -> ToolResponse:
    """
    Args:
        symbol: Stock ticker symbol, e.g. AAPL
        limit: Number of filings (1-10)
    """
    return await market_data.get_sec_filings_impl(context, symbol, limit)


@tool(description=GET_MARKET_MOVERS_DESC)
async def get_market_movers(
    *,
    context: AgentContext,
    category: Literal["actives", "gainers", "losers"] = "actives"
) -> ToolResponse:
    """
    Args:
        category: Which list to return: actives, gainers or losers
    """
    return await market_data.get_market_movers_impl(context, category)


# ============================================================================
# OPTIONS TOOLS
# ============================================================================

@tool(description=GET_OPTIONS_CHAIN_DESC)
async def get_options_chain(
    *,
    context: AgentContext,
    symbol: str,
    date: Optional[str] = None
) -> ToolResponse:
    """
    Args:
        symbol: Underlying stock ticker symbol, e.g. AAPL
        date: Expiration date YYYY-MM-DD; omit to merge all expirations
    """
    return await options_chain.get_options_chain_impl(context, symbol, date)
