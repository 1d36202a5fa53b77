"""
Tool descriptions for all LLM-callable tools
Separated for better maintainability and readability
"""

# ============================================================================
# FMP MARKET DATA TOOLS
# ============================================================================

GET_FMP_DATA_DESC = """Fetch raw data from any Financial Modeling Prep endpoint.

Use this only when no dedicated tool covers the request. The endpoint is the
path below the API root including the version, for example:
- /v3/profile/AAPL (company profile)
- /v3/income-statement/MSFT?period=annual&limit=3
- /v3/historical-price-full/TSLA?timeseries=30

Lists are cut to their first 10 entries."""

GET_LATEST_QUOTE_DESC = """Get the latest trading price for a single stock symbol.

Returns {price, symbol}."""

GET_FMP_NEWS_DESC = """Get recent news headlines for a stock symbol.

Returns up to 5 headlines formatted as "[date] title". If nothing is found the
result says so explicitly; tell the user no recent news was found."""

GET_ANALYST_RATINGS_DESC = """Get the most recent Wall Street analyst recommendation counts for a stock.

Returns aggregated buy/hold/sell counts from the latest report."""

GET_STOCK_PEERS_DESC = """Get competitor/peer companies for a stock (same sector, exchange and market cap range).

Returns up to 10 peer symbols."""

GET_HISTORICAL_DIVIDENDS_DESC = """Get the dividend payment history for a stock.

Returns the 5 most recent {date, dividend} payments."""

GET_INSIDER_TRANSACTIONS_DESC = """Get recent insider trading activity (executives, directors, 10% owners) for a stock.

Each row has date, insider name, transaction type, shares, price and total value. Max 20 rows."""

GET_SEC_FILINGS_DESC = """Get recent SEC filings (10-K, 10-Q, 8-K, ...) for a stock with links to the documents.

Max 10 filings."""

GET_MARKET_MOVERS_DESC = """Get today's top market movers: most active, biggest gainers or biggest losers.

Returns the top 5 with symbol, name, change, price and percent change."""


# ============================================================================
# OPTIONS
# ============================================================================

GET_OPTIONS_CHAIN_DESC = """Get the options chain for a stock symbol.

With a date (YYYY-MM-DD) returns every contract for that expiration.
Without a date, contracts across all upcoming expirations are merged and
the first 50 are returned. Each contract has symbol, expirationDate, strike,
type (call/put), openInterest, volume and lastPrice."""
