"""
Response shaping - compress a tool result before it goes back to the model

SHAPERS maps tool name -> shaping function. Each function takes the
ToolResponse the executor produced and returns a small JSON-able dict.
Unmatched tools fall through to shape_default, which enforces a fixed
character ceiling.

All shapers are pure: the same ToolResponse always yields an equal dict.
"""
import json
from typing import Any, Callable, Dict, List, Optional

from .responses import ToolResponse
from utils.logger import get_logger

logger = get_logger(__name__)

MAX_SHAPED_CHARS = 1500
TRUNCATION_MARKER = "...[TRUNCATED]"

MAX_GENERIC_ITEMS = 10
MAX_NEWS_ITEMS = 5
MAX_PEERS = 10
MAX_DIVIDENDS = 5
MAX_MOVERS = 5
MAX_INSIDER_ROWS = 20
MAX_SEC_FILINGS = 10

Shaper = Callable[[ToolResponse], Dict[str, Any]]


def shape_error(result: ToolResponse) -> Dict[str, Any]:
    """{"error": msg} plus the status when one is known"""
    shaped: Dict[str, Any] = {"error": result.error}
    if result.status is not None:
        shaped["status"] = result.status
    return shaped


def _serialize(value: Any) -> str:
    return json.dumps(value, default=str, ensure_ascii=False)


def _apply_ceiling(value: Any) -> Dict[str, Any]:
    text = _serialize(value)
    if len(text) > MAX_SHAPED_CHARS:
        return {"truncated_data": text[:MAX_SHAPED_CHARS] + TRUNCATION_MARKER}
    return {"data": value}


def shape_default(result: ToolResponse) -> Dict[str, Any]:
    """Serialize the data and replace it with a truncated string past the ceiling"""
    if not result.success:
        return shape_error(result)
    return _apply_ceiling(result.data)


def _rows(value: Any) -> List[Dict[str, Any]]:
    """Keep only dict rows of a list payload"""
    if not isinstance(value, list):
        return []
    return [row for row in value if isinstance(row, dict)]


def _date_part(value: Optional[str]) -> Optional[str]:
    if not value:
        return value
    return str(value).replace("T", " ").split(" ")[0]


def _number(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def shape_fmp_data(result: ToolResponse) -> Dict[str, Any]:
    if not result.success:
        return shape_error(result)
    data = result.data
    if isinstance(data, list) and len(data) > MAX_GENERIC_ITEMS:
        data = data[:MAX_GENERIC_ITEMS]
    return _apply_ceiling(data)


def shape_latest_quote(result: ToolResponse) -> Dict[str, Any]:
    if not result.success:
        return shape_error(result)
    rows = _rows(result.data)
    if not rows:
        return {"error": "No quote found."}
    first = rows[0]
    return {"price": first.get("price"), "symbol": first.get("symbol")}


def shape_news(result: ToolResponse) -> Dict[str, Any]:
    if not result.success:
        return shape_error(result)
    symbol = result.data["symbol"]
    articles = [
        a for a in _rows(result.data.get("articles"))
        if a.get("title") and a.get("publishedDate")
    ]
    if not articles:
        return {
            "status": "No news found",
            "symbol": symbol,
            "message": f"No recent news articles were found for {symbol}."
        }
    return {
        "symbol": symbol,
        "news": [f"[{a['publishedDate']}] {a['title']}" for a in articles[:MAX_NEWS_ITEMS]]
    }


def shape_analyst_ratings(result: ToolResponse) -> Dict[str, Any]:
    if not result.success:
        return shape_error(result)
    symbol = result.data["symbol"]
    ratings = _rows(result.data.get("ratings"))
    if not ratings:
        return {"status": "No analyst ratings found", "symbol": symbol}

    latest = max(ratings, key=lambda r: str(r.get("date") or ""))
    return {
        "symbol": symbol,
        "date": latest.get("date"),
        "buy": int(_number(latest.get("analystRatingsStrongBuy")) + _number(latest.get("analystRatingsbuy"))),
        "hold": int(_number(latest.get("analystRatingsHold"))),
        "sell": int(_number(latest.get("analystRatingsSell")) + _number(latest.get("analystRatingsStrongSell"))),
        "totalRatings": len(ratings),
    }


def shape_stock_peers(result: ToolResponse) -> Dict[str, Any]:
    if not result.success:
        return shape_error(result)
    symbol = result.data["symbol"]
    payload = result.data.get("payload")

    # v4 returns [{"symbol": ..., "peersList": [...]}]
    rows = _rows(payload) if isinstance(payload, list) else ([payload] if isinstance(payload, dict) else [])
    peers = rows[0].get("peersList") if rows else None
    if not peers:
        return {"error": f"No peers found for {symbol}."}
    return {"symbol": symbol, "peers": list(peers[:MAX_PEERS])}


def shape_historical_dividends(result: ToolResponse) -> Dict[str, Any]:
    if not result.success:
        return shape_error(result)
    rows = sorted(
        _rows(result.data.get("historical")),
        key=lambda r: str(r.get("date") or ""),
        reverse=True
    )
    return {
        "symbol": result.data["symbol"],
        "dividends": [
            {"date": r.get("date"), "dividend": r.get("dividend")}
            for r in rows[:MAX_DIVIDENDS]
        ]
    }


def shape_insider_transactions(result: ToolResponse) -> Dict[str, Any]:
    if not result.success:
        return shape_error(result)
    limit = min(int(result.data.get("limit") or MAX_INSIDER_ROWS), MAX_INSIDER_ROWS)

    transactions = []
    for row in _rows(result.data.get("transactions"))[:limit]:
        shares = row.get("securitiesTransacted")
        price = row.get("price")
        total = None
        if shares is not None and price is not None:
            total = round(_number(shares) * _number(price), 2)
        transactions.append({
            "date": row.get("transactionDate"),
            "insider": row.get("reportingName"),
            "type": row.get("transactionType"),
            "shares": shares,
            "price": price,
            "total": total,
        })
    return {"symbol": result.data["symbol"], "transactions": transactions}


def shape_sec_filings(result: ToolResponse) -> Dict[str, Any]:
    if not result.success:
        return shape_error(result)
    limit = min(int(result.data.get("limit") or MAX_SEC_FILINGS), MAX_SEC_FILINGS)
    filings = [
        {
            "type": row.get("type"),
            "date": _date_part(row.get("fillingDate") or row.get("filingDate")),
            "link": row.get("finalLink") or row.get("link"),
        }
        for row in _rows(result.data.get("filings"))[:limit]
    ]
    return {"symbol": result.data["symbol"], "filings": filings}


def shape_market_movers(result: ToolResponse) -> Dict[str, Any]:
    if not result.success:
        return shape_error(result)
    movers = [
        {
            "symbol": row.get("symbol"),
            "name": row.get("name"),
            "change": row.get("change"),
            "price": row.get("price"),
            "percentChange": row.get("changesPercentage"),
        }
        for row in _rows(result.data.get("movers"))[:MAX_MOVERS]
    ]
    return {"category": result.data["category"], "movers": movers}


def shape_options_chain(result: ToolResponse) -> Dict[str, Any]:
    # Aggregator output is already bounded by its contract cap
    if not result.success:
        return shape_error(result)
    return dict(result.data)


SHAPERS: Dict[str, Shaper] = {
    "get_fmp_data": shape_fmp_data,
    "get_latest_quote": shape_latest_quote,
    "get_fmp_news": shape_news,
    "get_analyst_ratings": shape_analyst_ratings,
    "get_stock_peers": shape_stock_peers,
    "get_historical_dividends": shape_historical_dividends,
    "get_insider_transactions": shape_insider_transactions,
    "get_sec_filings": shape_sec_filings,
    "get_market_movers": shape_market_movers,
    "get_options_chain": shape_options_chain,
}


def shape_result(tool_name: str, result: ToolResponse) -> Dict[str, Any]:
    """
    Shape a tool result for the model.

    Args:
        tool_name: Name the model used to call the tool
        result: ToolResponse returned by the runner

    Returns:
        Compact JSON-able dict
    """
    shaper = SHAPERS.get(tool_name, shape_default)
    return shaper(result)
