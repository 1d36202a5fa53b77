"""
Options chain aggregation

With a date: one expiration's calls and puts.
Without a date: every listed expiration is fetched concurrently, flattened
in expiration order, and capped at MAX_AGGREGATED_CONTRACTS.
"""
import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from config import Config
from modules.agent.context import AgentContext
from modules.tools.responses import ToolResponse, ToolSuccess
from utils.logger import get_logger

logger = get_logger(__name__)

MAX_AGGREGATED_CONTRACTS = 50
MILLISECOND_EPOCH_DIGITS = 10


def normalize_expiration(marker: Any) -> Optional[str]:
    """
    Turn one provider expiration marker into YYYY-MM-DD.

    Numeric markers are epochs: seconds, or milliseconds when they have
    more than 10 digits. Anything else is parsed as a date string.
    Returns None for markers that cannot be parsed.
    """
    if marker is None or isinstance(marker, bool):
        return None

    if isinstance(marker, (int, float)) or (isinstance(marker, str) and marker.strip().isdigit()):
        try:
            seconds = int(float(marker))
            if len(str(abs(seconds))) > MILLISECOND_EPOCH_DIGITS:
                seconds = seconds / 1000
            return datetime.fromtimestamp(seconds, tz=timezone.utc).strftime("%Y-%m-%d")
        except (OverflowError, OSError, ValueError):
            return None

    text = str(marker).strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).strftime("%Y-%m-%d")
    except ValueError:
        pass
    try:
        return datetime.strptime(text[:10], "%Y-%m-%d").strftime("%Y-%m-%d")
    except ValueError:
        return None


def normalize_expirations(markers: Iterable[Any]) -> List[str]:
    """Normalize, drop unparseable markers, deduplicate preserving order"""
    seen = []
    for marker in markers or []:
        date = normalize_expiration(marker)
        if date and date not in seen:
            seen.append(date)
    return seen


def classify_contract(contract_symbol: str) -> str:
    """
    Call/put by the presence of a literal 'C' in the contract symbol.

    Known limitation: a ticker containing 'C' (e.g. CSCO puts) classifies
    as a call. Kept for compatibility until the provider's own contract
    type field is confirmed for every source.
    """
    return "call" if "C" in (contract_symbol or "") else "put"


def reduce_contract(contract: Dict[str, Any], expiration_date: str) -> Dict[str, Any]:
    symbol = contract.get("contractSymbol") or contract.get("symbol") or ""
    return {
        "symbol": symbol,
        "expirationDate": expiration_date,
        "strike": contract.get("strike"),
        "type": classify_contract(symbol),
        "openInterest": contract.get("openInterest"),
        "volume": contract.get("volume"),
        "lastPrice": contract.get("lastPrice"),
    }


def _contracts_of(payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Flatten calls then puts of every grouping in a provider payload"""
    contracts = []
    for group in payload.get("options") or []:
        expiration = normalize_expiration(group.get("expirationDate")) or str(group.get("expirationDate"))
        for contract in list(group.get("calls") or []) + list(group.get("puts") or []):
            contracts.append(reduce_contract(contract, expiration))
    return contracts


def _underlying_price(payload: Dict[str, Any]) -> Optional[float]:
    quote = payload.get("quote") or {}
    return quote.get("regularMarketPrice")


async def get_options_chain_impl(
    context: AgentContext,
    symbol: str,
    date: Optional[str] = None
) -> ToolResponse:
    """
    Aggregate an options chain for a symbol.

    Returns:
        {underlyingSymbol, underlyingPrice, allContracts, totalContractsReturned, datesFetched}
    """
    symbol = symbol.strip().upper()
    client = context.options
    ticker = client.ticker(symbol)

    initial = await client.fetch(symbol, ticker=ticker)
    if not initial.success:
        return initial

    expirations = normalize_expirations(initial.data.get("expirationDates"))
    underlying_price = _underlying_price(initial.data)

    if date:
        target = normalize_expiration(date) or date
        result = await client.fetch(symbol, target, ticker=ticker)
        if not result.success:
            return result
        contracts = _contracts_of(result.data)
        dates_fetched = [target]
    else:
        semaphore = asyncio.Semaphore(max(1, Config.OPTIONS_MAX_CONCURRENT_DATES))

        async def fetch_date(expiration: str) -> ToolResponse:
            async with semaphore:
                return await client.fetch(symbol, expiration, ticker=ticker)

        results = await asyncio.gather(*[fetch_date(exp) for exp in expirations])

        contracts = []
        dates_fetched = []
        for expiration, result in zip(expirations, results):
            if not result.success:
                logger.warning(f"Skipping {symbol} expiration {expiration}: {result.error}")
                continue
            dates_fetched.append(expiration)
            contracts.extend(_contracts_of(result.data))

        contracts = contracts[:MAX_AGGREGATED_CONTRACTS]

    logger.info(f"Aggregated {len(contracts)} contracts for {symbol} across {len(dates_fetched)} date(s)")
    return ToolSuccess(data={
        "underlyingSymbol": symbol,
        "underlyingPrice": underlying_price,
        "allContracts": contracts,
        "totalContractsReturned": len(contracts),
        "datesFetched": dates_fetched,
    })
