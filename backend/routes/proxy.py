"""
Data proxy routes - pass FMP and options data through to the web client
without exposing API keys
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from modules.ai_service import AIService, get_ai_service
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/proxy", tags=["proxy"])


@router.get("/fmp")
async def proxy_fmp(
    endpoint: Optional[str] = Query(None, description="FMP path including version, e.g. /v3/quote/AAPL"),
    service: AIService = Depends(get_ai_service)
):
    """Fetch an FMP endpoint and return its JSON unchanged"""
    if not endpoint:
        return JSONResponse(status_code=400, content={"error": "Bad Request: Missing endpoint."})

    result = await service.fetch_fmp(endpoint)
    if result.success:
        return JSONResponse(content=result.data)

    status = result.status or 500
    if result.error.startswith("FMP API Error"):
        details = result.details if result.details is not None else {"message": result.error}
        content = {"error": "FMP API Error", "status": status, "details": details}
    else:
        content = {"error": result.error}
    return JSONResponse(status_code=status, content=content)


@router.get("/options")
async def proxy_options(
    symbol: Optional[str] = Query(None, description="Underlying ticker symbol"),
    date: Optional[str] = Query(None, description="Expiration date YYYY-MM-DD"),
    service: AIService = Depends(get_ai_service)
):
    """
    Fetch one options grouping for a symbol

    A symbol the provider has nothing for is not an error for the web
    client: it gets a minimally valid empty set with 200.
    """
    if not symbol:
        return JSONResponse(status_code=400, content={"error": "Bad Request: Missing symbol."})

    result = await service.fetch_options(symbol, date)
    if result.success:
        return JSONResponse(content=result.data)

    logger.warning(f"Returning empty options set for {symbol.upper()}: {result.error}")
    return JSONResponse(content={
        "underlyingSymbol": symbol.upper(),
        "options": [],
        "expirationDates": [],
        "quote": {}
    })
