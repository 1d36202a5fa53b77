"""
Financial Modeling Prep API - single-attempt client

MAIN METHOD:
    get(endpoint) - fetch any FMP endpoint path

USAGE EXAMPLES:
    client = FMPClient()
    await client.get("/v3/quote/AAPL")
    await client.get("/v3/stock_news?tickers=AAPL&limit=5")
    await client.get("/v3/stock_market/gainers")

Every call issues exactly one HTTP request. Failures come back as
ToolError(error, status); nothing here raises for upstream problems.
"""
import json
import time
import httpx
from typing import Any, Optional

from config import Config
from modules.tools.responses import ToolResponse, ToolSuccess, ToolError
from utils.logger import get_logger, log_api_call

logger = get_logger(__name__)

ERROR_DETAIL_CHARS = 200


def redact_api_key(url: str, api_key: Optional[str]) -> str:
    """Replace the API key in a URL before it is logged"""
    if not api_key:
        return url
    return url.replace(api_key, "REDACTED")


def build_url(base_url: str, endpoint: str, api_key: str) -> str:
    """Join base URL and endpoint path, appending the apikey query parameter"""
    path = endpoint if endpoint.startswith("/") else f"/{endpoint}"
    delimiter = "&" if "?" in path else "?"
    return f"{base_url.rstrip('/')}{path}{delimiter}apikey={api_key}"


def _error_body(response_text: str, status: int) -> Any:
    """Parsed FMP error body, or {"message": <first 200 chars>} when it is not JSON"""
    try:
        return json.loads(response_text)
    except (json.JSONDecodeError, ValueError):
        return {"message": response_text[:ERROR_DETAIL_CHARS] or f"Request failed with status {status}"}


def _error_detail(body: Any, response_text: str, status: int) -> str:
    """Pull a human-readable message out of an FMP error body"""
    if isinstance(body, dict):
        for key in ("Error Message", "message", "error"):
            if body.get(key):
                return str(body[key])

    return response_text[:ERROR_DETAIL_CHARS] or f"Request failed with status {status}"


class FMPClient:
    """
    Thin FMP client. One GET per call, no retries.

    The httpx client can be injected (tests pass one built on
    httpx.MockTransport); otherwise it is created on first use.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None
    ):
        self.api_key = api_key if api_key is not None else Config.FMP_API_KEY
        self.base_url = base_url or Config.FMP_BASE_URL
        self.timeout = timeout or Config.HTTP_TIMEOUT_SECONDS
        self._client = http_client

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load HTTP client to avoid event loop issues"""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def get(self, endpoint: str) -> ToolResponse:
        """
        Fetch an FMP endpoint.

        Args:
            endpoint: Path below the API root including version, e.g. "/v3/quote/AAPL"

        Returns:
            ToolSuccess with the decoded JSON, or ToolError with a status code
        """
        if not self.api_key:
            logger.error("FMP_API_KEY is not configured")
            return ToolError(error="FMP API Key is missing.", status=500)

        url = build_url(self.base_url, endpoint, self.api_key)
        safe_url = redact_api_key(url, self.api_key)
        logger.debug(f"FMP fetching URL: {safe_url}")

        start = time.time()
        try:
            response = await self.client.get(url)
        except httpx.HTTPError as e:
            logger.error(f"FMP network error for {safe_url}: {redact_api_key(str(e), self.api_key)}")
            return ToolError(error="Proxy failed to connect to FMP.", status=500)

        duration_ms = (time.time() - start) * 1000
        log_api_call(logger, "GET", safe_url, response.status_code, duration_ms)

        response_text = response.text
        if not response.is_success:
            body = _error_body(response_text, response.status_code)
            detail = _error_detail(body, response_text, response.status_code)
            logger.warning(f"FMP API status {response.status_code} for {safe_url}: {detail}")
            return ToolError(
                error=f"FMP API Error: {response.status_code} {detail}",
                status=response.status_code,
                details=body
            )

        try:
            data = json.loads(response_text)
        except (json.JSONDecodeError, ValueError):
            logger.error(f"FMP returned non-JSON body for {safe_url}")
            return ToolError(error="FMP returned unparsable response.", status=500)

        # FMP reports some failures (bad key, unknown endpoint) as 200 + {"Error Message": ...}
        if isinstance(data, dict) and set(data.keys()) == {"Error Message"}:
            return ToolError(error=f"FMP API Error: {data['Error Message']}", status=400, details=data)

        return ToolSuccess(data=data)

    async def aclose(self):
        """Close the HTTP client"""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
