"""
FMP client tests

Run with:
    pytest tests/test_fmp_client.py -v
    pytest tests/test_fmp_client.py -v -m real_api      # Real API tests only
"""
import logging

import httpx
import pytest

from config import Config
from modules.tools.clients.fmp import FMPClient, redact_api_key, build_url

API_KEY = "secret-key-123"
BASE_URL = "https://fmp.test/api"


def make_client(handler, api_key=API_KEY) -> FMPClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return FMPClient(api_key=api_key, base_url=BASE_URL, http_client=http_client)


class TestUrlHelpers:

    def test_build_url_without_query(self):
        assert build_url(BASE_URL, "/v3/quote/AAPL", "k") == "https://fmp.test/api/v3/quote/AAPL?apikey=k"

    def test_build_url_with_query(self):
        url = build_url(BASE_URL, "/v3/stock_news?tickers=AAPL&limit=5", "k")
        assert url == "https://fmp.test/api/v3/stock_news?tickers=AAPL&limit=5&apikey=k"

    def test_build_url_adds_leading_slash(self):
        assert build_url(BASE_URL + "/", "v3/quote/AAPL", "k") == "https://fmp.test/api/v3/quote/AAPL?apikey=k"

    def test_redact_api_key(self):
        url = f"{BASE_URL}/v3/quote/AAPL?apikey={API_KEY}"
        assert redact_api_key(url, API_KEY) == f"{BASE_URL}/v3/quote/AAPL?apikey=REDACTED"

    def test_redact_without_key_is_noop(self):
        assert redact_api_key("https://x/y", None) == "https://x/y"


class TestFMPClient:

    @pytest.mark.asyncio
    async def test_success_returns_json(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[{"symbol": "AAPL", "price": 190.5}])

        client = make_client(handler)
        result = await client.get("/v3/quote-short/AAPL")

        assert result.success
        assert result.data == [{"symbol": "AAPL", "price": 190.5}]
        assert len(seen) == 1
        assert seen[0].url.params["apikey"] == API_KEY
        assert seen[0].url.path == "/api/v3/quote-short/AAPL"

    @pytest.mark.asyncio
    async def test_non_2xx_with_json_message(self):
        def handler(request):
            return httpx.Response(429, json={"message": "Limit Reach"})

        result = await make_client(handler).get("/v3/quote/AAPL")

        assert not result.success
        assert result.status == 429
        assert result.error == "FMP API Error: 429 Limit Reach"
        assert result.details == {"message": "Limit Reach"}

    @pytest.mark.asyncio
    async def test_non_2xx_with_text_body_is_truncated(self):
        body = "x" * 500

        def handler(request):
            return httpx.Response(503, text=body)

        result = await make_client(handler).get("/v3/quote/AAPL")

        assert result.status == 503
        assert result.error == f"FMP API Error: 503 {'x' * 200}"
        assert result.details == {"message": "x" * 200}

    @pytest.mark.asyncio
    async def test_single_attempt_no_retry(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500, text="boom")

        await make_client(handler).get("/v3/quote/AAPL")
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_unparsable_2xx(self):
        def handler(request):
            return httpx.Response(200, text="<html>not json</html>")

        result = await make_client(handler).get("/v3/quote/AAPL")

        assert result.error == "FMP returned unparsable response."
        assert result.status == 500

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        result = await make_client(handler).get("/v3/quote/AAPL")

        assert result.error == "Proxy failed to connect to FMP."
        assert result.status == 500

    @pytest.mark.asyncio
    async def test_soft_error_message(self):
        def handler(request):
            return httpx.Response(200, json={"Error Message": "Invalid API KEY."})

        result = await make_client(handler).get("/v3/quote/AAPL")

        assert result.status == 400
        assert result.error == "FMP API Error: Invalid API KEY."

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        def handler(request):
            raise AssertionError("no request expected")

        result = await make_client(handler, api_key="").get("/v3/quote/AAPL")

        assert result.error == "FMP API Key is missing."
        assert result.status == 500

    @pytest.mark.asyncio
    async def test_api_key_never_logged(self, caplog):
        def handler(request):
            return httpx.Response(404, json={"message": "not found"})

        with caplog.at_level(logging.DEBUG, logger="modules.tools.clients.fmp"):
            await make_client(handler).get("/v3/quote/AAPL")

        assert API_KEY not in caplog.text
        assert "REDACTED" in caplog.text

    @pytest.mark.asyncio
    async def test_aclose_closes_http_client(self):
        client = make_client(lambda request: httpx.Response(200, json=[]))
        await client.aclose()
        assert client._client.is_closed


class TestFMPRealAPI:
    """Tests that hit the real FMP API"""

    @pytest.mark.real_api
    @pytest.mark.asyncio
    async def test_real_quote(self):
        if not Config.FMP_API_KEY:
            pytest.skip("FMP_API_KEY not set")
        client = FMPClient()
        try:
            result = await client.get("/v3/quote-short/AAPL")
        finally:
            await client.aclose()
        assert result.success
        assert result.data[0]["symbol"] == "AAPL"
