"""Tests for the stock-check and order-service HTTP adapters"""
import json
from decimal import Decimal

import httpx
import pytest

from shelfcart.clients import (
    HttpOrderSubmitter,
    HttpStockVerifier,
    OrderLineItem,
    OrderRequest,
    OrderStatus,
    StockCheckResult,
)
from shelfcart.errors import ERROR_INVALID_ORDER_RESPONSE, SubmitterUnreachable, VerifierUnreachable


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _order_request() -> OrderRequest:
    return OrderRequest(
        user_id="u1",
        line_items=[OrderLineItem(sku_code="b1", price=Decimal("9.99"), quantity=2)],
    )


class TestStockCheckResult:

    @pytest.mark.parametrize("body", [
        None,
        [],
        {},
        {"inStock": None},
        {"inStock": "true"},
        {"inStock": 1},
    ])
    def test_ambiguous_flag_fails_closed(self, body):
        result = StockCheckResult.from_response("b1", body)

        assert result.in_stock is False

    def test_in_stock(self):
        result = StockCheckResult.from_response("b1", {"bookId": "b1", "inStock": True, "availableQuantity": 5})

        assert result == StockCheckResult(book_id="b1", in_stock=True, available_quantity=5)

    def test_bad_quantity_defaults_to_zero(self):
        result = StockCheckResult.from_response("b1", {"inStock": True, "availableQuantity": "lots"})

        assert result.available_quantity == 0


class TestHttpStockVerifier:

    @pytest.mark.asyncio
    async def test_check_sends_book_and_quantity(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = request.url
            return httpx.Response(200, json={"bookId": "b1", "inStock": True, "availableQuantity": 5})

        verifier = HttpStockVerifier(base_url="http://stock:8083/", client=_client(handler))

        result = await verifier.check("b1", 2)

        assert result.in_stock is True
        assert result.available_quantity == 5
        assert seen["url"].path == "/api/stock/check"
        assert seen["url"].params["bookId"] == "b1"
        assert seen["url"].params["quantity"] == "2"

    @pytest.mark.asyncio
    async def test_non_json_body_is_out_of_stock(self):
        verifier = HttpStockVerifier(
            base_url="http://stock", client=_client(lambda r: httpx.Response(200, text="yes"))
        )

        result = await verifier.check("b1", 1)

        assert result.in_stock is False

    @pytest.mark.asyncio
    async def test_server_error_is_unreachable(self):
        verifier = HttpStockVerifier(
            base_url="http://stock", client=_client(lambda r: httpx.Response(503))
        )

        with pytest.raises(VerifierUnreachable):
            await verifier.check("b1", 1)

    @pytest.mark.asyncio
    async def test_timeout_is_unreachable(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        verifier = HttpStockVerifier(base_url="http://stock", client=_client(handler))

        with pytest.raises(VerifierUnreachable):
            await verifier.check("b1", 1)

    @pytest.mark.asyncio
    async def test_connection_error_is_unreachable(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        verifier = HttpStockVerifier(base_url="http://stock", client=_client(handler))

        with pytest.raises(VerifierUnreachable):
            await verifier.check("b1", 1)

    def test_base_url_from_environment(self, monkeypatch):
        monkeypatch.setenv("STOCK_CHECK_SERVICE_URL", "http://elsewhere:9000/")

        assert HttpStockVerifier().base_url == "http://elsewhere:9000"


class TestHttpOrderSubmitter:

    @pytest.mark.asyncio
    async def test_submit_posts_line_items(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"status": "success", "message": "OK-123"})

        submitter = HttpOrderSubmitter(base_url="http://orders:8082", client=_client(handler))

        outcome = await submitter.submit(_order_request())

        assert outcome.succeeded
        assert outcome.message == "OK-123"
        assert seen["method"] == "POST"
        assert seen["path"] == "/api/order"
        assert seen["body"] == {
            "userId": "u1",
            "lineItems": [{"skuCode": "b1", "price": 9.99, "quantity": 2}],
        }

    @pytest.mark.asyncio
    async def test_success_status_any_case(self):
        submitter = HttpOrderSubmitter(
            base_url="http://orders",
            client=_client(lambda r: httpx.Response(200, json={"status": "Success", "message": "m"})),
        )

        outcome = await submitter.submit(_order_request())

        assert outcome.status is OrderStatus.SUCCESS

    @pytest.mark.asyncio
    async def test_failure_status(self):
        submitter = HttpOrderSubmitter(
            base_url="http://orders",
            client=_client(lambda r: httpx.Response(200, json={"status": "failure", "message": "declined"})),
        )

        outcome = await submitter.submit(_order_request())

        assert not outcome.succeeded
        assert outcome.message == "declined"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [
        httpx.Response(200, json={"message": "OK"}),
        httpx.Response(200, json=["success"]),
        httpx.Response(200, text="success"),
    ])
    async def test_invalid_response_is_failure(self, response):
        submitter = HttpOrderSubmitter(base_url="http://orders", client=_client(lambda r: response))

        outcome = await submitter.submit(_order_request())

        assert not outcome.succeeded
        assert outcome.message == ERROR_INVALID_ORDER_RESPONSE

    @pytest.mark.asyncio
    async def test_client_error_is_failure_with_message(self):
        submitter = HttpOrderSubmitter(
            base_url="http://orders",
            client=_client(lambda r: httpx.Response(400, json={"status": "success", "message": "bad sku"})),
        )

        outcome = await submitter.submit(_order_request())

        assert not outcome.succeeded
        assert outcome.message == "bad sku"

    @pytest.mark.asyncio
    async def test_server_error_is_unreachable(self):
        submitter = HttpOrderSubmitter(
            base_url="http://orders", client=_client(lambda r: httpx.Response(502))
        )

        with pytest.raises(SubmitterUnreachable):
            await submitter.submit(_order_request())

    @pytest.mark.asyncio
    async def test_timeout_is_unreachable(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        submitter = HttpOrderSubmitter(base_url="http://orders", client=_client(handler))

        with pytest.raises(SubmitterUnreachable):
            await submitter.submit(_order_request())

    @pytest.mark.asyncio
    async def test_aclose_releases_client(self):
        submitter = HttpOrderSubmitter(base_url="http://orders")
        await submitter._get_http_client()

        await submitter.aclose()

        assert submitter._http_client is None
