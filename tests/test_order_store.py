"""Tests for the order-store client and the status webhook notifier."""

import json
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from courier_booking.config import StoreConfig, WebhookConfig
from courier_booking.schemas.store_schema import OrderSubmission
from courier_booking.tools.order_store import (
    OrderStoreClient,
    OrderStoreError,
    build_order_store,
    list_product_cards,
)
from courier_booking.tools.status_webhook import (
    READY_TO_SHIP,
    WebhookStatusNotifier,
    build_status_notifier,
)

STORE_URL = "https://script.example.com/exec"


def _client(handler, requests_seen=None):
    def _record(request: httpx.Request) -> httpx.Response:
        if requests_seen is not None:
            requests_seen.append(request)
        return handler(request)

    return httpx.AsyncClient(transport=httpx.MockTransport(_record))


def _json(request: httpx.Request) -> dict:
    return json.loads(request.content)


class TestOrderStoreClient:
    @pytest.mark.asyncio
    async def test_get_products(self):
        seen = []
        http = _client(lambda r: httpx.Response(200, json={
            "success": True,
            "products": [{"ProductID": "P1", "Name": "Mug", "Price": 100, "Stock": 3}],
        }), seen)
        async with OrderStoreClient(STORE_URL, client=http) as store:
            products = await store.get_products()

        assert products[0].product_id == "P1"
        assert products[0].in_stock
        assert seen[0].url.params["action"] == "getProducts"

    @pytest.mark.asyncio
    async def test_get_product_not_found(self):
        http = _client(lambda r: httpx.Response(200, json={
            "success": False, "message": "Product not found",
        }))
        store = OrderStoreClient(STORE_URL, client=http)
        with pytest.raises(OrderStoreError, match="Product not found"):
            await store.get_product("P404")

    @pytest.mark.asyncio
    async def test_create_order_posts_order_data(self):
        seen = []
        http = _client(lambda r: httpx.Response(200, json={
            "success": True, "orderId": "ORD17000000001",
        }), seen)
        store = OrderStoreClient(STORE_URL, client=http)
        order = OrderSubmission(
            product_id="P1", customer_name="Juan Dela Cruz",
            contact="09171234567", address="123 Rizal St, Manila",
        )

        assert await store.create_order(order) == "ORD17000000001"
        body = _json(seen[0])
        assert body["action"] == "createOrder"
        assert body["orderData"]["customerName"] == "Juan Dela Cruz"

    @pytest.mark.asyncio
    async def test_create_order_validates_before_sending(self):
        seen = []
        http = _client(lambda r: httpx.Response(200, json={"success": True}), seen)
        store = OrderStoreClient(STORE_URL, client=http)
        order = OrderSubmission(
            product_id="P1", customer_name="Juan", contact="12345", address="123 Rizal St, Manila",
        )
        with pytest.raises(ValueError, match="Philippine mobile"):
            await store.create_order(order)
        assert seen == []

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        http = _client(lambda r: httpx.Response(502, text="Bad gateway"))
        store = OrderStoreClient(STORE_URL, client=http)
        with pytest.raises(OrderStoreError, match="request failed"):
            await store.update_order("ORD1", READY_TO_SHIP, "JT1")

    @pytest.mark.asyncio
    async def test_non_json_reply(self):
        http = _client(lambda r: httpx.Response(200, text="<html>login</html>"))
        store = OrderStoreClient(STORE_URL, client=http)
        with pytest.raises(OrderStoreError, match="invalid reply"):
            await store.get_products()

    def test_requires_url(self):
        with pytest.raises(ValueError):
            OrderStoreClient("")

    @pytest.mark.asyncio
    async def test_invalid_url_raises_store_error(self):
        store = OrderStoreClient("http://[::1/exec")
        with pytest.raises(OrderStoreError, match="request failed"):
            await store.get_products()
        await store.aclose()


class TestStatusWebhook:
    @pytest.mark.asyncio
    async def test_posts_ready_to_ship(self):
        seen = []
        http = _client(lambda r: httpx.Response(200, json={"success": True}), seen)
        notifier = WebhookStatusNotifier(WebhookConfig(status_webhook_url=STORE_URL), client=http)

        assert await notifier.notify("ORD1", "JT20240001") is True
        assert len(seen) == 1
        assert seen[0].method == "POST"
        assert _json(seen[0]) == {
            "action": "updateOrder",
            "orderId": "ORD1",
            "status": "Ready to Ship",
            "trackingNumber": "JT20240001",
        }

    @pytest.mark.asyncio
    async def test_failure_is_swallowed(self):
        def _boom(request):
            raise httpx.ConnectError("connection refused", request=request)

        http = _client(_boom)
        notifier = WebhookStatusNotifier(WebhookConfig(status_webhook_url=STORE_URL), client=http)
        assert await notifier.notify("ORD1", "JT1") is False

    @pytest.mark.asyncio
    async def test_malformed_url_is_swallowed(self):
        notifier = WebhookStatusNotifier(WebhookConfig(status_webhook_url="http://[::1/exec"))
        assert await notifier.notify("ORD1", "JT1") is False

    @pytest.mark.asyncio
    async def test_unexpected_transport_fault_is_swallowed(self):
        def _explode(request):
            raise RuntimeError("proxy exploded")

        http = _client(_explode)
        notifier = WebhookStatusNotifier(WebhookConfig(status_webhook_url=STORE_URL), client=http)
        assert await notifier.notify("ORD1", "JT1") is False

    def test_disabled_without_url(self):
        assert build_status_notifier(WebhookConfig(status_webhook_url="")) is None

    def test_enabled_with_url(self):
        notifier = build_status_notifier(WebhookConfig(status_webhook_url=STORE_URL))
        assert isinstance(notifier, WebhookStatusNotifier)


class TestProductCards:
    STORE = StoreConfig(
        apps_script_url=STORE_URL,
        storefront_url="https://shop.example.ph",
        qr_api_base="https://qr.example.com/chart",
        qr_size="200x200",
    )

    def test_build_order_store_uses_configured_url(self):
        with pytest.raises(ValueError, match="not configured"):
            build_order_store(StoreConfig(apps_script_url=""))

    @pytest.mark.asyncio
    async def test_cards_carry_price_stock_and_qr_link(self):
        seen = []
        http = _client(lambda r: httpx.Response(200, json={
            "success": True,
            "products": [
                {"ProductID": "P1", "Name": "Mug", "Price": 250, "Stock": 4},
                {"ProductID": "P2", "Name": "Cap", "Price": 99.5, "Stock": 0},
            ],
        }), seen)

        cards = await list_product_cards(self.STORE, client=http)

        assert str(seen[0].url).startswith(STORE_URL)
        assert [c["productId"] for c in cards] == ["P1", "P2"]
        assert cards[0]["price"] == "₱250.00"
        assert cards[0]["inStock"] is True
        assert cards[1]["inStock"] is False
        query = parse_qs(urlparse(cards[0]["qrCodeUrl"]).query)
        assert cards[0]["qrCodeUrl"].startswith("https://qr.example.com/chart?")
        assert query["chs"] == ["200x200"]
        assert query["chl"] == ["https://shop.example.ph/order.html?product_id=P1"]
