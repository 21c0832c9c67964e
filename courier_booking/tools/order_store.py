"""
Client for the spreadsheet-backed order store.

The store is an opaque HTTP JSON service (a spreadsheet web app). Reads are
``GET ?action=...``; writes are ``POST {"action": ..., ...}``. Every reply
carries ``success`` and, on failure, a ``message``.
"""

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from courier_booking.config import StoreConfig
from courier_booking.schemas.store_schema import OrderSubmission, Product, StoreResponse
from courier_booking.utils import build_qr_code_url, validate_order_form

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SEC = 10.0


class OrderStoreError(Exception):
    """The order store could not be reached or reported a failure."""


class OrderStoreClient:
    """Async client for product lookup and order create/update calls."""

    def __init__(
        self,
        base_url: str,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if not base_url:
            raise ValueError("Order store URL is not configured")
        self._base_url = base_url
        self._client = client or httpx.AsyncClient(timeout=timeout_sec, follow_redirects=True)
        self._owns_client = client is None

    async def __aenter__(self) -> "OrderStoreClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, **kwargs: Any) -> StoreResponse:
        try:
            response = await self._client.request(method, self._base_url, **kwargs)
            response.raise_for_status()
            envelope = StoreResponse.model_validate(response.json())
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise OrderStoreError(f"Order store request failed: {exc}") from exc
        except (ValueError, ValidationError) as exc:
            raise OrderStoreError(f"Order store returned an invalid reply: {exc}") from exc

        if not envelope.success:
            raise OrderStoreError(envelope.message or "Order store reported a failure")
        return envelope

    async def get_products(self) -> list[Product]:
        envelope = await self._request("GET", params={"action": "getProducts"})
        return [Product.model_validate(row) for row in envelope.products]

    async def get_product(self, product_id: str) -> Product:
        envelope = await self._request(
            "GET", params={"action": "getProduct", "productId": product_id}
        )
        if envelope.product is None:
            raise OrderStoreError(f"Product {product_id} not found")
        return Product.model_validate(envelope.product)

    async def create_order(self, order: OrderSubmission) -> str:
        """Submit a storefront order and return the store-assigned order ID.

        Raises:
            ValueError: If the order fails storefront form validation.
            OrderStoreError: If the store rejects or cannot record the order.
        """
        errors = validate_order_form(order.customer_name, order.contact, order.address)
        if errors:
            raise ValueError("; ".join(errors))

        envelope = await self._request(
            "POST",
            json={"action": "createOrder", "orderData": order.model_dump(by_alias=True)},
        )
        if not envelope.order_id:
            raise OrderStoreError("Order store did not return an order ID")
        logger.info("Order %s created for product %s", envelope.order_id, order.product_id)
        return envelope.order_id

    async def update_order(
        self, order_id: str, status: str, tracking_number: Optional[str] = None
    ) -> StoreResponse:
        envelope = await self._request(
            "POST",
            json={
                "action": "updateOrder",
                "orderId": order_id,
                "status": status,
                "trackingNumber": tracking_number,
            },
        )
        logger.info("Order %s updated to '%s'", order_id, status)
        return envelope


def build_order_store(
    config: StoreConfig, client: Optional[httpx.AsyncClient] = None
) -> OrderStoreClient:
    """Client for the configured order store (``APPS_SCRIPT_URL``)."""
    return OrderStoreClient(config.apps_script_url, client=client)


async def list_product_cards(
    config: StoreConfig, client: Optional[httpx.AsyncClient] = None
) -> list[dict[str, Any]]:
    """Storefront product listing with each product's order-page QR link."""
    async with build_order_store(config, client) as store:
        products = await store.get_products()
    return [
        {
            "productId": product.product_id,
            "name": product.name,
            "price": product.formatted_price(),
            "stock": product.stock,
            "inStock": product.in_stock,
            "qrCodeUrl": build_qr_code_url(
                config.qr_api_base, config.qr_size, config.storefront_url, product.product_id
            ),
        }
        for product in products
    ]
