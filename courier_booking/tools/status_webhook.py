"""
Order-status webhook fired after a successful booking.

The booking has already succeeded by the time this runs, so a webhook
failure is logged and swallowed; it never changes the booking result.
"""

from typing import Optional, Protocol

import httpx

from courier_booking.config import WebhookConfig
from courier_booking.logging_context import get_order_logger
from courier_booking.tools.order_store import OrderStoreClient, OrderStoreError

logger = get_order_logger(__name__)

READY_TO_SHIP = "Ready to Ship"


class StatusNotifier(Protocol):
    async def notify(self, order_id: str, tracking_number: str) -> bool: ...


class WebhookStatusNotifier:
    """Posts ``updateOrder`` with status "Ready to Ship" to the order store."""

    def __init__(
        self, config: WebhookConfig, client: Optional[httpx.AsyncClient] = None
    ) -> None:
        self._config = config
        self._client = client

    async def notify(self, order_id: str, tracking_number: str) -> bool:
        """Return True when the store acknowledged the update."""
        try:
            store = OrderStoreClient(
                self._config.status_webhook_url,
                timeout_sec=self._config.timeout_sec,
                client=self._client,
            )
            async with store:
                await store.update_order(order_id, READY_TO_SHIP, tracking_number)
        except (OrderStoreError, ValueError) as exc:
            logger.error("Failed to update order status: %s", exc)
            return False
        except Exception:
            logger.exception("Unexpected error updating order %s status", order_id)
            return False
        return True


def build_status_notifier(config: WebhookConfig) -> Optional[StatusNotifier]:
    """Notifier for the configured webhook, or None when it is disabled."""
    if not config.status_webhook_url:
        return None
    return WebhookStatusNotifier(config)
