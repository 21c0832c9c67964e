"""Order ID logging context for tracing a booking across modules.

Provides an order_id-aware logger that attaches the order being booked to
every log record, so a single order's journey through login, form filling,
submission and retries can be followed even when several bookings run
concurrently.

Usage:
    from courier_booking.logging_context import get_order_logger, set_order_id

    set_order_id("ORD1700000000123")
    logger = get_order_logger(__name__)
    logger.info("Submitting booking")  # record.order_id == "ORD1700000000123"
"""

import logging
from contextvars import ContextVar

_order_id: ContextVar[str] = ContextVar("order_id", default="-")


def set_order_id(order_id: str) -> None:
    """Set the correlation ID for the current async context."""
    _order_id.set(order_id)


def get_order_id() -> str:
    """Retrieve the current correlation ID."""
    return _order_id.get()


class OrderIdFilter(logging.Filter):
    """Injects order_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.order_id = _order_id.get()  # type: ignore[attr-defined]
        return True


def get_order_logger(name: str) -> logging.Logger:
    """Return a logger with the OrderIdFilter attached.

    The filter adds ``order_id`` to each record so formatters can
    include ``%(order_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, OrderIdFilter) for f in logger.filters):
        logger.addFilter(OrderIdFilter())
    return logger


def install_order_id_filter() -> None:
    """Attach the filter to every root handler.

    Records from third-party loggers pass through the same handlers, so the
    handler-level filter keeps ``%(order_id)s`` resolvable for all of them.
    """
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, OrderIdFilter) for f in handler.filters):
            handler.addFilter(OrderIdFilter())
