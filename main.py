"""
Courier booking service entry point.

Runs the HTTP shell that accepts booking requests, or books a single order
straight from the command line.

Usage:
    HTTP server:  python main.py serve --port 3000
    One booking:  python main.py book --order-id ORD1 --customer-name "Juan Dela Cruz" \
                      --contact 09171234567 --address "123 Rizal St, Manila"
    Catalogue:    python main.py products
"""

import argparse
import asyncio
import json
import logging
import sys

from courier_booking.config import AppConfig, load_config

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Courier portal booking automation.")
    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", help="Run the booking HTTP server.")
    serve.add_argument("--host", default="0.0.0.0", help="Interface to bind.")
    serve.add_argument("--port", type=int, default=None, help="Port (default: PORT env).")

    book = commands.add_parser("book", help="Book a single order and print the result.")
    book.add_argument("--order-id", required=True)
    book.add_argument("--customer-name", required=True)
    book.add_argument("--contact", required=True)
    book.add_argument("--address", required=True)
    book.add_argument("--weight")
    book.add_argument("--package-size", choices=["Small", "Medium", "Large"])
    book.add_argument("--category")
    book.add_argument("--notes")

    commands.add_parser("products", help="List store products with their order QR links.")
    return parser


def _run_server(config: AppConfig, host: str, port: int) -> None:
    from courier_booking.automation.orchestrator import BookingOrchestrator
    from courier_booking.server import create_app

    app = create_app(BookingOrchestrator(config))
    logger.info("Booking automation server running on port %d", port)
    logger.info("Webhook URL: http://localhost:%d/book-jt", port)
    app.run(host=host, port=port, threaded=True)


def _run_single_booking(config: AppConfig, args: argparse.Namespace) -> int:
    from courier_booking.automation.orchestrator import BookingFailedError, BookingOrchestrator
    from courier_booking.schemas.order_schema import InvalidOrderError

    payload = {
        "orderId": args.order_id,
        "customerName": args.customer_name,
        "contact": args.contact,
        "address": args.address,
        "weight": args.weight,
        "packageSize": args.package_size,
        "category": args.category,
        "notes": args.notes,
    }
    try:
        result = asyncio.run(BookingOrchestrator(config).book(payload))
    except (InvalidOrderError, BookingFailedError) as exc:
        sys.stdout.write(json.dumps({"success": False, "message": str(exc)}) + "\n")
        return 1
    sys.stdout.write(json.dumps(result.to_payload()) + "\n")
    return 0


def _run_product_listing(config: AppConfig) -> int:
    from courier_booking.tools.order_store import OrderStoreError, list_product_cards

    try:
        cards = asyncio.run(list_product_cards(config.store))
    except (OrderStoreError, ValueError) as exc:
        sys.stdout.write(json.dumps({"success": False, "message": str(exc)}) + "\n")
        return 1
    sys.stdout.write(json.dumps({"success": True, "products": cards}, ensure_ascii=False) + "\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    config = load_config()

    if args.command == "serve":
        _run_server(config, args.host, args.port or config.port)
        return 0
    if args.command == "products":
        return _run_product_listing(config)
    return _run_single_booking(config, args)


if __name__ == "__main__":
    sys.exit(main())
