"""
Flask HTTP shell around the booking orchestrator.

    POST /book-jt  -> BookingResult JSON (400 on missing fields, 500 JSON on any failure)
    GET  /health   -> {"status": "OK", "timestamp": ...}

Each request runs its booking on its own event loop, so concurrent requests
(threaded server) each own their browser session.
"""

import asyncio
import logging
from datetime import datetime, timezone

from flask import Flask, jsonify, request

from courier_booking.automation.orchestrator import BookingFailedError, BookingOrchestrator
from courier_booking.schemas.order_schema import InvalidOrderError, parse_order_request

logger = logging.getLogger(__name__)


def create_app(orchestrator: BookingOrchestrator) -> Flask:
    """Build the Flask app bound to an already-configured orchestrator."""
    app = Flask(__name__)

    @app.post("/book-jt")
    def book_jt():
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            payload = {}
        logger.info("Received booking request for order %s", payload.get("orderId"))

        try:
            order = parse_order_request(payload)
        except InvalidOrderError as exc:
            return jsonify({"success": False, "message": str(exc)}), 400

        try:
            result = asyncio.run(orchestrator.book(order))
        except BookingFailedError as exc:
            logger.error("Booking error: %s", exc)
            return jsonify({"success": False, "message": str(exc)}), 500
        except Exception as exc:
            logger.exception("Unexpected error booking order %s", order.order_id)
            return jsonify({"success": False, "message": str(exc)}), 500

        return jsonify(result.to_payload())

    @app.get("/health")
    def health():
        return jsonify({
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    return app
