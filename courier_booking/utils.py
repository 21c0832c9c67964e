"""Shared utilities used across the booking service and storefront client."""

import random
import re
import time
from urllib.parse import quote

PH_MOBILE_RE = re.compile(r"^(09|\+639)\d{9}$")

MIN_NAME_LENGTH = 2
MIN_ADDRESS_LENGTH = 10


PHONE_SEPARATORS_RE = re.compile(r"[\s\-().]")


def normalize_phone(value: str) -> str:
    """Drop the separators customers type into mobile numbers.

    Spaces, dashes, dots and parentheses go; anything else is kept, so a
    number with letters in it still fails validation.

        >>> normalize_phone("0917-123 4567")
        '09171234567'
        >>> normalize_phone("+63 (917) 123.4567")
        '+639171234567'
    """
    return PHONE_SEPARATORS_RE.sub("", value or "")


def is_valid_ph_mobile(value: str) -> bool:
    """Check for a Philippine mobile number (09xxxxxxxxx or +639xxxxxxxxx)."""
    return bool(PH_MOBILE_RE.match(normalize_phone(value)))


def validate_order_form(customer_name: str, contact: str, address: str) -> list[str]:
    """Return the storefront's validation messages for an order form.

    An empty list means the form is acceptable.
    """
    errors: list[str] = []
    if not customer_name or len(customer_name.strip()) < MIN_NAME_LENGTH:
        errors.append(
            f"Please enter a valid customer name (minimum {MIN_NAME_LENGTH} characters)"
        )
    if not is_valid_ph_mobile(contact):
        errors.append("Please enter a valid Philippine mobile number (09xxxxxxxxx)")
    if not address or len(address.strip()) < MIN_ADDRESS_LENGTH:
        errors.append(
            f"Please enter a complete shipping address (minimum {MIN_ADDRESS_LENGTH} characters)"
        )
    return errors


def generate_order_id() -> str:
    """Generate an order ID: ``ORD`` + millisecond timestamp + 3 random digits."""
    return f"ORD{int(time.time() * 1000)}{random.randint(0, 999):03d}"


def build_qr_code_url(qr_api_base: str, qr_size: str, storefront_url: str, product_id: str) -> str:
    """Build the external QR image URL pointing at a product's order page."""
    order_url = f"{storefront_url.rstrip('/')}/order.html?product_id={product_id}"
    return f"{qr_api_base}?chs={qr_size}&cht=qr&chl={quote(order_url, safe='')}"
