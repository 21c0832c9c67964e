"""Order request and booking result models."""

from enum import Enum
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_WEIGHT = "0.5"
DEFAULT_CATEGORY = "General"
DEFAULT_DESCRIPTION = "Online order item"

# (attribute name, JSON key) for every field that must be non-empty
REQUIRED_FIELDS: list[tuple[str, str]] = [
    ("order_id", "orderId"),
    ("customer_name", "customerName"),
    ("contact", "contact"),
    ("address", "address"),
]


class PackageSize(str, Enum):
    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"


class InvalidOrderError(ValueError):
    """Raised when an order is missing required fields.

    Never retried: the booking is rejected before a browser session opens.
    """

    def __init__(self, missing_fields: list[str]) -> None:
        self.missing_fields = missing_fields
        super().__init__(f"Missing required fields: {', '.join(missing_fields)}")


class OrderRequest(BaseModel):
    """Order data driving one booking on the courier portal."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    order_id: str = Field(alias="orderId")
    customer_name: str = Field(alias="customerName")
    contact: str
    address: str
    weight: Optional[str] = None
    package_size: Optional[str] = Field(default=None, alias="packageSize")
    category: Optional[str] = None
    notes: Optional[str] = None

    @property
    def weight_or_default(self) -> str:
        return self.weight or DEFAULT_WEIGHT

    @property
    def category_or_default(self) -> str:
        return self.category or DEFAULT_CATEGORY

    @property
    def description(self) -> str:
        return self.notes or DEFAULT_DESCRIPTION

    def missing_fields(self) -> list[str]:
        """JSON names of required fields that are empty."""
        return [
            json_key
            for attr, json_key in REQUIRED_FIELDS
            if not (getattr(self, attr, None) or "").strip()
        ]


class BookingResult(BaseModel):
    """Outcome of one top-level booking call."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    tracking_number: Optional[str] = Field(default=None, alias="trackingNumber")
    message: str
    is_placeholder: bool = Field(default=False, alias="isPlaceholder")
    order_id: Optional[str] = Field(default=None, alias="orderId")
    attempts: int = 0

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict using the camelCase keys of the HTTP contract."""
        return self.model_dump(by_alias=True)


def _coerce_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def parse_order_request(payload: Union[OrderRequest, Mapping[str, Any]]) -> OrderRequest:
    """Build a validated OrderRequest from a model or a JSON-style mapping.

    Raises:
        InvalidOrderError: If any required field is absent or blank.
    """
    if isinstance(payload, OrderRequest):
        order = payload
    else:
        missing = [
            json_key
            for attr, json_key in REQUIRED_FIELDS
            if not str(payload.get(json_key, payload.get(attr)) or "").strip()
        ]
        if missing:
            raise InvalidOrderError(missing)
        order = OrderRequest.model_validate({
            key: _coerce_text(value) for key, value in payload.items()
        })

    missing = order.missing_fields()
    if missing:
        raise InvalidOrderError(missing)
    return order
