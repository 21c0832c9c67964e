"""Order-store (spreadsheet webhook) data models."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    """Inventory row as returned by the order store."""

    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(alias="ProductID")
    name: str = Field(alias="Name")
    description: str = Field(default="", alias="Description")
    price: float = Field(default=0.0, alias="Price")
    stock: int = Field(default=0, alias="Stock")
    category: str = Field(default="", alias="Category")
    package_size: str = Field(default="", alias="PackageSize")

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    def formatted_price(self) -> str:
        return f"₱{self.price:.2f}"


class OrderSubmission(BaseModel):
    """Storefront order placed by a customer."""

    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(alias="productId")
    customer_name: str = Field(alias="customerName")
    contact: str
    address: str
    quantity: int = 1
    notes: Optional[str] = None


class StoreResponse(BaseModel):
    """Envelope shared by every order-store reply."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    success: bool
    message: Optional[str] = None
    order_id: Optional[str] = Field(default=None, alias="orderId")
    product: Optional[dict[str, Any]] = None
    products: list[dict[str, Any]] = Field(default_factory=list)
