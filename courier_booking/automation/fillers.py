"""
Best-effort form section fillers.

Each filler maps a fixed set of portal field names to values from the
sender profile or the order. Every field goes through the locator on its
own; a field that cannot be placed is recorded as SKIPPED and the section
carries on, because not every portal form variant has every field.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from courier_booking.automation.locator import ElementLocator
from courier_booking.automation.selectors import (
    Action,
    SelectorSpec,
    package_field_candidates,
    payment_method_candidates,
    text_field_candidates,
)
from courier_booking.config import SenderProfile
from courier_booking.logging_context import get_order_logger
from courier_booking.schemas.order_schema import OrderRequest, PackageSize

logger = get_order_logger(__name__)

DEFAULT_PAYMENT_METHOD = "prepaid"

PACKAGE_SIZE_CODES: dict[str, str] = {
    PackageSize.SMALL.value: "1",
    PackageSize.MEDIUM.value: "2",
    PackageSize.LARGE.value: "3",
}


def package_size_code(package_size: Optional[str]) -> str:
    """Translate a package size into the portal's numeric code (Medium if unknown)."""
    return PACKAGE_SIZE_CODES.get(package_size or "", PACKAGE_SIZE_CODES[PackageSize.MEDIUM.value])


class FieldOutcome(str, Enum):
    FILLED = "filled"
    SKIPPED = "skipped"


@dataclass
class FieldFillResult:
    field_name: str
    outcome: FieldOutcome
    selector: Optional[str] = None


@dataclass
class SectionReport:
    """Per-section fill coverage; the pipeline records it but never gates on it."""

    section: str
    fields: list[FieldFillResult] = field(default_factory=list)

    @property
    def filled(self) -> list[str]:
        return [f.field_name for f in self.fields if f.outcome == FieldOutcome.FILLED]

    @property
    def skipped(self) -> list[str]:
        return [f.field_name for f in self.fields if f.outcome == FieldOutcome.SKIPPED]

    @property
    def coverage(self) -> float:
        if not self.fields:
            return 0.0
        return len(self.filled) / len(self.fields)


class SectionFiller(ABC):
    """Fills one form section field by field."""

    section = ""
    candidates: Callable[[str], tuple[SelectorSpec, ...]] = staticmethod(text_field_candidates)

    @abstractmethod
    def field_values(self) -> dict[str, str]:
        """Portal field name to value, in fill order."""

    async def fill(self, locator: ElementLocator) -> SectionReport:
        report = SectionReport(section=self.section)
        for field_name, value in self.field_values().items():
            matched = await locator.resolve(self.candidates(field_name), Action.FILL, value)
            if matched is None:
                report.fields.append(FieldFillResult(field_name, FieldOutcome.SKIPPED))
            else:
                report.fields.append(
                    FieldFillResult(field_name, FieldOutcome.FILLED, matched.selector)
                )

        if report.skipped:
            logger.warning(
                "%s section: could not place %s", self.section, ", ".join(report.skipped)
            )
        logger.info(
            "%s section filled %d/%d fields", self.section, len(report.filled), len(report.fields)
        )
        return report


class SenderFiller(SectionFiller):
    section = "sender"

    def __init__(self, sender: SenderProfile) -> None:
        self._sender = sender

    def field_values(self) -> dict[str, str]:
        return {
            "sender_name": self._sender.name,
            "sender_contact": self._sender.contact,
            "sender_address": self._sender.address,
            "sender_company": self._sender.company,
        }


class ReceiverFiller(SectionFiller):
    section = "receiver"

    def __init__(self, order: OrderRequest) -> None:
        self._order = order

    def field_values(self) -> dict[str, str]:
        return {
            "receiver_name": self._order.customer_name,
            "receiver_contact": self._order.contact,
            "receiver_address": self._order.address,
            "receiver_phone": self._order.contact,
        }


class PackageFiller(SectionFiller):
    section = "package"
    candidates = staticmethod(package_field_candidates)

    def __init__(self, order: OrderRequest) -> None:
        self._order = order

    def field_values(self) -> dict[str, str]:
        return {
            "weight": self._order.weight_or_default,
            "package_size": package_size_code(self._order.package_size),
            "category": self._order.category_or_default,
            "description": self._order.description,
            "quantity": "1",
        }


async def set_payment_method(
    locator: ElementLocator, method: str = DEFAULT_PAYMENT_METHOD
) -> FieldFillResult:
    """Pick the payment method via a radio input or a payment dropdown."""
    matched = await locator.resolve(payment_method_candidates(method), Action.SELECT, method)
    if matched is None:
        logger.warning("Payment method '%s' could not be set", method)
        return FieldFillResult("payment_method", FieldOutcome.SKIPPED)
    return FieldFillResult("payment_method", FieldOutcome.FILLED, matched.selector)
