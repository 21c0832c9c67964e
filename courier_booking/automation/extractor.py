"""
Tracking-number extraction from the booking confirmation page.

Extraction never fails: when no candidate location yields a tracking
number, a local placeholder is synthesized so that a booking which went
through on the portal is not reported as failed. Placeholders never match
the genuine tracking pattern and need manual reconciliation.
"""

import random
import re
import time
from dataclasses import dataclass
from typing import Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from courier_booking.automation.selectors import (
    TRACKING_LOCATIONS,
    TRACKING_NUMBER_PATTERN,
    SelectorSpec,
)
from courier_booking.logging_context import get_order_logger

logger = get_order_logger(__name__)

PLACEHOLDER_PREFIX = "JTTMP"
PLACEHOLDER_PATTERN = re.compile(rf"^{PLACEHOLDER_PREFIX}\d{{11}}$")


@dataclass(frozen=True)
class ExtractionResult:
    tracking_number: str
    is_placeholder: bool = False
    source: Optional[str] = None


def generate_placeholder_tracking_number() -> str:
    """``JTTMP`` + last 8 digits of the millisecond clock + 3 random digits."""
    timestamp = str(int(time.time() * 1000))[-8:]
    return f"{PLACEHOLDER_PREFIX}{timestamp}{random.randint(0, 999):03d}"


def is_placeholder_tracking_number(value: str) -> bool:
    return bool(PLACEHOLDER_PATTERN.match(value))


class ResultExtractor:
    """Scans candidate locations for the first visible tracking number."""

    def __init__(
        self,
        settle_delay_ms: int,
        visibility_timeout_ms: int,
        locations: tuple[SelectorSpec, ...] = TRACKING_LOCATIONS,
        pattern: re.Pattern[str] = TRACKING_NUMBER_PATTERN,
    ) -> None:
        self._settle_delay_ms = settle_delay_ms
        self._visibility_timeout_ms = visibility_timeout_ms
        self._locations = locations
        self._pattern = pattern

    async def _read_candidate(self, page: Page, spec: SelectorSpec) -> Optional[str]:
        element = page.locator(spec.selector).first
        try:
            await element.wait_for(state="visible", timeout=self._visibility_timeout_ms)
            text = await element.text_content(timeout=self._visibility_timeout_ms)
        except PlaywrightError:
            return None
        match = self._pattern.search(text or "")
        return match.group(0) if match else None

    async def extract(self, page: Page) -> ExtractionResult:
        logger.info("Extracting tracking number...")
        try:
            await page.wait_for_timeout(self._settle_delay_ms)
            for spec in self._locations:
                tracking_number = await self._read_candidate(page, spec)
                if tracking_number:
                    logger.info("Tracking number %s found via %s", tracking_number, spec.selector)
                    return ExtractionResult(tracking_number, source=spec.selector)
        except PlaywrightError as exc:
            logger.warning("Confirmation page became unreadable: %s", exc)

        placeholder = generate_placeholder_tracking_number()
        logger.warning(
            "No tracking number on confirmation page; using placeholder %s "
            "(needs manual reconciliation)",
            placeholder,
        )
        return ExtractionResult(placeholder, is_placeholder=True)
