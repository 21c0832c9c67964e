"""
Step sequencer driving one booking through the courier portal.

Strict order: open portal -> login -> navigate to booking form -> fill
form -> submit -> extract result. Each step is gated on the previous one
and raises a named StepFailure when its own success condition is not
observed. The sequencer never retries; that is the orchestrator's job.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from courier_booking.automation import selectors
from courier_booking.automation.extractor import ExtractionResult, ResultExtractor
from courier_booking.automation.fillers import (
    FieldFillResult,
    PackageFiller,
    ReceiverFiller,
    SectionReport,
    SenderFiller,
    set_payment_method,
)
from courier_booking.automation.locator import ElementLocator
from courier_booking.config import AppConfig
from courier_booking.logging_context import get_order_logger
from courier_booking.schemas.order_schema import OrderRequest

logger = get_order_logger(__name__)


class BookingStep(str, Enum):
    OPEN_PORTAL = "open_portal"
    LOGIN = "login"
    NAVIGATE = "navigate"
    FILL_FORM = "fill_form"
    SUBMIT = "submit"
    EXTRACT = "extract"


class StepFailure(Exception):
    """A pipeline step whose success condition was not observed."""

    step: BookingStep = BookingStep.OPEN_PORTAL
    label = "Opening portal"

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"{self.label} failed: {reason}")


class LoginError(StepFailure):
    step = BookingStep.LOGIN
    label = "Login"


class NavigationError(StepFailure):
    step = BookingStep.NAVIGATE
    label = "Navigation to booking form"


class FormFillError(StepFailure):
    step = BookingStep.FILL_FORM
    label = "Form filling"


class SubmissionError(StepFailure):
    step = BookingStep.SUBMIT
    label = "Booking submission"


@dataclass
class SequenceOutcome:
    """Everything a successful run produced."""

    extraction: ExtractionResult
    sections: list[SectionReport] = field(default_factory=list)
    payment: Optional[FieldFillResult] = None
    completed_steps: list[BookingStep] = field(default_factory=list)


class StepSequencer:
    """Runs the booking steps in order against one exclusively-owned page."""

    def __init__(self, page: Page, config: AppConfig) -> None:
        self._page = page
        self._config = config
        self._browser = config.browser
        self._locator = ElementLocator(page, self._browser.candidate_timeout_ms)
        self._extractor = ResultExtractor(
            settle_delay_ms=self._browser.settle_delay_ms,
            visibility_timeout_ms=self._browser.visibility_timeout_ms,
        )

    async def _settle(self) -> None:
        await self._page.wait_for_load_state("networkidle", timeout=self._browser.timeout_ms)

    async def open_portal(self) -> None:
        logger.info("Opening portal %s", self._config.portal.url)
        try:
            await self._page.goto(self._config.portal.url, timeout=self._browser.timeout_ms)
        except PlaywrightError as exc:
            raise StepFailure(str(exc)) from exc

    async def login(self) -> None:
        logger.info("Logging into courier portal...")
        try:
            await self._page.wait_for_selector(
                selectors.LOGIN_FORM_SELECTOR, timeout=self._browser.login_form_timeout_ms
            )
            portal = self._config.portal
            if not await self._locator.locate_and_act(
                selectors.LOGIN_EMAIL, selectors.Action.FILL, portal.email
            ):
                logger.warning("No email field accepted input")
            if not await self._locator.locate_and_act(
                selectors.LOGIN_PASSWORD, selectors.Action.FILL, portal.password
            ):
                logger.warning("No password field accepted input")
            if not await self._locator.locate_and_act(
                selectors.LOGIN_BUTTON, selectors.Action.CLICK
            ):
                logger.warning("No login control could be clicked")
            await self._settle()
        except PlaywrightError as exc:
            raise LoginError(str(exc)) from exc

        if not await self._locator.is_visible(
            selectors.LOGGED_IN_MARKER, self._browser.verify_timeout_ms
        ):
            raise LoginError("Login verification failed")
        logger.info("Logged in")

    async def navigate_to_booking_form(self) -> None:
        logger.info("Navigating to booking form...")
        clicked = await self._locator.click_first_visible(
            selectors.BOOKING_FORM_LINKS, self._browser.visibility_timeout_ms
        )
        if clicked is None:
            logger.info("No booking link visible; assuming the form is already open")
        else:
            try:
                await self._settle()
            except PlaywrightError as exc:
                raise NavigationError(str(exc)) from exc

        if not await self._locator.is_visible(
            selectors.BOOKING_FORM_MARKER, self._browser.verify_timeout_ms
        ):
            raise NavigationError("Could not navigate to booking form")
        logger.info("Booking form reached")

    async def fill_form(
        self, order: OrderRequest
    ) -> tuple[list[SectionReport], FieldFillResult]:
        logger.info("Filling booking form...")
        fillers = [
            SenderFiller(self._config.sender),
            ReceiverFiller(order),
            PackageFiller(order),
        ]
        try:
            reports = [await filler.fill(self._locator) for filler in fillers]
            payment = await set_payment_method(self._locator)
        except PlaywrightError as exc:
            raise FormFillError(str(exc)) from exc
        return reports, payment

    async def _error_banner_text(self) -> Optional[str]:
        for selector in selectors.SUBMISSION_ERROR_BANNERS:
            banner = self._page.locator(selector).first
            try:
                if await banner.is_visible():
                    text = await banner.text_content(timeout=self._browser.visibility_timeout_ms)
                    return (text or "").strip() or selector
            except PlaywrightError:
                continue
        return None

    async def submit(self) -> None:
        logger.info("Submitting booking...")
        if not await self._locator.locate_and_act(
            selectors.SUBMIT_BUTTONS, selectors.Action.CLICK
        ):
            raise SubmissionError("No submit control could be clicked")
        try:
            await self._settle()
        except PlaywrightError as exc:
            raise SubmissionError(str(exc)) from exc

        banner = await self._error_banner_text()
        if banner:
            raise SubmissionError(f"Portal rejected the booking: {banner}")
        logger.info("Booking submitted")

    async def run(self, order: OrderRequest) -> SequenceOutcome:
        completed: list[BookingStep] = []

        await self.open_portal()
        completed.append(BookingStep.OPEN_PORTAL)
        await self.login()
        completed.append(BookingStep.LOGIN)
        await self.navigate_to_booking_form()
        completed.append(BookingStep.NAVIGATE)
        reports, payment = await self.fill_form(order)
        completed.append(BookingStep.FILL_FORM)
        await self.submit()
        completed.append(BookingStep.SUBMIT)
        extraction = await self._extractor.extract(self._page)
        completed.append(BookingStep.EXTRACT)

        return SequenceOutcome(
            extraction=extraction,
            sections=reports,
            payment=payment,
            completed_steps=completed,
        )
