"""Shared test fixtures and helpers.

The browser is replaced by an in-memory FakePage that mimics the subset of
Playwright's async Page/Locator API the automation uses and records every
interaction, so tests can assert exactly which selectors were tried.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Optional

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from courier_booking.automation import selectors
from courier_booking.config import AppConfig, BrowserConfig, RetryConfig, WebhookConfig
from courier_booking.schemas.order_schema import OrderRequest


class FakeLocator:
    def __init__(self, page: "FakePage", selector: str) -> None:
        self._page = page
        self.selector = selector

    @property
    def first(self) -> "FakeLocator":
        return self

    async def wait_for(self, state: str = "visible", timeout: Optional[float] = None) -> None:
        self._page.calls.append(("wait_for", self.selector))
        if self.selector not in self._page.visible:
            raise PlaywrightTimeoutError(f"Timeout waiting for {self.selector}")

    async def is_visible(self, timeout: Optional[float] = None) -> bool:
        self._page.calls.append(("is_visible", self.selector))
        return self.selector in self._page.visible

    async def click(self, timeout: Optional[float] = None) -> None:
        self._page.calls.append(("locator_click", self.selector))
        if self.selector not in self._page.clickable:
            raise PlaywrightError(f"Element not clickable: {self.selector}")

    async def text_content(self, timeout: Optional[float] = None) -> Optional[str]:
        return self._page.texts.get(self.selector)


class FakePage:
    """Playwright Page stand-in; unknown selectors behave like missing elements."""

    def __init__(
        self,
        *,
        fillable: Iterable[str] = (),
        clickable: Iterable[str] = (),
        selectable: Iterable[str] = (),
        checkable: Iterable[str] = (),
        visible: Iterable[str] = (),
        texts: Optional[dict[str, str]] = None,
        login_form_present: bool = True,
        fail_goto: bool = False,
        explode_on: Optional[str] = None,
    ) -> None:
        self.fillable = set(fillable)
        self.clickable = set(clickable)
        self.selectable = set(selectable)
        self.checkable = set(checkable)
        self.visible = set(visible)
        self.texts = dict(texts or {})
        self.login_form_present = login_form_present
        self.fail_goto = fail_goto
        self.explode_on = explode_on
        self.calls: list[tuple[str, str]] = []
        self.filled: dict[str, str] = {}
        self.selected: dict[str, Optional[str]] = {}
        self.checked: list[str] = []
        self.default_timeout: Optional[float] = None

    def _maybe_explode(self, selector: str) -> None:
        if self.explode_on is not None and selector == self.explode_on:
            raise RuntimeError(f"unexpected fault at {selector}")

    def attempted(self, kind: str) -> list[str]:
        return [selector for call, selector in self.calls if call == kind]

    def set_default_timeout(self, timeout: float) -> None:
        self.default_timeout = timeout

    async def goto(self, url: str, **kwargs: Any) -> None:
        self.calls.append(("goto", url))
        if self.fail_goto:
            raise PlaywrightError(f"net::ERR_CONNECTION_REFUSED at {url}")

    async def wait_for_selector(self, selector: str, **kwargs: Any) -> None:
        self.calls.append(("wait_for_selector", selector))
        if not self.login_form_present:
            raise PlaywrightTimeoutError(f"Timeout waiting for {selector}")

    async def wait_for_load_state(self, state: str = "load", **kwargs: Any) -> None:
        self.calls.append(("wait_for_load_state", state))

    async def wait_for_timeout(self, timeout: float) -> None:
        self.calls.append(("wait_for_timeout", str(timeout)))

    async def fill(self, selector: str, value: str, **kwargs: Any) -> None:
        self.calls.append(("fill", selector))
        self._maybe_explode(selector)
        if selector not in self.fillable:
            raise PlaywrightTimeoutError(f"Timeout waiting for {selector}")
        self.filled[selector] = value

    async def click(self, selector: str, **kwargs: Any) -> None:
        self.calls.append(("click", selector))
        self._maybe_explode(selector)
        if selector not in self.clickable:
            raise PlaywrightTimeoutError(f"Timeout waiting for {selector}")

    async def select_option(self, selector: str, value: Optional[str] = None, **kwargs: Any) -> list[str]:
        self.calls.append(("select_option", selector))
        if selector not in self.selectable:
            raise PlaywrightError(f"Element is not a <select> element: {selector}")
        self.selected[selector] = value
        return [value or ""]

    async def check(self, selector: str, **kwargs: Any) -> None:
        self.calls.append(("check", selector))
        if selector not in self.checkable:
            raise PlaywrightError(f"Not a checkbox or radio button: {selector}")
        self.checked.append(selector)

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, selector)


def make_portal_page(
    tracking_text: Optional[str] = "Booking confirmed. Tracking number: JT20240001",
    **overrides: Any,
) -> FakePage:
    """A page where every step of a happy-path booking succeeds."""
    options: dict[str, Any] = {
        "fillable": {
            'input[type="email"]',
            'input[type="password"]',
            'input[name*="sender_name"]',
            'input[name*="sender_contact"]',
            'textarea[name*="sender_address"]',
            'input[name*="receiver_name"]',
            'input[id*="receiver_contact"]',
            'textarea[name*="receiver_address"]',
            'input[name*="weight"]',
            'input[name*="category"]',
            'textarea[name*="description"]',
            'input[name*="quantity"]',
        },
        "selectable": {'select[name*="package_size"]'},
        "checkable": {'input[value*="prepaid"]'},
        "clickable": {'button[type="submit"]', ".booking-btn"},
        "visible": {
            selectors.LOGGED_IN_MARKER,
            ".booking-btn",
            selectors.BOOKING_FORM_MARKER,
        },
        "texts": {},
    }
    if tracking_text is not None:
        options["visible"].add("text=/JT[0-9]+/")
        options["texts"]["text=/JT[0-9]+/"] = tracking_text
    options.update(overrides)
    return FakePage(**options)


class FakeSession:
    def __init__(self, factory: "FakeSessionFactory", page: FakePage) -> None:
        self._factory = factory
        self.page = page

    async def __aenter__(self) -> "FakeSession":
        self._factory.opened += 1
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self._factory.closed += 1


class FakeSessionFactory:
    """Hands out one page per attempt and counts open/close pairs."""

    def __init__(self, pages: Iterable[FakePage]) -> None:
        self._pages = list(pages)
        self.opened = 0
        self.closed = 0
        self.pages_used: list[FakePage] = []

    def __call__(self, config: BrowserConfig) -> FakeSession:
        page = self._pages[min(len(self.pages_used), len(self._pages) - 1)]
        self.pages_used.append(page)
        return FakeSession(self, page)


@dataclass
class RecordingNotifier:
    calls: list[tuple[str, str]] = field(default_factory=list)
    fail: bool = False

    async def notify(self, order_id: str, tracking_number: str) -> bool:
        self.calls.append((order_id, tracking_number))
        return not self.fail


class RaisingNotifier:
    async def notify(self, order_id: str, tracking_number: str) -> bool:
        raise RuntimeError("proxy exploded")


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def make_order(**overrides: Any) -> OrderRequest:
    data = {
        "orderId": "ORD1",
        "customerName": "Juan Dela Cruz",
        "contact": "09171234567",
        "address": "123 Rizal St, Manila",
    }
    data.update(overrides)
    return OrderRequest.model_validate(data)


def make_config(**retry_overrides: Any) -> AppConfig:
    retry = replace(RetryConfig(max_retries=3, retry_delay_sec=2.0), **retry_overrides)
    return AppConfig(
        retry=retry,
        webhook=WebhookConfig(status_webhook_url=""),
    )


@pytest.fixture
def app_config() -> AppConfig:
    return make_config()


@pytest.fixture
def order() -> OrderRequest:
    return make_order()


@pytest.fixture
def portal_page() -> FakePage:
    return make_portal_page()
