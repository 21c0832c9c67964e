"""
Resilient element locator.

Tries an ordered list of selector candidates until one interaction succeeds.
A candidate that is missing, not interactable or times out is skipped
without being reported; only the aggregate outcome matters to callers.
"""

from typing import Awaitable, Callable, Iterable, Optional, TypeVar

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from courier_booking.automation.selectors import Action, SelectorSpec
from courier_booking.logging_context import get_order_logger

logger = get_order_logger(__name__)

T = TypeVar("T")


async def first_success(
    candidates: Iterable[T],
    attempt: Callable[[T], Awaitable[bool]],
) -> Optional[T]:
    """Return the first candidate for which ``attempt`` succeeds.

    An attempt fails by returning False or raising a Playwright error.
    Candidates after the first success are never attempted.
    """
    for candidate in candidates:
        try:
            if await attempt(candidate):
                return candidate
        except PlaywrightError:
            continue
    return None


class ElementLocator:
    """Selector-cascade interactions against one live page."""

    def __init__(self, page: Page, candidate_timeout_ms: int) -> None:
        self._page = page
        self._timeout = candidate_timeout_ms

    async def _act(self, spec: SelectorSpec, action: Action, value: Optional[str]) -> bool:
        effective = spec.action or action
        if effective == Action.FILL:
            await self._page.fill(spec.selector, value or "", timeout=self._timeout)
        elif effective == Action.CLICK:
            await self._page.click(spec.selector, timeout=self._timeout)
        elif effective == Action.SELECT:
            await self._page.select_option(spec.selector, value, timeout=self._timeout)
        elif effective == Action.CHECK:
            await self._page.check(spec.selector, timeout=self._timeout)
        else:
            raise ValueError(f"Unsupported action: {effective!r}")
        return True

    async def resolve(
        self,
        candidates: Iterable[SelectorSpec],
        action: Action,
        value: Optional[str] = None,
    ) -> Optional[SelectorSpec]:
        """Perform ``action`` with the first working candidate and return it."""
        matched = await first_success(
            candidates, lambda spec: self._act(spec, action, value)
        )
        if matched is not None:
            logger.debug("%s succeeded via %s", action.value, matched.selector)
        return matched

    async def locate_and_act(
        self,
        candidates: Iterable[SelectorSpec],
        action: Action,
        value: Optional[str] = None,
    ) -> bool:
        """True once one candidate accepted the action, False if all were exhausted."""
        return await self.resolve(candidates, action, value) is not None

    async def click_first_visible(
        self, candidates: Iterable[SelectorSpec], visibility_timeout_ms: int
    ) -> Optional[SelectorSpec]:
        """Click the first candidate that becomes visible within the bounded wait."""

        async def _click_if_visible(spec: SelectorSpec) -> bool:
            element = self._page.locator(spec.selector).first
            await element.wait_for(state="visible", timeout=visibility_timeout_ms)
            await element.click(timeout=self._timeout)
            return True

        return await first_success(candidates, _click_if_visible)

    async def is_visible(self, selector: str, timeout_ms: int) -> bool:
        """Bounded wait for ``selector`` to be visible; never raises."""
        try:
            await self._page.locator(selector).first.wait_for(
                state="visible", timeout=timeout_ms
            )
        except PlaywrightError:
            return False
        return True
