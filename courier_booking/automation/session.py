"""Browser session owning one Playwright browser, context and page."""

from typing import Any, Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from courier_booking.config import BrowserConfig
from courier_booking.logging_context import get_order_logger

logger = get_order_logger(__name__)


class BrowserSession:
    """Isolated headless browser used by exactly one booking attempt.

    Use as ``async with BrowserSession(config) as session:``; the browser is
    closed on every exit path, including faults raised inside the block.
    """

    def __init__(self, config: BrowserConfig) -> None:
        self._config = config
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None

    async def __aenter__(self) -> "BrowserSession":
        try:
            await self.open()
        except BaseException:
            await self.close()
            raise
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.close()

    async def open(self) -> None:
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=self._config.headless)
        self._context = await self._browser.new_context(
            viewport={
                "width": self._config.viewport_width,
                "height": self._config.viewport_height,
            },
        )
        self.page = await self._context.new_page()
        self.page.set_default_timeout(self._config.timeout_ms)
        logger.debug("Browser session opened (headless=%s)", self._config.headless)

    async def close(self) -> None:
        try:
            for resource in (self._context, self._browser):
                if resource is None:
                    continue
                try:
                    await resource.close()
                except PlaywrightError as exc:
                    logger.warning("Error while closing browser: %s", exc)
            if self._playwright:
                await self._playwright.stop()
        finally:
            self.page = None
            self._context = None
            self._browser = None
            self._playwright = None
            logger.debug("Browser session closed")
