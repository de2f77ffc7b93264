"""Playwright browser lifecycle helpers."""

import logging
from typing import Optional

from playwright.async_api import Browser, Playwright, async_playwright

from .error_handling import BrowserLaunchError

logger = logging.getLogger(__name__)

CHROMIUM_ARGS = [
    '--no-sandbox',
    '--disable-setuid-sandbox',
    '--disable-dev-shm-usage',
    '--disable-accelerated-2d-canvas',
    '--disable-gpu',
]


async def create_browser(playwright: Playwright, headless: bool = True) -> Browser:
    """
    Launch a headless Chromium instance.

    Raises:
        BrowserLaunchError: When Chromium cannot be started
    """
    logger.debug("Launching Chromium browser")
    try:
        return await playwright.chromium.launch(headless=headless, args=CHROMIUM_ARGS)
    except Exception as e:
        raise BrowserLaunchError(
            "Failed to launch browser. Is Chromium installed?",
            original_error=e,
        ) from e


async def close_browser(browser: Browser) -> None:
    """Close a browser, logging rather than raising on failure."""
    try:
        await browser.close()
    except Exception as e:
        logger.error(f"Error closing browser: {e}")


class BrowserManager:
    """Owns a Playwright driver and one Chromium browser.

    Usage::

        async with BrowserManager() as browser:
            result = await check_page_scrapeability(browser, url, options)
    """

    def __init__(self, headless: bool = True):
        self.headless = headless
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    @property
    def browser(self) -> Browser:
        if self._browser is None:
            raise BrowserLaunchError("Browser has not been started")
        return self._browser

    @property
    def is_running(self) -> bool:
        return self._browser is not None and bool(self._browser.is_connected())

    async def start(self) -> Browser:
        """Start Playwright and launch the browser if not already running.

        A browser that has disconnected (crashed or was closed externally)
        is released and launched again.
        """
        if self._browser is not None:
            if self._browser.is_connected():
                return self._browser
            logger.warning("Browser disconnected, relaunching")
            await self.close()

        self._playwright = await async_playwright().start()
        try:
            self._browser = await create_browser(self._playwright, headless=self.headless)
        except BrowserLaunchError:
            await self._stop_playwright()
            raise
        return self._browser

    async def close(self) -> None:
        """Clean up resources."""
        if self._browser is not None:
            await close_browser(self._browser)
            self._browser = None
        await self._stop_playwright()

    async def _stop_playwright(self) -> None:
        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.error(f"Error stopping Playwright: {e}")
            self._playwright = None

    async def __aenter__(self) -> Browser:
        """Async context manager entry."""
        return await self.start()

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()


async def is_browser_available() -> bool:
    """Check whether Chromium can be launched."""
    try:
        async with BrowserManager():
            return True
    except Exception as e:
        logger.debug(f"Browser not available: {e}")
        return False
