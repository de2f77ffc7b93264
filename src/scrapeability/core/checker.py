"""Core scrapeability check: load one page and collect diagnostics."""

import logging
import time
from pathlib import Path
from typing import List, Optional

from playwright.async_api import Browser, Page

from ..detectors import run_detections
from ..models.schemas import (
    CheckOptions,
    CheckResult,
    ConsoleMessage,
    DetectionResults,
    ScreenshotFormat,
)
from ..utils.url import is_valid_url, normalize_url, url_to_filename
from .error_handling import ErrorClassifier, InvalidUrlError, get_error_message

logger = logging.getLogger(__name__)

SCREENSHOT_EXTENSIONS = {
    ScreenshotFormat.PNG: ".png",
    ScreenshotFormat.JPEG: ".jpg",
}


def _now_ms() -> int:
    return int(time.time() * 1000)


def resolve_check_url(url: str) -> str:
    """
    Normalise user input into the URL to check.

    Raises:
        InvalidUrlError: When the input is not an http(s) URL with a host
    """
    normalized = normalize_url(url)
    if not is_valid_url(normalized):
        raise InvalidUrlError(f"Not a valid URL: {url}", url=url)
    return normalized


async def check_page_scrapeability(
    browser: Browser,
    url: str,
    options: CheckOptions,
) -> CheckResult:
    """
    Check whether a URL can be loaded and scraped.

    Opens a fresh page, navigates to ``url``, and records status, title,
    timing, console errors, an optional screenshot and the enabled
    detections. Failures are reported in the result instead of raised,
    and the page is always closed.

    Args:
        browser: Running Playwright browser (lifecycle owned by the caller)
        url: URL to check
        options: Check options

    Returns:
        CheckResult describing the outcome
    """
    start = time.monotonic()
    console_messages: List[ConsoleMessage] = []
    status_code: Optional[int] = None
    title = ""
    screenshot_path: Optional[str] = None
    page: Optional[Page] = None

    def elapsed_ms() -> int:
        return int((time.monotonic() - start) * 1000)

    logger.info(f"Checking scrapeability of {url}")

    try:
        new_page_kwargs = {
            "viewport": {
                "width": options.viewport.width,
                "height": options.viewport.height,
            },
        }
        if options.user_agent:
            new_page_kwargs["user_agent"] = options.user_agent
        page = await browser.new_page(**new_page_kwargs)

        if options.check_console_errors:
            def on_console(msg) -> None:
                if msg.type in ("error", "warning"):
                    console_messages.append(
                        ConsoleMessage(type=msg.type, text=msg.text, timestamp=_now_ms())
                    )

            def on_page_error(error) -> None:
                console_messages.append(
                    ConsoleMessage(type="error", text=get_error_message(error), timestamp=_now_ms())
                )

            page.on("console", on_console)
            page.on("pageerror", on_page_error)

        response = await page.goto(url, timeout=options.timeout, wait_until="networkidle")
        status_code = response.status if response is not None else None
        title = await page.title()

        if options.screenshot_enabled:
            screenshot_path = await capture_screenshot(page, url, options)

        detections: Optional[DetectionResults] = None
        if options.detections.any_enabled:
            detections = await run_detections(page, response, url, options)

        result = CheckResult(
            success=True,
            url=url,
            status_code=status_code,
            title=title,
            load_time_ms=elapsed_ms(),
            screenshot_path=screenshot_path,
            console_errors=tuple(msg.text for msg in console_messages),
            detections=detections,
        )
        logger.info(f"Checked {url}: HTTP {status_code} in {result.load_time_ms}ms")
        return result

    except Exception as e:
        error_message = get_error_message(e)
        category = ErrorClassifier.classify_exception(e, url=url).category
        logger.warning(f"Check failed for {url} ({category.value}): {error_message}")
        return CheckResult(
            success=False,
            url=url,
            status_code=status_code,
            title=title or "N/A",
            load_time_ms=elapsed_ms(),
            screenshot_path=screenshot_path,
            console_errors=tuple(msg.text for msg in console_messages),
            error=error_message,
        )

    finally:
        if page is not None:
            try:
                await page.close()
            except Exception as e:
                logger.error(f"Error closing page: {e}")


async def capture_screenshot(page: Page, url: str, options: CheckOptions) -> Optional[str]:
    """
    Save a full-page screenshot named after the URL's host and today's date.

    Returns:
        Path of the written file, or None if the capture failed
    """
    try:
        extension = SCREENSHOT_EXTENSIONS[options.screenshot_format]
        directory = Path(options.screenshot_path)
        full_path = directory / f"{url_to_filename(url)}{extension}"

        directory.mkdir(parents=True, exist_ok=True)

        screenshot_kwargs = {
            "path": str(full_path),
            "full_page": True,
            "type": options.screenshot_format.value,
        }
        if options.screenshot_format == ScreenshotFormat.JPEG:
            screenshot_kwargs["quality"] = options.screenshot_quality

        await page.screenshot(**screenshot_kwargs)
        logger.debug(f"Screenshot saved to {full_path}")
        return str(full_path)
    except Exception as e:
        logger.error(f"Failed to capture screenshot: {e}")
        return None
