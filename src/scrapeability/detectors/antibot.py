"""Anti-bot protection detection from response headers and in-page scripts."""

import logging
from typing import Dict, List, Optional

from playwright.async_api import Page, Response

from ..models.schemas import AntiBotDetection

logger = logging.getLogger(__name__)

RECAPTCHA_JS = """() => {
    const scripts = Array.from(document.getElementsByTagName('script'));
    const hasScript = scripts.some(
        (s) => s.src.includes('recaptcha') || s.src.includes('gstatic.com'));
    const hasGlobal = typeof window.grecaptcha !== 'undefined';
    const hasElement = document.querySelector('.g-recaptcha') !== null
        || document.querySelector('[data-sitekey]') !== null;
    return hasScript || hasGlobal || hasElement;
}"""

HCAPTCHA_JS = """() => {
    const scripts = Array.from(document.getElementsByTagName('script'));
    const hasScript = scripts.some((s) => s.src.includes('hcaptcha.com'));
    const hasGlobal = typeof window.hcaptcha !== 'undefined';
    const hasElement = document.querySelector('.h-captcha') !== null
        || document.querySelector('[data-hcaptcha-response]') !== null;
    return hasScript || hasGlobal || hasElement;
}"""

SCRIPT_SRC_JS = """(needle) => Array.from(document.getElementsByTagName('script'))
    .some((s) => s.src.includes(needle))"""


def _headers(response: Optional[Response]) -> Dict[str, str]:
    if response is None:
        return {}
    return response.headers


async def detect_anti_bot_measures(page: Page, response: Optional[Response]) -> AntiBotDetection:
    """
    Detect known anti-bot vendors protecting a page.

    Every vendor check is independent: a failing check counts as not
    detected and does not stop the others.

    Args:
        page: Loaded Playwright page (only read from)
        response: Response of the main navigation, if any

    Returns:
        AntiBotDetection with one flag per vendor and evidence in detection order
    """
    try:
        details: List[str] = []

        cloudflare = _check_cloudflare(response, details)
        recaptcha = await _check_recaptcha(page, details)
        hcaptcha = await _check_hcaptcha(page, details)
        datadome = await _check_datadome(page, response, details)
        perimeter81 = await _check_perimeter81(page, response, details)

        return AntiBotDetection(
            cloudflare=cloudflare,
            recaptcha=recaptcha,
            hcaptcha=hcaptcha,
            datadome=datadome,
            perimeter81=perimeter81,
            details=tuple(details),
        )
    except Exception as e:
        logger.error(f"Error detecting anti-bot measures: {e}")
        return AntiBotDetection()


def _check_cloudflare(response: Optional[Response], details: List[str]) -> bool:
    try:
        headers = _headers(response)

        if headers.get("cf-ray"):
            details.append("Cloudflare (cf-ray header detected)")
            return True

        if headers.get("cf-cache-status"):
            details.append("Cloudflare (cf-cache-status header detected)")
            return True

        if "cloudflare" in headers.get("server", "").lower():
            details.append("Cloudflare (server header)")
            return True
    except Exception as e:
        logger.warning(f"Error checking Cloudflare: {e}")

    return False


async def _check_recaptcha(page: Page, details: List[str]) -> bool:
    try:
        if await page.evaluate(RECAPTCHA_JS):
            details.append("reCAPTCHA detected")
            return True
    except Exception as e:
        logger.warning(f"Error checking reCAPTCHA: {e}")

    return False


async def _check_hcaptcha(page: Page, details: List[str]) -> bool:
    try:
        if await page.evaluate(HCAPTCHA_JS):
            details.append("hCaptcha detected")
            return True
    except Exception as e:
        logger.warning(f"Error checking hCaptcha: {e}")

    return False


async def _check_datadome(page: Page, response: Optional[Response], details: List[str]) -> bool:
    try:
        headers = _headers(response)
        if (
            headers.get("x-datadome-cid")
            or headers.get("x-dd-b")
            or "datadome" in headers.get("server", "").lower()
        ):
            details.append("DataDome (headers detected)")
            return True

        if await page.evaluate(SCRIPT_SRC_JS, "datadome.co"):
            details.append("DataDome (script detected)")
            return True
    except Exception as e:
        logger.warning(f"Error checking DataDome: {e}")

    return False


async def _check_perimeter81(page: Page, response: Optional[Response], details: List[str]) -> bool:
    try:
        headers = _headers(response)
        if headers.get("x-per-request-id") or headers.get("x-per-session-id"):
            details.append("Perimeter81 (headers detected)")
            return True

        if await page.evaluate(SCRIPT_SRC_JS, "perimeter81"):
            details.append("Perimeter81 (script detected)")
            return True
    except Exception as e:
        logger.warning(f"Error checking Perimeter81: {e}")

    return False
