"""Authentication wall detection.

Four signals are combined into one verdict. HTTP 401/403 and a password
field are strong: either one alone marks the page as requiring login.
Auth keywords in the page text and an auth-like URL path are weak: they
only count once enough indicators have accumulated.
"""

import logging
from typing import List, Optional, Tuple
from urllib.parse import urlparse

from playwright.async_api import Page

from ..models.schemas import AuthenticationInfo, AuthType

logger = logging.getLogger(__name__)

DEFAULT_MIN_INDICATORS = 2

AUTH_KEYWORDS = (
    "sign in",
    "log in",
    "login required",
    "please log in",
    "authentication required",
    "access denied",
    "unauthorized access",
    "members only",
    "please sign in",
)

AUTH_PATHS = ("/login", "/signin", "/auth", "/authenticate")

LOGIN_FORM_JS = """() => {
    const passwordInput = document.querySelector('input[type="password"]');
    if (!passwordInput) {
        return { hasPasswordInput: false };
    }
    const form = passwordInput.closest('form');
    if (!form) {
        return { hasPasswordInput: true, hasForm: false };
    }
    const hasUsernameInput =
        form.querySelector('input[type="text"]') !== null ||
        form.querySelector('input[type="email"]') !== null ||
        form.querySelector('input[name*="user"]') !== null ||
        form.querySelector('input[name*="email"]') !== null;
    return {
        hasPasswordInput: true,
        hasForm: true,
        hasUsernameInput,
        action: form.action,
    };
}"""

BODY_TEXT_JS = "() => document.body ? document.body.innerText : ''"


async def detect_authentication_wall(
    page: Page,
    status_code: Optional[int],
    min_indicators: int = DEFAULT_MIN_INDICATORS,
) -> AuthenticationInfo:
    """
    Decide whether a page requires authentication.

    Args:
        page: Loaded Playwright page (only read from)
        status_code: HTTP status of the main navigation
        min_indicators: Indicators required before weak signals are trusted

    Returns:
        AuthenticationInfo; not-required results carry no indicators
    """
    try:
        indicators: List[str] = []

        status_signal = _check_status_code(status_code, indicators)
        form_detected, auth_type, login_url = await _detect_login_form(page, indicators)
        keyword_signal = await _detect_auth_keywords(page, indicators)
        url_signal = _check_url_for_auth(page, indicators)

        required = (
            status_signal
            or form_detected
            or (len(indicators) >= min_indicators and (keyword_signal or url_signal))
        )

        if not required:
            return AuthenticationInfo(required=False)

        return AuthenticationInfo(
            required=True,
            type=auth_type,
            login_url=login_url,
            indicators=tuple(indicators),
        )
    except Exception as e:
        logger.error(f"Error detecting authentication: {e}")
        return AuthenticationInfo(required=False)


def _check_status_code(status_code: Optional[int], indicators: List[str]) -> bool:
    if status_code == 401:
        indicators.append("HTTP 401 Unauthorized")
        return True

    if status_code == 403:
        indicators.append("HTTP 403 Forbidden")
        return True

    return False


async def _detect_login_form(
    page: Page, indicators: List[str]
) -> Tuple[bool, Optional[AuthType], Optional[str]]:
    try:
        form_info = await page.evaluate(LOGIN_FORM_JS)
        if not isinstance(form_info, dict) or not form_info.get("hasPasswordInput"):
            return False, None, None

        if form_info.get("hasForm"):
            indicators.append("Login form detected (username + password fields)")
            return True, AuthType.FORM, form_info.get("action") or None

        indicators.append("Password input detected")
        return True, AuthType.FORM, None
    except Exception as e:
        logger.warning(f"Error detecting login form: {e}")

    return False, None, None


async def _detect_auth_keywords(page: Page, indicators: List[str]) -> bool:
    try:
        text = await page.evaluate(BODY_TEXT_JS)
        text = (text or "").lower()

        for keyword in AUTH_KEYWORDS:
            if keyword in text:
                indicators.append(f'Authentication keyword: "{keyword}"')
                return True
    except Exception as e:
        logger.warning(f"Error detecting auth keywords: {e}")

    return False


def _check_url_for_auth(page: Page, indicators: List[str]) -> bool:
    try:
        path = urlparse(page.url).path.lower()

        for auth_path in AUTH_PATHS:
            if auth_path in path:
                indicators.append(f"URL contains auth path: {auth_path}")
                return True
    except Exception as e:
        logger.warning(f"Error checking URL for auth: {e}")

    return False
