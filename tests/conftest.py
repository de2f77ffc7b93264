"""Shared fixtures and mock factories for Playwright pages and responses."""

from typing import Dict, Iterable, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from scrapeability.config import get_settings
from scrapeability.detectors.antibot import HCAPTCHA_JS, RECAPTCHA_JS, SCRIPT_SRC_JS
from scrapeability.detectors.authentication import BODY_TEXT_JS, LOGIN_FORM_JS


def make_response(status: int = 200, headers: Optional[Dict[str, str]] = None) -> MagicMock:
    """Mock Playwright response; header names are lower-case as Playwright reports them."""
    response = MagicMock()
    response.status = status
    response.headers = dict(headers or {})
    return response


def make_page(
    url: str = "https://example.com/",
    login_form: Optional[dict] = None,
    body_text: str = "",
    recaptcha: bool = False,
    hcaptcha: bool = False,
    script_srcs: Iterable[str] = (),
) -> MagicMock:
    """
    Mock Playwright page whose ``evaluate`` answers the detector scripts.

    Args:
        url: Value of ``page.url``
        login_form: Result of the login form script
        body_text: Visible body text
        recaptcha: Result of the reCAPTCHA script
        hcaptcha: Result of the hCaptcha script
        script_srcs: Script URLs searched by the script source search
    """
    script_srcs = tuple(script_srcs)

    def evaluate(script, *args):
        if script == LOGIN_FORM_JS:
            return login_form or {"hasPasswordInput": False}
        if script == BODY_TEXT_JS:
            return body_text
        if script == RECAPTCHA_JS:
            return recaptcha
        if script == HCAPTCHA_JS:
            return hcaptcha
        if script == SCRIPT_SRC_JS:
            return any(args[0] in src for src in script_srcs)
        raise AssertionError(f"Unexpected script evaluated: {script[:40]}")

    page = MagicMock()
    page.url = url
    page.evaluate = AsyncMock(side_effect=evaluate)
    page.title = AsyncMock(return_value="Test Page")
    page.screenshot = AsyncMock()
    page.close = AsyncMock()
    return page


@pytest.fixture
def page():
    """Clean page with no detector script firing."""
    return make_page()


@pytest.fixture
def response():
    """Plain 200 response without interesting headers."""
    return make_response()


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached per process; start each test from the environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
