"""Core check engine, browser lifecycle and error handling."""

from .browser import BrowserManager, close_browser, create_browser, is_browser_available
from .checker import capture_screenshot, check_page_scrapeability, resolve_check_url
from .error_handling import (
    BrowserLaunchError,
    ErrorCategory,
    ErrorClassifier,
    ErrorSeverity,
    InstallError,
    InvalidUrlError,
    ScrapeCheckError,
    format_error_for_user,
    get_error_message,
    is_network_error,
    is_timeout_error,
)
from .install import BrowserInstaller, manual_install_instructions

__all__ = [
    # Checking
    "check_page_scrapeability",
    "capture_screenshot",
    "resolve_check_url",

    # Browser lifecycle
    "BrowserManager",
    "BrowserInstaller",
    "create_browser",
    "close_browser",
    "is_browser_available",
    "manual_install_instructions",

    # Error handling
    "ScrapeCheckError",
    "BrowserLaunchError",
    "InstallError",
    "InvalidUrlError",
    "ErrorClassifier",
    "ErrorCategory",
    "ErrorSeverity",
    "format_error_for_user",
    "get_error_message",
    "is_network_error",
    "is_timeout_error",
]
