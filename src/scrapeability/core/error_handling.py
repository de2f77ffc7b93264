"""Error types and helpers for reporting check failures."""

import logging
import time
from enum import Enum
from typing import Optional

import httpx
from playwright.async_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred"


class ErrorSeverity(Enum):
    """Classification of error severity levels."""
    LOW = "low"           # Transient, a later check may succeed
    MEDIUM = "medium"     # Site or environment problem
    HIGH = "high"         # Setup problem, checks cannot run
    CRITICAL = "critical" # Fatal


class ErrorCategory(Enum):
    """Categories of errors for user-facing reporting."""
    NETWORK = "network"           # DNS, connection refused, net:: errors
    TIMEOUT = "timeout"           # Navigation or request timeouts
    BROWSER = "browser"           # Playwright/browser failures
    INSTALL = "install"           # Browser installation problems
    VALIDATION = "validation"     # Bad input such as an invalid URL
    UNKNOWN = "unknown"           # Unclassified errors


class ScrapeCheckError(Exception):
    """Base exception for scrapeability check errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        url: Optional[str] = None,
        original_error: Optional[BaseException] = None,
    ):
        """
        Initialize check error.

        Args:
            message: Human-readable error message
            category: Error category
            severity: Error severity level
            url: URL where error occurred
            original_error: Original exception that caused this error
        """
        super().__init__(message)
        self.category = category
        self.severity = severity
        self.url = url
        self.original_error = original_error
        self.timestamp = time.time()


class BrowserLaunchError(ScrapeCheckError):
    """The browser could not be started."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('category', ErrorCategory.BROWSER)
        kwargs.setdefault('severity', ErrorSeverity.HIGH)
        super().__init__(message, **kwargs)


class InstallError(ScrapeCheckError):
    """Installing the browser binary failed."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('category', ErrorCategory.INSTALL)
        kwargs.setdefault('severity', ErrorSeverity.HIGH)
        super().__init__(message, **kwargs)


class InvalidUrlError(ScrapeCheckError):
    """The URL to check is not a valid http(s) URL."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('category', ErrorCategory.VALIDATION)
        kwargs.setdefault('severity', ErrorSeverity.LOW)
        super().__init__(message, **kwargs)


def get_error_message(error: object) -> str:
    """Safely extract a message from any raised or returned error."""
    if isinstance(error, BaseException):
        message = str(error)
        return message or type(error).__name__
    if isinstance(error, str):
        return error
    return UNKNOWN_ERROR_MESSAGE


def is_timeout_error(error: object) -> bool:
    """Check if an error is a timeout."""
    if isinstance(error, (PlaywrightTimeoutError, httpx.TimeoutException, TimeoutError)):
        return True
    message = get_error_message(error).lower()
    return "timeout" in message or "timed out" in message


def is_network_error(error: object) -> bool:
    """Check if an error is a network-level failure."""
    if isinstance(error, (httpx.NetworkError, ConnectionError)):
        return True
    message = get_error_message(error).lower()
    return any(
        marker in message
        for marker in ("net::", "network", "connection", "enotfound", "econnrefused")
    )


class ErrorClassifier:
    """Classifies exceptions into check error categories."""

    @staticmethod
    def classify_exception(exception: BaseException, url: Optional[str] = None) -> ScrapeCheckError:
        """
        Classify an exception into an appropriate ScrapeCheckError.

        Args:
            exception: Original exception
            url: URL where error occurred

        Returns:
            Classified ScrapeCheckError
        """
        if isinstance(exception, ScrapeCheckError):
            return exception

        message = get_error_message(exception)

        if is_timeout_error(exception):
            return ScrapeCheckError(
                message,
                category=ErrorCategory.TIMEOUT,
                severity=ErrorSeverity.LOW,
                url=url,
                original_error=exception,
            )
        elif is_network_error(exception):
            return ScrapeCheckError(
                message,
                category=ErrorCategory.NETWORK,
                severity=ErrorSeverity.LOW,
                url=url,
                original_error=exception,
            )
        elif isinstance(exception, PlaywrightError):
            return ScrapeCheckError(
                message,
                category=ErrorCategory.BROWSER,
                severity=ErrorSeverity.MEDIUM,
                url=url,
                original_error=exception,
            )
        else:
            return ScrapeCheckError(
                message,
                category=ErrorCategory.UNKNOWN,
                severity=ErrorSeverity.MEDIUM,
                url=url,
                original_error=exception,
            )


def format_error_for_user(error: object) -> str:
    """Format an error for display, prefixed by its kind."""
    message = get_error_message(error)

    if is_timeout_error(error):
        return f"Timeout: {message}"

    if is_network_error(error):
        return f"Network error: {message}"

    return f"Error: {message}"
