"""Chromium installation via Playwright's installer."""

import logging
import subprocess
import sys
from typing import List, Optional

from .browser import is_browser_available
from .error_handling import InstallError

logger = logging.getLogger(__name__)

INSTALL_COMMAND: List[str] = [sys.executable, "-m", "playwright", "install", "chromium"]

INSTALL_DOCS_URL = "https://playwright.dev/python/docs/browsers#install-browsers"


def manual_install_instructions() -> str:
    """Instructions shown when the browser is missing."""
    return (
        "Scrapeability requires Chromium to be installed.\n\n"
        "To install manually, run:\n"
        "  python -m playwright install chromium\n\n"
        f"See {INSTALL_DOCS_URL} for details."
    )


class BrowserInstaller:
    """Checks for and installs the Chromium browser.

    The result of the availability check is kept on the instance so that a
    long-running caller checks once.
    """

    def __init__(self, command: Optional[List[str]] = None, timeout: float = 600.0):
        self.command = list(command or INSTALL_COMMAND)
        self.timeout = timeout
        self.check_performed = False
        self.available = False

    async def ensure_browser_installed(self, auto_install: bool = False) -> bool:
        """
        Make sure Chromium can be launched.

        Args:
            auto_install: Install the browser when it is missing

        Returns:
            True if the browser is available after this call
        """
        if self.check_performed and self.available:
            return True

        self.available = await is_browser_available()
        self.check_performed = True
        if self.available:
            return True

        if not auto_install:
            logger.warning("Chromium browser is not installed")
            return False

        try:
            self.install_browser()
        except InstallError as e:
            logger.error(str(e))
            return False

        self.available = await is_browser_available()
        if not self.available:
            logger.error(
                "Chromium installation completed but browser is not available. "
                "Try running 'python -m playwright install chromium' manually."
            )
        return self.available

    def install_browser(self) -> None:
        """
        Run the Playwright installer for Chromium.

        Raises:
            InstallError: When the installer fails or cannot be run
        """
        logger.info(f"Installing Chromium: {' '.join(self.command)}")
        try:
            subprocess.run(
                self.command,
                check=True,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.CalledProcessError as e:
            raise InstallError(
                f"Failed to install Chromium: {(e.stderr or '').strip() or e}",
                original_error=e,
            ) from e
        except (OSError, subprocess.TimeoutExpired) as e:
            raise InstallError(f"Failed to install Chromium: {e}", original_error=e) from e
        logger.info("Chromium installed successfully")

    def reset(self) -> None:
        """Forget the result of the last availability check."""
        self.check_performed = False
        self.available = False
