"""Application settings and configuration management."""

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..models.schemas import CheckOptions, DetectionToggles, ScreenshotFormat, Viewport


class AppSettings(BaseSettings):
    """Application configuration settings.

    Every field can be set from the environment with the ``SCRAPEABILITY_``
    prefix, e.g. ``SCRAPEABILITY_BROWSER_TIMEOUT=60000``.
    """

    model_config = SettingsConfigDict(
        env_prefix="SCRAPEABILITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Browser Configuration
    browser_timeout: int = Field(default=30000, description="Navigation timeout in ms")
    viewport_width: int = Field(default=1280)
    viewport_height: int = Field(default=720)
    user_agent: Optional[str] = Field(default=None)

    # Screenshot Configuration
    screenshot_enabled: bool = Field(default=True)
    screenshot_path: str = Field(default="./scrapeability-screenshots")
    screenshot_format: ScreenshotFormat = Field(default=ScreenshotFormat.PNG)
    screenshot_quality: int = Field(default=90)

    # Diagnostics Configuration
    check_console_errors: bool = Field(default=True)

    # Detection Configuration
    detect_anti_bot: bool = Field(default=True)
    detect_rate_limit: bool = Field(default=True)
    detect_robots_txt: bool = Field(default=True)
    detect_authentication: bool = Field(default=True)
    auth_min_indicators: int = Field(default=2)

    # Server Configuration
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000)
    max_concurrent_checks: int = Field(default=3)

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)

    @field_validator("browser_timeout")
    @classmethod
    def validate_browser_timeout(cls, v):
        """Validate navigation timeout."""
        if v < 5000:
            raise ValueError("Browser timeout must be at least 5000ms")
        if v > 300000:
            raise ValueError("Browser timeout should not exceed 300000ms")
        return v

    @field_validator("viewport_width")
    @classmethod
    def validate_viewport_width(cls, v):
        """Validate viewport width."""
        if v < 320:
            raise ValueError("Viewport width must be at least 320px")
        if v > 7680:
            raise ValueError("Viewport width should not exceed 7680px")
        return v

    @field_validator("viewport_height")
    @classmethod
    def validate_viewport_height(cls, v):
        """Validate viewport height."""
        if v < 240:
            raise ValueError("Viewport height must be at least 240px")
        if v > 4320:
            raise ValueError("Viewport height should not exceed 4320px")
        return v

    @field_validator("user_agent")
    @classmethod
    def validate_user_agent(cls, v):
        """Treat a blank user agent as unset."""
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("screenshot_path")
    @classmethod
    def validate_screenshot_path(cls, v):
        """Screenshot path cannot be empty."""
        if not v or not v.strip():
            raise ValueError("Screenshot path cannot be empty")
        return v

    @field_validator("screenshot_quality")
    @classmethod
    def validate_screenshot_quality(cls, v):
        """Validate JPEG quality."""
        if not 0 <= v <= 100:
            raise ValueError("screenshot_quality must be between 0 and 100")
        return v

    @field_validator("auth_min_indicators")
    @classmethod
    def validate_auth_min_indicators(cls, v):
        """Validate the weak-signal authentication threshold."""
        if v < 1:
            raise ValueError("auth_min_indicators must be at least 1")
        if v > 10:
            raise ValueError("auth_min_indicators should not exceed 10")
        return v

    @field_validator("max_concurrent_checks")
    @classmethod
    def validate_max_concurrent_checks(cls, v):
        """Validate concurrent check limit."""
        if v < 1:
            raise ValueError("max_concurrent_checks must be at least 1")
        if v > 20:
            raise ValueError("max_concurrent_checks should not exceed 20")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    def get_log_file_path(self) -> Optional[Path]:
        """Get log file path."""
        if not self.log_file:
            return None
        return Path(self.log_file)

    def get_detection_toggles(self) -> DetectionToggles:
        """Get the detector enable map."""
        return DetectionToggles(
            anti_bot=self.detect_anti_bot,
            rate_limit=self.detect_rate_limit,
            robots_txt=self.detect_robots_txt,
            authentication=self.detect_authentication,
        )

    def get_check_options(self, **overrides: Any) -> CheckOptions:
        """
        Build immutable check options from these settings.

        Args:
            **overrides: CheckOptions fields that replace the configured values

        Returns:
            Validated CheckOptions
        """
        values: Dict[str, Any] = {
            "timeout": self.browser_timeout,
            "viewport": Viewport(width=self.viewport_width, height=self.viewport_height),
            "user_agent": self.user_agent,
            "screenshot_enabled": self.screenshot_enabled,
            "screenshot_path": self.screenshot_path,
            "screenshot_format": self.screenshot_format,
            "screenshot_quality": self.screenshot_quality,
            "check_console_errors": self.check_console_errors,
            "detections": self.get_detection_toggles(),
            "auth_min_indicators": self.auth_min_indicators,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return CheckOptions(**values)

    def get_server_config(self) -> dict:
        """Get configuration dict for the HTTP API server."""
        return {
            "host": self.host,
            "port": self.port,
            "max_concurrent_checks": self.max_concurrent_checks,
        }


@lru_cache()
def get_settings() -> AppSettings:
    """Get application settings (cached)."""
    return AppSettings()
