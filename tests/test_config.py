"""Tests for configuration management."""

import os
import pytest
from unittest.mock import patch
from pydantic import ValidationError

from scrapeability.config.settings import AppSettings, get_settings
from scrapeability.models.schemas import DetectionToggles, ScreenshotFormat


class TestAppSettings:
    """Test application settings and validation."""

    def test_default_settings(self):
        """Test default configuration values."""
        settings = AppSettings()

        assert settings.browser_timeout == 30000
        assert settings.viewport_width == 1280
        assert settings.viewport_height == 720
        assert settings.user_agent is None
        assert settings.screenshot_enabled is True
        assert settings.screenshot_format == ScreenshotFormat.PNG
        assert settings.check_console_errors is True
        assert settings.auth_min_indicators == 2
        assert settings.host == "127.0.0.1"
        assert settings.port == 8000
        assert settings.log_level == "INFO"

    def test_environment_override(self):
        """Test environment variable overrides."""
        with patch.dict(os.environ, {
            'SCRAPEABILITY_BROWSER_TIMEOUT': '60000',
            'SCRAPEABILITY_SCREENSHOT_FORMAT': 'jpeg',
            'SCRAPEABILITY_DETECT_ROBOTS_TXT': 'false',
            'SCRAPEABILITY_PORT': '9000',
            'SCRAPEABILITY_LOG_LEVEL': 'debug',
        }):
            settings = AppSettings()

            assert settings.browser_timeout == 60000
            assert settings.screenshot_format == ScreenshotFormat.JPEG
            assert settings.detect_robots_txt is False
            assert settings.port == 9000
            assert settings.log_level == "DEBUG"

    def test_unprefixed_environment_ignored(self):
        """Only SCRAPEABILITY_ variables are read."""
        with patch.dict(os.environ, {'PORT': '9999'}):
            assert AppSettings().port == 8000

    @pytest.mark.parametrize("variable,value", [
        ('SCRAPEABILITY_BROWSER_TIMEOUT', '1000'),
        ('SCRAPEABILITY_BROWSER_TIMEOUT', '999999'),
        ('SCRAPEABILITY_VIEWPORT_WIDTH', '100'),
        ('SCRAPEABILITY_VIEWPORT_HEIGHT', '10000'),
        ('SCRAPEABILITY_SCREENSHOT_QUALITY', '150'),
        ('SCRAPEABILITY_SCREENSHOT_PATH', '  '),
        ('SCRAPEABILITY_AUTH_MIN_INDICATORS', '0'),
        ('SCRAPEABILITY_MAX_CONCURRENT_CHECKS', '50'),
        ('SCRAPEABILITY_LOG_LEVEL', 'INVALID'),
    ])
    def test_validation_errors(self, variable, value):
        """Test configuration validation."""
        with patch.dict(os.environ, {variable: value}):
            with pytest.raises(ValidationError):
                AppSettings()

    def test_timeout_error_message(self):
        """Bounds errors explain the limit."""
        with pytest.raises(ValidationError, match="at least 5000ms"):
            AppSettings(browser_timeout=100)

    def test_blank_user_agent_is_unset(self):
        """A blank user agent falls back to the browser default."""
        assert AppSettings(user_agent="   ").user_agent is None

    def test_log_file_path(self):
        """Log file path is only set when configured."""
        assert AppSettings().get_log_file_path() is None
        assert AppSettings(log_file="logs/app.log").get_log_file_path().name == "app.log"

    def test_get_settings_cached(self):
        """Test settings caching."""
        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2


class TestCheckOptionsFromSettings:
    """Test building check options from settings."""

    def test_mapping(self):
        """Settings map onto the check option fields."""
        settings = AppSettings(
            browser_timeout=45000,
            viewport_width=1920,
            viewport_height=1080,
            user_agent="TestBot/1.0",
            screenshot_path="/tmp/shots",
            detect_anti_bot=False,
            auth_min_indicators=3,
        )

        options = settings.get_check_options()

        assert options.timeout == 45000
        assert options.viewport.width == 1920
        assert options.viewport.height == 1080
        assert options.user_agent == "TestBot/1.0"
        assert options.screenshot_path == "/tmp/shots"
        assert options.detections.anti_bot is False
        assert options.detections.rate_limit is True
        assert options.auth_min_indicators == 3

    def test_overrides(self):
        """Explicit overrides win; None means keep the configured value."""
        toggles = DetectionToggles(robots_txt=False)

        options = AppSettings().get_check_options(
            timeout=10000,
            screenshot_enabled=None,
            detections=toggles,
        )

        assert options.timeout == 10000
        assert options.screenshot_enabled is True
        assert options.detections == toggles

    def test_invalid_override(self):
        """Overrides are validated like any other option."""
        with pytest.raises(ValidationError):
            AppSettings().get_check_options(timeout=10)

    def test_detection_toggles(self):
        """Each detect_* setting controls one detector."""
        toggles = AppSettings(detect_rate_limit=False, detect_authentication=False).get_detection_toggles()

        assert toggles == DetectionToggles(rate_limit=False, authentication=False)
        assert toggles.any_enabled is True
