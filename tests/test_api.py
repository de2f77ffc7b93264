"""Tests for FastAPI endpoints."""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock, patch

from scrapeability import __version__
from scrapeability.api.main import app
from scrapeability.core import BrowserLaunchError, BrowserManager
from scrapeability.models.schemas import CheckResult, DetectionResults, RateLimitInfo


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def mock_browser():
    """Patch the shared browser so no Chromium is launched."""
    with patch("scrapeability.api.main.get_browser", new=AsyncMock(return_value=MagicMock())) as get_browser:
        yield get_browser


class TestAPIEndpoints:
    """Test FastAPI endpoint functionality."""

    def test_root_endpoint(self, client):
        """Test root endpoint returns correct information."""
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()

        assert data["name"] == "Scrapeability"
        assert data["version"] == __version__
        assert data["status"] == "running"

    def test_health_endpoint(self, client):
        """Test health check endpoint."""
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "timestamp" in data
        assert data["browser_running"] is False

    def test_health_reports_disconnected_browser(self, client):
        """A browser that lost its connection is not reported as running."""
        manager = BrowserManager()
        manager._browser = MagicMock(is_connected=MagicMock(return_value=False))

        with patch("scrapeability.api.main.browser_manager", manager):
            response = client.get("/health")

        assert response.json()["browser_running"] is False

    def test_config_endpoint(self, client):
        """Test configuration endpoint."""
        response = client.get("/config")

        assert response.status_code == 200
        data = response.json()

        for section in ["check_options", "server", "logging"]:
            assert section in data

        assert data["check_options"]["timeout"] == 30000
        assert data["check_options"]["detections"]["robots_txt"] is True
        assert data["server"]["max_concurrent_checks"] >= 1


class TestCheckEndpoint:
    """Test the check endpoint."""

    def test_successful_check(self, client, mock_browser):
        """A successful check returns the full result."""
        result = CheckResult(
            success=True,
            url="https://example.com/",
            status_code=200,
            title="Example Domain",
            load_time_ms=420,
            detections=DetectionResults(rate_limit=RateLimitInfo(detected=False)),
        )

        with patch(
            "scrapeability.api.main.check_page_scrapeability", new=AsyncMock(return_value=result)
        ) as check:
            response = client.post("/check", json={"url": "example.com", "screenshot_enabled": False})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["title"] == "Example Domain"
        assert data["detections"] == {"rate_limit": {"detected": False}}
        assert "error" not in data

        _, url, options = check.await_args.args
        assert url == "https://example.com"
        assert options.screenshot_enabled is False

    def test_failed_check_is_reported_in_body(self, client, mock_browser):
        """An unreachable page is a 200 response with success false."""
        result = CheckResult(
            success=False,
            url="https://nope.invalid/",
            title="N/A",
            load_time_ms=15,
            error="net::ERR_NAME_NOT_RESOLVED",
        )

        with patch("scrapeability.api.main.check_page_scrapeability", new=AsyncMock(return_value=result)):
            response = client.post("/check", json={"url": "https://nope.invalid/"})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is False
        assert data["error"] == "net::ERR_NAME_NOT_RESOLVED"
        assert "detections" not in data

    def test_detection_toggles_forwarded(self, client, mock_browser):
        """Requested detector toggles reach the check options."""
        result = CheckResult(success=True, url="https://example.com/", load_time_ms=1)

        with patch(
            "scrapeability.api.main.check_page_scrapeability", new=AsyncMock(return_value=result)
        ) as check:
            client.post("/check", json={
                "url": "https://example.com/",
                "detections": {"anti_bot": False, "robots_txt": False},
            })

        options = check.await_args.args[2]
        assert options.detections.anti_bot is False
        assert options.detections.robots_txt is False
        assert options.detections.rate_limit is True

    @pytest.mark.parametrize("url", ["", "not a url", "https://"])
    def test_invalid_url(self, client, mock_browser, url):
        """Invalid URLs are rejected before any browser work."""
        response = client.post("/check", json={"url": url})

        assert response.status_code == 422
        mock_browser.assert_not_called()

    def test_invalid_timeout(self, client, mock_browser):
        """Out of range options are rejected."""
        response = client.post("/check", json={"url": "https://example.com/", "timeout": 10})

        assert response.status_code == 422

    def test_browser_unavailable(self, client):
        """A browser that cannot launch yields 503."""
        with patch(
            "scrapeability.api.main.get_browser",
            new=AsyncMock(side_effect=BrowserLaunchError("Failed to launch browser. Is Chromium installed?")),
        ):
            response = client.post("/check", json={"url": "https://example.com/"})

        assert response.status_code == 503
        assert "Chromium" in response.json()["detail"]
