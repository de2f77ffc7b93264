"""Pydantic models for Scrapeability check options and results."""

from enum import Enum
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ScreenshotFormat(str, Enum):
    """Image format used for page screenshots."""
    PNG = "png"
    JPEG = "jpeg"


class AuthType(str, Enum):
    """Kind of authentication wall found on a page."""
    FORM = "form"
    OAUTH = "oauth"
    BASIC = "basic"
    SESSION = "session"


class FrozenModel(BaseModel):
    """Base for models that must not change after construction."""
    model_config = ConfigDict(frozen=True)


class Viewport(FrozenModel):
    """Browser viewport size in pixels."""
    width: int = Field(1280, ge=320, le=7680, description="Viewport width")
    height: int = Field(720, ge=240, le=4320, description="Viewport height")


class DetectionToggles(FrozenModel):
    """Which detectors run during a check."""
    anti_bot: bool = Field(True, description="Detect anti-bot protection vendors")
    rate_limit: bool = Field(True, description="Inspect rate limit headers")
    robots_txt: bool = Field(True, description="Fetch and parse robots.txt")
    authentication: bool = Field(True, description="Detect authentication walls")

    @property
    def any_enabled(self) -> bool:
        return self.anti_bot or self.rate_limit or self.robots_txt or self.authentication


class CheckOptions(FrozenModel):
    """Options for a single scrapeability check."""
    timeout: int = Field(30000, ge=5000, le=300000, description="Navigation timeout (ms)")
    viewport: Viewport = Field(default_factory=Viewport)
    user_agent: Optional[str] = Field(None, description="Custom user agent string")
    screenshot_enabled: bool = Field(True, description="Capture a full-page screenshot")
    screenshot_path: str = Field(
        "./scrapeability-screenshots",
        min_length=1,
        description="Directory where screenshots are written",
    )
    screenshot_format: ScreenshotFormat = Field(ScreenshotFormat.PNG)
    screenshot_quality: int = Field(90, ge=0, le=100, description="JPEG quality")
    check_console_errors: bool = Field(True, description="Capture console errors and warnings")
    detections: DetectionToggles = Field(default_factory=DetectionToggles)
    auth_min_indicators: int = Field(
        2,
        ge=1,
        le=10,
        description="Indicators needed before weak authentication signals count",
    )


class ConsoleMessage(FrozenModel):
    """A console message or uncaught error captured from the page."""
    type: Literal["error", "warning"]
    text: str
    timestamp: int = Field(..., description="Capture time in epoch milliseconds")


class AntiBotDetection(FrozenModel):
    """Anti-bot protection vendors found on a page."""
    cloudflare: bool = False
    recaptcha: bool = False
    hcaptcha: bool = False
    datadome: bool = False
    perimeter81: bool = False
    details: Tuple[str, ...] = Field(default=(), description="Evidence in detection order")

    @property
    def any_detected(self) -> bool:
        return self.cloudflare or self.recaptcha or self.hcaptcha or self.datadome or self.perimeter81


class RateLimitInfo(FrozenModel):
    """Rate limiting information taken from response headers."""
    detected: bool = False
    limit: Optional[str] = None
    remaining: Optional[str] = None
    reset: Optional[str] = None
    retry_after: Optional[str] = None


class RobotsTxtInfo(FrozenModel):
    """Summary of the site's robots.txt policy."""
    exists: bool
    allows_crawling: bool = True
    crawl_delay: Optional[int] = None
    disallowed_paths: Tuple[str, ...] = ()
    sitemap: Optional[str] = None

    @model_validator(mode="after")
    def _missing_file_allows_crawling(self):
        if not self.exists and (not self.allows_crawling or self.disallowed_paths):
            raise ValueError("a missing robots.txt cannot restrict crawling")
        return self


class AuthenticationInfo(FrozenModel):
    """Whether the page sits behind an authentication wall."""
    required: bool = False
    type: Optional[AuthType] = None
    login_url: Optional[str] = None
    indicators: Tuple[str, ...] = ()

    @model_validator(mode="after")
    def _details_only_when_required(self):
        if not self.required and (self.type is not None or self.login_url is not None):
            raise ValueError("type and login_url are only set when authentication is required")
        return self


class DetectionResults(FrozenModel):
    """Results of the detectors that ran and completed.

    A ``None`` field means the detector was disabled or failed, which is not
    the same as a detector that ran and found nothing.
    """
    anti_bot: Optional[AntiBotDetection] = None
    rate_limit: Optional[RateLimitInfo] = None
    robots_txt: Optional[RobotsTxtInfo] = None
    authentication: Optional[AuthenticationInfo] = None

    def keys(self) -> List[str]:
        """Names of the populated detector results."""
        return [name for name in type(self).model_fields if getattr(self, name) is not None]


class CheckResult(FrozenModel):
    """Outcome of one scrapeability check."""
    success: bool
    url: str
    status_code: Optional[int] = None
    title: str = ""
    load_time_ms: int = Field(..., ge=0)
    screenshot_path: Optional[str] = None
    console_errors: Tuple[str, ...] = ()
    error: Optional[str] = None
    detections: Optional[DetectionResults] = None

    @model_validator(mode="after")
    def _error_matches_outcome(self):
        if self.success and self.error is not None:
            raise ValueError("a successful check cannot carry an error")
        if not self.success:
            if self.error is None:
                raise ValueError("a failed check must carry an error message")
            if self.detections is not None:
                raise ValueError("a failed check cannot carry detections")
        return self
