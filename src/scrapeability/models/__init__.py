"""Pydantic models and data schemas."""

from .schemas import (
    AntiBotDetection,
    AuthenticationInfo,
    AuthType,
    CheckOptions,
    CheckResult,
    ConsoleMessage,
    DetectionResults,
    DetectionToggles,
    RateLimitInfo,
    RobotsTxtInfo,
    ScreenshotFormat,
    Viewport,
)

__all__ = [
    "AntiBotDetection",
    "AuthenticationInfo",
    "AuthType",
    "CheckOptions",
    "CheckResult",
    "ConsoleMessage",
    "DetectionResults",
    "DetectionToggles",
    "RateLimitInfo",
    "RobotsTxtInfo",
    "ScreenshotFormat",
    "Viewport",
]
