"""Heuristic detectors and their concurrent aggregation."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from playwright.async_api import Page, Response

from ..models.schemas import CheckOptions, DetectionResults
from .antibot import detect_anti_bot_measures
from .authentication import detect_authentication_wall
from .ratelimit import detect_rate_limiting
from .robotstxt import fetch_robots_txt, parse_robots_txt

logger = logging.getLogger(__name__)


async def _guarded(name: str, detector: Callable[[], Awaitable[Any]]) -> Tuple[str, Optional[Any]]:
    """Run one detector, turning its failure into a missing result."""
    try:
        return name, await detector()
    except Exception as e:
        logger.error(f"{name} detection failed: {e}")
        return name, None


async def run_detections(
    page: Page,
    response: Optional[Response],
    url: str,
    options: CheckOptions,
) -> DetectionResults:
    """
    Run every enabled detector concurrently against the same page.

    Detectors only read from the page and response. A detector that raises
    is logged and left out of the result; the others are unaffected.

    Args:
        page: Loaded Playwright page
        response: Response of the main navigation, if any
        url: URL that was checked
        options: Check options holding the detector toggles

    Returns:
        DetectionResults with one entry per detector that completed
    """
    toggles = options.detections
    branches: List[Awaitable[Tuple[str, Optional[Any]]]] = []

    if toggles.rate_limit:
        async def rate_limit():
            return detect_rate_limiting(response)
        branches.append(_guarded("rate_limit", rate_limit))

    if toggles.anti_bot:
        branches.append(_guarded(
            "anti_bot", lambda: detect_anti_bot_measures(page, response)
        ))

    if toggles.authentication:
        async def authentication():
            status_code = response.status if response is not None else None
            return await detect_authentication_wall(
                page, status_code, min_indicators=options.auth_min_indicators
            )
        branches.append(_guarded("authentication", authentication))

    if toggles.robots_txt:
        branches.append(_guarded("robots_txt", lambda: fetch_robots_txt(url)))

    if not branches:
        return DetectionResults()

    settled = await asyncio.gather(*branches)
    results: Dict[str, Any] = {name: result for name, result in settled if result is not None}
    return DetectionResults(**results)


__all__ = [
    "run_detections",
    "detect_anti_bot_measures",
    "detect_authentication_wall",
    "detect_rate_limiting",
    "fetch_robots_txt",
    "parse_robots_txt",
]
