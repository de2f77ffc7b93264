"""Rate limiting detection from HTTP response headers."""

import logging
from typing import Mapping, Optional

from playwright.async_api import Response

from ..models.schemas import RateLimitInfo

logger = logging.getLogger(__name__)

# (field, header names in order of precedence)
RATE_LIMIT_HEADERS = (
    ("limit", ("x-ratelimit-limit", "ratelimit-limit")),
    ("remaining", ("x-ratelimit-remaining", "ratelimit-remaining")),
    ("reset", ("x-ratelimit-reset", "ratelimit-reset")),
    ("retry_after", ("retry-after",)),
)


def _first_header(headers: Mapping[str, str], names) -> Optional[str]:
    for name in names:
        value = headers.get(name)
        if value:
            return value
    return None


def detect_rate_limiting(response: Optional[Response]) -> RateLimitInfo:
    """
    Read rate limit information from a navigation response.

    Args:
        response: Playwright response of the main navigation, if any

    Returns:
        RateLimitInfo with ``detected`` set when any rate limit header is present
    """
    if response is None:
        return RateLimitInfo(detected=False)

    try:
        headers = response.headers
        values = {
            field: _first_header(headers, names)
            for field, names in RATE_LIMIT_HEADERS
        }
    except Exception as e:
        logger.warning(f"Error reading rate limit headers: {e}")
        return RateLimitInfo(detected=False)

    if not any(values.values()):
        return RateLimitInfo(detected=False)

    return RateLimitInfo(detected=True, **values)
