"""robots.txt fetching and simplified policy parsing."""

import logging
import re
from typing import List, Optional
from urllib.parse import ParseResult, quote, urlparse

import httpx

from .. import __version__
from ..models.schemas import RobotsTxtInfo

logger = logging.getLogger(__name__)

ROBOTS_TIMEOUT = 5.0
ROBOTS_USER_AGENT = f"Scrapeability/{__version__} (+robots check)"

_LEADING_INT = re.compile(r"^[+-]?\d+")

# Characters left unescaped in a URL path, as browsers do
PATH_SAFE_CHARS = "/%!$&'()*+,;=:@"


def url_origin(parsed: ParseResult) -> str:
    """Scheme, host and port of a parsed URL, without any credentials."""
    host = parsed.hostname
    if ":" in host:
        host = f"[{host}]"
    port = parsed.port
    if port is None:
        return f"{parsed.scheme}://{host}"
    return f"{parsed.scheme}://{host}:{port}"


async def fetch_robots_txt(
    url: str,
    http_client: Optional[httpx.AsyncClient] = None,
    timeout: float = ROBOTS_TIMEOUT,
) -> RobotsTxtInfo:
    """
    Fetch and summarise robots.txt for the origin of ``url``.

    Any failure to obtain the file (bad URL, network error, timeout,
    non-2xx status) is reported as a missing robots.txt that allows crawling.

    Args:
        url: Page URL being checked
        http_client: Optional client to reuse; a short-lived one is created otherwise
        timeout: Request timeout in seconds, independent of page navigation

    Returns:
        RobotsTxtInfo describing the policy for the page's path
    """
    try:
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            raise ValueError(f"Cannot derive robots.txt location from URL: {url}")

        robots_url = f"{url_origin(parsed)}/robots.txt"
        headers = {"User-Agent": ROBOTS_USER_AGENT}

        if http_client is not None:
            response = await http_client.get(robots_url, headers=headers, timeout=timeout)
        else:
            async with httpx.AsyncClient(follow_redirects=True) as client:
                response = await client.get(robots_url, headers=headers, timeout=timeout)

        if not response.is_success:
            logger.debug(f"No robots.txt for {robots_url} (status: {response.status_code})")
            return RobotsTxtInfo(exists=False)

        content = response.text
    except Exception as e:
        logger.warning(f"Error fetching robots.txt for {url}: {e}")
        return RobotsTxtInfo(exists=False)

    return parse_robots_txt(content, quote(parsed.path or "/", safe=PATH_SAFE_CHARS))


def parse_robots_txt(content: str, pathname: str) -> RobotsTxtInfo:
    """
    Parse robots.txt content into a coarse allow/deny summary for ``pathname``.

    Only groups addressed to every user agent (``User-agent: *``) are honoured.
    ``Allow`` lines are recognised but not applied against ``Disallow`` rules.
    """
    try:
        disallowed_paths: List[str] = []
        crawl_delay: Optional[int] = None
        sitemap: Optional[str] = None
        applies_to_all = False

        for line in content.splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            directive, sep, value = line.partition(":")
            if not sep:
                continue
            directive = directive.strip().lower()
            value = value.strip()

            if directive == "user-agent":
                applies_to_all = value == "*"
            elif directive == "disallow":
                if applies_to_all and value:
                    disallowed_paths.append(value)
            elif directive == "allow":
                # Recognised, not applied
                pass
            elif directive == "crawl-delay":
                if applies_to_all:
                    match = _LEADING_INT.match(value)
                    if match:
                        crawl_delay = int(match.group())
            elif directive == "sitemap":
                sitemap = value

        return RobotsTxtInfo(
            exists=True,
            allows_crawling=not is_path_disallowed(pathname, disallowed_paths),
            crawl_delay=crawl_delay,
            disallowed_paths=tuple(disallowed_paths),
            sitemap=sitemap,
        )
    except Exception as e:
        logger.error(f"Error parsing robots.txt: {e}")
        return RobotsTxtInfo(exists=True, allows_crawling=True)


def is_path_disallowed(pathname: str, disallowed_paths) -> bool:
    """Simple prefix match against Disallow values, no wildcard expansion."""
    return any(pathname.startswith(prefix) for prefix in disallowed_paths)
