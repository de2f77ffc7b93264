"""URL validation and processing utilities."""

import re
from datetime import date
from typing import Optional
from urllib.parse import urlparse

URL_PATTERN = (
    r"https?://(www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b"
    r"([-a-zA-Z0-9()@:%_+.~#?&/=]*)"
)

_URL_REGEX = re.compile(f"^{URL_PATTERN}$")
_URL_IN_TEXT = re.compile(URL_PATTERN)


def is_valid_url(url: str) -> bool:
    """Check that a string is an http(s) URL with a host."""
    if not url or not isinstance(url, str):
        return False

    trimmed = url.strip()
    if any(c.isspace() for c in trimmed):
        return False

    try:
        parsed = urlparse(trimmed)
    except ValueError:
        return bool(_URL_REGEX.match(trimmed))

    if parsed.scheme in ("http", "https") and parsed.netloc:
        return True
    return bool(_URL_REGEX.match(trimmed))


def normalize_url(url: str) -> str:
    """Add an https scheme when the URL has none."""
    trimmed = url.strip()
    if trimmed.startswith(("http://", "https://")):
        return trimmed
    return f"https://{trimmed}"


def extract_url_from_text(text: str) -> Optional[str]:
    """Return the first URL found in free text, or None."""
    if not text:
        return None

    match = _URL_IN_TEXT.search(text)
    if match:
        return match.group(0)

    # Bare hostname such as "example.com"
    normalized = normalize_url(text)
    if is_valid_url(normalized) and "." in urlparse(normalized).netloc:
        return normalized

    return None


def url_to_filename(url: str) -> str:
    """
    Build a filesystem-safe name from a URL.

    The hostname has its dots replaced by hyphens and is suffixed with the
    current date, e.g. ``www-example-com-2024-05-01``.
    """
    try:
        hostname = urlparse(url).hostname
        if not hostname:
            raise ValueError(f"URL has no hostname: {url}")
        return f"{hostname.replace('.', '-')}-{date.today().isoformat()}"
    except ValueError:
        return re.sub(r"[^a-z0-9]", "-", url, flags=re.IGNORECASE).lower()[:100]
