"""
Scrapeability - check whether a web page can be reliably scraped.

Loads a page in a headless browser, measures reachability and timing, and
detects anti-bot shields, rate limiting, robots.txt restrictions and
authentication walls.
"""

__version__ = "0.1.0"

# Make configuration easily accessible
from .config import get_settings

__all__ = ["get_settings"]
