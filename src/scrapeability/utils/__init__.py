"""Shared helpers."""

from .url import extract_url_from_text, is_valid_url, normalize_url, url_to_filename

__all__ = [
    "extract_url_from_text",
    "is_valid_url",
    "normalize_url",
    "url_to_filename",
]
