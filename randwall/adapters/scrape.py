"""Markup extraction for the Wallhaven adapter.

These patterns depend on the HTML Wallhaven serves, which can change at
any time without notice. Everything here is a pure function over the page
text and reports problems as ParseError only, so a markup change surfaces
as an ordinary failed retrieval of that one adapter.
"""

import random
import re

from randwall.models import ParseError
from randwall.urlutils import encode_uri

__all__ = [
    "DETAIL_PAGE_PATTERN",
    "FULL_IMAGE_PATTERN",
    "find_detail_urls",
    "find_full_image_url",
    "pick_detail_url",
    "unique_urls",
]

DETAIL_PAGE_PATTERN = re.compile(r"https?://alpha\.wallhaven\.cc/wallpaper/[0-9]+")
# Matches up to and including the closing quote of the src attribute
FULL_IMAGE_PATTERN = re.compile(r'//wallpapers\.wallhaven\.cc/wallpapers/full/.*?"')
IMAGE_SCHEME = "http:"


def find_detail_urls(body: str) -> list[str]:
    """Return every wallpaper detail page URL of a search page, duplicates included."""
    return DETAIL_PAGE_PATTERN.findall(body)


def unique_urls(urls: list[str]) -> list[str]:
    """Drop duplicates, keeping the first occurrence order."""
    return list(dict.fromkeys(urls))


def pick_detail_url(body: str) -> str:
    """Choose one detail page of a search page, uniformly among distinct URLs.

    Raises:
        ParseError: If the page links to no wallpaper.
    """
    urls = unique_urls(find_detail_urls(body))
    if not urls:
        msg = "No wallpaper found in search results"
        raise ParseError(msg)
    return random.choice(urls)


def find_full_image_url(body: str) -> str:
    """Return the encoded full resolution image URL of a detail page.

    Raises:
        ParseError: If the page has no full resolution image link.
    """
    match = FULL_IMAGE_PATTERN.search(body)
    if not match:
        msg = "No full resolution image found on wallpaper page"
        raise ParseError(msg)
    return encode_uri(IMAGE_SCHEME + match.group(0)[:-1])
