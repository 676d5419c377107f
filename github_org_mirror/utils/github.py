"""Contains utility functions for GitHub interactions."""

from typing import Mapping
from urllib.parse import parse_qs, urlparse


def next_page_from_links(links: Mapping[str, Mapping[str, str]]) -> int | None:
    """Return the page number of the ``next`` link of a response.

    ``links`` is the Link header as parsed by httpx (``Response.links``),
    keyed by relation. Returns None when there is no next link, or the next
    link has no usable ``page`` query parameter.
    """
    next_link = links.get("next")
    if not next_link or not next_link.get("url"):
        return None
    page_values = parse_qs(urlparse(next_link["url"]).query).get("page")
    if not page_values:
        return None
    try:
        return int(page_values[0])
    except ValueError:
        return None


def is_rate_limit_response(status_code: int, headers: dict[str, str] | None, message: str) -> bool:
    """Decide whether a failed GitHub response is a rate limit rejection."""
    if status_code not in (403, 429):
        return False
    if status_code == 429:
        return True
    if headers and headers.get("x-ratelimit-remaining") == "0":
        return True
    return "rate limit" in message.lower()
