"""YouTube share-tracking parameter removal.

YouTube appends an ``si`` query parameter to every link produced by its
share button. The helpers here detect such links and rebuild them without
the parameter while leaving every other part of the URL untouched.
"""

import logging
from typing import Final
from urllib.parse import SplitResult, unquote_plus, urlsplit, urlunsplit

logger = logging.getLogger(__name__)

YOUTUBE_DOMAINS: Final[frozenset[str]] = frozenset({"youtube.com", "www.youtube.com", "youtu.be"})
TRACKING_KEY: Final[str] = "si"


def url_without_si(url: str) -> str | None:
    """Return a copy of a YouTube URL without its ``si`` parameter.

    Args:
        url: Absolute URL string.

    Returns:
        The cleaned URL, or None if the URL is not a YouTube link or carries
        no ``si`` parameter.
    """
    try:
        parts = urlsplit(url)
    except ValueError as e:
        logger.debug("Cannot parse %r as a URL: %s", url, e)
        return None

    if not url_belongs_to_youtube(parts) or not url_has_si(parts):
        return None

    return remove_si_from_url(parts)


def url_belongs_to_youtube(parts: SplitResult) -> bool:
    """Check whether the URL host is exactly one of the YouTube domains."""
    logger.debug("Checking if %s belongs to YouTube", parts.geturl())
    return parts.hostname in YOUTUBE_DOMAINS


def url_has_si(parts: SplitResult) -> bool:
    """Check whether the raw query contains ``si`` as a whole parameter name.

    This is a substring test on the query: it must start with ``si=`` or
    contain ``&si=``.
    """
    logger.debug("Checking if %s contains an si parameter", parts.geturl())

    query = parts.query
    if not query:
        return False

    prefix = f"{TRACKING_KEY}="
    return query.startswith(prefix) or f"&{prefix}" in query


def remove_si_from_url(parts: SplitResult) -> str:
    """Rebuild the URL with every ``si`` pair dropped from the query.

    Retained pairs keep their original encoding and order. When no pairs
    remain the query is removed altogether.
    """
    logger.debug("Removing si from %s", parts.geturl())

    kept_pairs = [
        pair
        for pair in parts.query.split("&")
        if pair and unquote_plus(pair.partition("=")[0]) != TRACKING_KEY
    ]

    if not kept_pairs:
        cleaned = urlunsplit(parts._replace(query=""))
        logger.debug("URL has no other query params, cleared the query: %s", cleaned)
        return cleaned

    cleaned = urlunsplit(parts._replace(query="&".join(kept_pairs)))
    logger.debug("Restored other query params: %s", cleaned)
    return cleaned
