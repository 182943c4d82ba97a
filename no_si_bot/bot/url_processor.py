"""URL extraction from Telegram messages.

Collects the links a message refers to, both explicit ``text_link``
entities and plain ``url`` spans inside the message text. Malformed
entities are logged and skipped so one bad span never hides the others.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Final
from urllib.parse import urlsplit

from telegram import Message, MessageEntity

logger = logging.getLogger(__name__)

DEFAULT_SCHEME: Final[str] = "https://"


def parse_entity_url(text: str) -> str | None:
    """Parse a URL entity string as an absolute URL.

    Telegram marks bare domains such as ``youtu.be/abc`` as URLs, so a
    string without a scheme is retried with ``https://`` in front.

    Args:
        text: The URL span sliced from the message.

    Returns:
        The absolute URL, or None if it could not be parsed.
    """
    for candidate in (text, f"{DEFAULT_SCHEME}{text}"):
        try:
            parts = urlsplit(candidate)
        except ValueError as e:
            logger.warning("Failed to parse the url from the entity %r: %s", text, e)
            return None

        if parts.scheme:
            return parts.geturl()

    logger.warning("Failed to parse the url from the entity %r: no scheme", text)
    return None


def slice_entity_text(text: str, entity: MessageEntity) -> str | None:
    """Cut the entity span out of the message text.

    Entity offsets and lengths are counted in UTF-16 code units.

    Returns:
        The span, or None if the entity lies outside the text.
    """
    encoded = text.encode("utf-16-le")
    start = entity.offset * 2
    end = start + entity.length * 2

    if entity.offset < 0 or entity.length < 0 or end > len(encoded):
        return None

    try:
        return encoded[start:end].decode("utf-16-le")
    except UnicodeDecodeError:
        return None


class URLProcessor:
    """Extracts URLs from message entities."""

    def extract_urls(self, message: Message) -> Iterator[str]:
        """Yield URLs referenced by a message, in entity order.

        Args:
            message: Incoming Telegram message.

        Yields:
            Absolute URL strings. Duplicates are kept.
        """
        text = message.text
        entities = message.entities
        if not text or not entities:
            return

        logger.debug("Parsing urls from %r with entities %s", text, entities)

        for entity in entities:
            if entity.type == MessageEntity.TEXT_LINK:
                if entity.url:
                    yield entity.url
            elif entity.type == MessageEntity.URL:
                span = slice_entity_text(text, entity)
                if span is None:
                    logger.warning("Failed to slice the URL entity from the message")
                    continue

                url = parse_entity_url(span)
                if url is not None:
                    yield url


url_processor = URLProcessor()
