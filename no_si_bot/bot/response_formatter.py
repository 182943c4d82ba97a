"""Response formatting for cleaned link replies."""

import logging
from collections.abc import Iterable

from .messages import MULTIPLE_LINKS_HEADER, SINGLE_LINK_HEADER

logger = logging.getLogger(__name__)


class ResponseFormatter:
    """Formats bot replies listing cleaned links."""

    def format_cleaned_links(self, urls: Iterable[str]) -> str | None:
        """Format the reply listing cleaned links.

        Args:
            urls: Cleaned URLs in the order they appeared in the message.

        Returns:
            Reply text with a singular or plural header followed by one URL
            per line, or None if there is nothing to send.
        """
        links = list(urls)
        if not links:
            return None

        header = MULTIPLE_LINKS_HEADER if len(links) > 1 else SINGLE_LINK_HEADER
        lines = [header, *links]
        return "\n".join(lines) + "\n"


response_formatter = ResponseFormatter()
