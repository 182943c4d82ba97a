"""Reply delivery with bounded retries.

Telegram occasionally drops connections or rate-limits the bot. Sending a
reply retries transport failures straight away and waits out rate limits
for as long as the server asks, giving up after a fixed number of attempts.
"""

import asyncio
import logging
from datetime import timedelta
from typing import Final

from telegram import Bot, Message, ReplyParameters
from telegram.error import BadRequest, NetworkError, RetryAfter

from ..errors import MessageDeliveryError
from .utils import describe_error

logger = logging.getLogger(__name__)

SEND_RETRY_LIMIT: Final[int] = 20


def is_transient_error(error: Exception) -> bool:
    """Check whether a send failure is a transport hiccup worth retrying.

    ``BadRequest`` derives from ``NetworkError`` in python-telegram-bot but
    signals a rejected request, so it is not transient.
    """
    if isinstance(error, BadRequest):
        return False
    return isinstance(error, (NetworkError, OSError))


def retry_after_seconds(error: RetryAfter) -> float:
    """Return the server-mandated delay of a rate-limit error in seconds."""
    delay = error.retry_after
    if isinstance(delay, timedelta):
        return delay.total_seconds()
    return float(delay)


async def send_message_retrying(
    bot: Bot,
    chat_id: int,
    reply_to: int,
    text: str,
    retry_limit: int = SEND_RETRY_LIMIT,
) -> Message:
    """Send a reply, retrying transient failures.

    Args:
        bot: Bot used to call the Telegram API.
        chat_id: Chat to send the reply to.
        reply_to: Identifier of the message being replied to.
        text: Reply text.
        retry_limit: Maximum number of attempts.

    Returns:
        The sent message.

    Raises:
        MessageDeliveryError: If every attempt failed with a retryable error.
        TelegramError: Any non-retryable error, re-raised as is.
    """
    last_error: Exception | None = None

    for attempt in range(1, retry_limit + 1):
        try:
            return await bot.send_message(
                chat_id=chat_id,
                text=text,
                reply_parameters=ReplyParameters(message_id=reply_to),
            )
        except RetryAfter as e:
            delay = retry_after_seconds(e)
            logger.warning(
                "Error while sending message (attempt %d/%d), retrying after %.1fs: %s",
                attempt,
                retry_limit,
                delay,
                describe_error(e),
            )
            last_error = e
            await asyncio.sleep(delay)
        except Exception as e:
            if not is_transient_error(e):
                raise

            logger.warning(
                "Error while sending message (attempt %d/%d), retrying: %s",
                attempt,
                retry_limit,
                describe_error(e),
            )
            last_error = e

    raise MessageDeliveryError(
        f"Failed to send message to chat {chat_id} after {retry_limit} attempts"
    ) from last_error
