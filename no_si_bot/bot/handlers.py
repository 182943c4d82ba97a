"""Telegram bot handlers.

Every new message goes through ``route_message``: replies to the bot's own
messages get a reaction, everything else is scanned for YouTube links
carrying the ``si`` tracking parameter.
"""

import logging

from telegram import Message, ReactionTypeEmoji, Update
from telegram.ext import ContextTypes

from ..config import BotConfig
from ..errors import MessageProcessingError
from ..services.tracking import url_without_si
from .messages import THANK_REACTION_EMOJI
from .response_formatter import response_formatter
from .sender import SEND_RETRY_LIMIT, send_message_retrying
from .url_processor import url_processor

logger = logging.getLogger(__name__)


def is_reply_to_bot(message: Message, bot_id: int) -> bool:
    """Check whether a message replies to a message sent by the bot.

    Args:
        message: Incoming message.
        bot_id: Telegram user id of the bot.
    """
    origin = message.reply_to_message
    if origin is None or origin.from_user is None:
        return False
    return origin.from_user.id == bot_id


async def route_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Dispatch a new message to the reaction or the link cleanup handler."""
    message = update.message
    if message is None:
        return

    if is_reply_to_bot(message, context.bot.id):
        await thank_react(update, context)
    else:
        await remove_si(update, context)


async def remove_si(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Reply with copies of the message's YouTube links without tracking.

    Sends nothing when the message has no YouTube links with an ``si``
    parameter.

    Args:
        update: Telegram update object containing message data.
        context: Bot context for accessing the bot and its configuration.

    Raises:
        MessageProcessingError: If the message has no chat to reply to.
    """
    message = update.message
    if message is None:
        return

    chat = update.effective_chat
    if chat is None:
        raise MessageProcessingError("Failed to get chat id")

    urls = url_processor.extract_urls(message)
    cleaned_urls = [cleaned for cleaned in map(url_without_si, urls) if cleaned is not None]

    response = response_formatter.format_cleaned_links(cleaned_urls)
    if response is None:
        logger.debug("No youtube urls with si found")
        return

    config: BotConfig | None = context.bot_data.get("config")
    retry_limit = config.send_retry_limit if config is not None else SEND_RETRY_LIMIT

    await send_message_retrying(context.bot, chat.id, message.message_id, response, retry_limit)
    logger.info("Sent %d cleaned link(s) to chat %s", len(cleaned_urls), chat.id)


async def thank_react(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """React to a reply to one of the bot's messages."""
    message = update.message
    if message is None:
        return

    chat = update.effective_chat
    if chat is None:
        raise MessageProcessingError("No chat id for message")

    logger.info("Reacting to a reply")
    await context.bot.set_message_reaction(
        chat_id=chat.id,
        message_id=message.message_id,
        reaction=[ReactionTypeEmoji(emoji=THANK_REACTION_EMOJI)],
    )
