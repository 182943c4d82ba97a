"""Global test configuration and fixtures.

Provides an isolated environment for every test and builders for real
Telegram message objects with correctly computed entity offsets.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from telegram import Chat, Message, MessageEntity, Update, User

TEST_BOT_TOKEN = "123456:test_bot_token_placeholder"
TEST_BOT_ID = 4242
TEST_CHAT_ID = -100123
TEST_USER_ID = 777


@pytest.fixture(autouse=True)
def test_environment(monkeypatch):
    """Setup test environment variables for all tests."""
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", TEST_BOT_TOKEN)
    for key in ("SEND_RETRY_LIMIT", "FORCED_SHUTDOWN_TIMEOUT", "LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)


def utf16_len(text: str) -> int:
    """Length of a string in UTF-16 code units, as Telegram counts it."""
    return len(text.encode("utf-16-le")) // 2


def url_entity(text: str, url: str) -> MessageEntity:
    """Build a ``url`` entity covering the first occurrence of ``url``."""
    index = text.index(url)
    return MessageEntity(
        type=MessageEntity.URL,
        offset=utf16_len(text[:index]),
        length=utf16_len(url),
    )


def text_link_entity(text: str, label: str, url: str) -> MessageEntity:
    """Build a ``text_link`` entity over ``label`` pointing at ``url``."""
    index = text.index(label)
    return MessageEntity(
        type=MessageEntity.TEXT_LINK,
        offset=utf16_len(text[:index]),
        length=utf16_len(label),
        url=url,
    )


def make_message(
    text: str | None = None,
    entities: list[MessageEntity] | None = None,
    reply_to_user_id: int | None = None,
    message_id: int = 10,
) -> Message:
    """Build an incoming group message."""
    chat = Chat(id=TEST_CHAT_ID, type=Chat.SUPERGROUP)
    date = datetime(2024, 1, 1, tzinfo=timezone.utc)

    reply_to_message = None
    if reply_to_user_id is not None:
        reply_to_message = Message(
            message_id=message_id - 1,
            date=date,
            chat=chat,
            from_user=User(id=reply_to_user_id, first_name="Origin", is_bot=False),
            text="original",
        )

    return Message(
        message_id=message_id,
        date=date,
        chat=chat,
        from_user=User(id=TEST_USER_ID, first_name="Tester", is_bot=False),
        text=text,
        entities=entities,
        reply_to_message=reply_to_message,
    )


def make_update(message: Message) -> Update:
    return Update(update_id=1, message=message)


@pytest.fixture
def bot_context():
    """Handler context with a mocked bot."""
    context = MagicMock()
    context.bot = AsyncMock()
    context.bot.id = TEST_BOT_ID
    context.bot_data = {}
    return context
