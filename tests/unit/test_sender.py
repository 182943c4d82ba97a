"""Tests for reply delivery with retries."""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from telegram.error import BadRequest, Forbidden, NetworkError, RetryAfter, TimedOut

from no_si_bot.bot.sender import is_transient_error, retry_after_seconds, send_message_retrying
from no_si_bot.errors import MessageDeliveryError


def make_bot(*side_effect):
    bot = MagicMock()
    bot.send_message = AsyncMock(side_effect=list(side_effect))
    return bot


class TestErrorClassification:
    def test_network_errors_are_transient(self) -> None:
        assert is_transient_error(NetworkError("reset"))
        assert is_transient_error(TimedOut())
        assert is_transient_error(ConnectionResetError())

    def test_rejected_requests_are_not_transient(self) -> None:
        assert not is_transient_error(BadRequest("message is too long"))
        assert not is_transient_error(Forbidden("bot was blocked"))
        assert not is_transient_error(ValueError("nope"))

    def test_retry_after_accepts_seconds_and_timedelta(self) -> None:
        assert retry_after_seconds(MagicMock(retry_after=3)) == 3.0
        assert retry_after_seconds(MagicMock(retry_after=timedelta(seconds=1.5))) == 1.5


class TestSendMessageRetrying:
    @pytest.mark.asyncio
    async def test_first_success_stops(self) -> None:
        sent = MagicMock()
        bot = make_bot(sent)

        result = await send_message_retrying(bot, 1, 2, "hello")

        assert result is sent
        bot.send_message.assert_awaited_once()
        kwargs = bot.send_message.await_args.kwargs
        assert kwargs["chat_id"] == 1
        assert kwargs["text"] == "hello"
        assert kwargs["reply_parameters"].message_id == 2

    @pytest.mark.asyncio
    async def test_network_errors_are_retried_without_delay(self) -> None:
        sent = MagicMock()
        bot = make_bot(NetworkError("reset"), TimedOut(), sent)

        with patch("no_si_bot.bot.sender.asyncio.sleep", new_callable=AsyncMock) as sleep:
            result = await send_message_retrying(bot, 1, 2, "hello")

        assert result is sent
        assert bot.send_message.await_count == 3
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rate_limit_waits_requested_delay(self) -> None:
        sent = MagicMock()
        bot = make_bot(RetryAfter(7), sent)

        with patch("no_si_bot.bot.sender.asyncio.sleep", new_callable=AsyncMock) as sleep:
            result = await send_message_retrying(bot, 1, 2, "hello")

        assert result is sent
        sleep.assert_awaited_once_with(7.0)

    @pytest.mark.asyncio
    async def test_other_errors_are_not_retried(self) -> None:
        bot = make_bot(BadRequest("chat not found"), MagicMock())

        with pytest.raises(BadRequest):
            await send_message_retrying(bot, 1, 2, "hello")

        bot.send_message.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_gives_up_after_retry_limit(self) -> None:
        errors = [NetworkError(f"reset {i}") for i in range(20)]
        bot = make_bot(*errors)

        with pytest.raises(MessageDeliveryError) as exc_info:
            await send_message_retrying(bot, 1, 2, "hello")

        assert bot.send_message.await_count == 20
        assert exc_info.value.__cause__ is errors[-1]

    @pytest.mark.asyncio
    async def test_rate_limits_count_towards_the_limit(self) -> None:
        bot = make_bot(RetryAfter(1), NetworkError("reset"), RetryAfter(1))

        with patch("no_si_bot.bot.sender.asyncio.sleep", new_callable=AsyncMock) as sleep:
            with pytest.raises(MessageDeliveryError):
                await send_message_retrying(bot, 1, 2, "hello", retry_limit=3)

        assert bot.send_message.await_count == 3
        assert sleep.await_count == 2
