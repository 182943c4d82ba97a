"""Dispatcher supervision and shutdown handling.

``BotSupervisor`` owns the lifetime of the python-telegram-bot
``Application``. It runs polling until interrupted, rebuilds the
application from scratch whenever a handler crashes, and forces the
process to exit if a graceful shutdown takes too long or the user
interrupts a second time.

States::

    RUNNING -> HANDLER_PANICKED -> RUNNING       (handler crash, fresh app)
    RUNNING -> SHUTTING_DOWN -> TERMINATED       (interrupt, clean stop)
    SHUTTING_DOWN -> TERMINATED                  (second interrupt or timeout)
"""

import asyncio
import logging
import os
import signal
from collections.abc import Callable
from enum import Enum
from typing import Any

from telegram import Update
from telegram.error import InvalidToken, TelegramError
from telegram.ext import Application, ContextTypes

from .bot.utils import describe_error, panic_message
from .errors import BotError

logger = logging.getLogger(__name__)

FORCED_SHUTDOWN_TIMEOUT = 10.0
INTERRUPT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class DispatchState(str, Enum):
    """Lifecycle states of the dispatch loop."""

    RUNNING = "running"
    HANDLER_PANICKED = "handler_panicked"
    SHUTTING_DOWN = "shutting_down"
    TERMINATED = "terminated"


class BotSupervisor:
    """Runs the bot application and restarts it after handler crashes.

    Args:
        application_factory: Builds a fresh, fully configured application.
        forced_shutdown_timeout: Seconds to wait for a graceful shutdown
            after the first interrupt.
        force_exit: Called with an exit code to terminate the process.
    """

    def __init__(
        self,
        application_factory: Callable[[], Application],
        forced_shutdown_timeout: float = FORCED_SHUTDOWN_TIMEOUT,
        force_exit: Callable[[int], Any] = os._exit,
    ) -> None:
        self._application_factory = application_factory
        self.forced_shutdown_timeout = forced_shutdown_timeout
        self._force_exit = force_exit
        self.state = DispatchState.RUNNING
        self.restarts = 0
        self._wakeup: asyncio.Event | None = None
        self._forced_shutdown: asyncio.TimerHandle | None = None

    async def run(self, install_signal_handlers: bool = True) -> None:
        """Dispatch updates until shut down.

        Raises:
            InvalidToken: If Telegram rejects the bot token.
        """
        logger.info("Starting bot")
        loop = asyncio.get_running_loop()
        if install_signal_handlers:
            self._install_signal_handlers(loop)

        try:
            while self.state in (DispatchState.RUNNING, DispatchState.HANDLER_PANICKED):
                self.state = DispatchState.RUNNING
                self._wakeup = asyncio.Event()

                application = self._application_factory()
                application.add_error_handler(self.on_handler_error)

                try:
                    await self._dispatch(application, self._wakeup)
                except InvalidToken:
                    raise
                except Exception as e:
                    self._record_panic(e)

                if self.state is DispatchState.HANDLER_PANICKED:
                    self.restarts += 1
                    logger.info("Restarting dispatcher")
        finally:
            if self._forced_shutdown is not None:
                self._forced_shutdown.cancel()
            if install_signal_handlers:
                self._remove_signal_handlers(loop)
            self.state = DispatchState.TERMINATED

        logger.info("Bot stopped")

    async def _dispatch(self, application: Application, wakeup: asyncio.Event) -> None:
        async with application:
            await application.start()
            try:
                await application.updater.start_polling(allowed_updates=Update.ALL_TYPES)
                try:
                    await wakeup.wait()
                finally:
                    await application.updater.stop()
            finally:
                # waits for in-flight handlers to finish
                await application.stop()

    async def on_handler_error(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Error handler registered on every application.

        Expected failures are logged. Anything else is treated as a crash
        and restarts the dispatcher.
        """
        error = context.error
        if error is None:
            return

        if isinstance(error, (TelegramError, BotError)):
            logger.error("Handler failed: %s", describe_error(error))
            return

        self._record_panic(error)

    def _record_panic(self, error: BaseException) -> None:
        if self.state is not DispatchState.RUNNING:
            logger.error("Error while stopping the dispatcher: %s", describe_error(error))
            return

        logger.error(
            "Dispatcher panicked: %s",
            panic_message(error) or "",
            exc_info=(type(error), error, error.__traceback__),
        )
        self.state = DispatchState.HANDLER_PANICKED
        if self._wakeup is not None:
            self._wakeup.set()

    def handle_interrupt(self) -> None:
        """Begin a graceful shutdown, or force one on a repeated interrupt."""
        if self.state is DispatchState.TERMINATED:
            return

        if self.state is DispatchState.SHUTTING_DOWN:
            logger.warning("Forced shutdown initiated, exiting program...")
            self._terminate()
            return

        logger.info("^C received, press again for forced shutdown")
        self.state = DispatchState.SHUTTING_DOWN
        if self._wakeup is not None:
            self._wakeup.set()

        loop = asyncio.get_running_loop()
        self._forced_shutdown = loop.call_later(
            self.forced_shutdown_timeout, self._on_forced_shutdown_timeout
        )

    def _on_forced_shutdown_timeout(self) -> None:
        if self.state is not DispatchState.SHUTTING_DOWN:
            return
        logger.warning("Forced shutdown timeout expired, exiting program...")
        self._terminate()

    def _terminate(self) -> None:
        self.state = DispatchState.TERMINATED
        self._force_exit(0)

    def _install_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        for sig in INTERRUPT_SIGNALS:
            try:
                loop.add_signal_handler(sig, self.handle_interrupt)
            except NotImplementedError:
                logger.warning("Cannot install a handler for %s on this platform", sig.name)

    def _remove_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        for sig in INTERRUPT_SIGNALS:
            try:
                loop.remove_signal_handler(sig)
            except NotImplementedError:
                logger.debug("No handler for %s to remove", sig.name)
