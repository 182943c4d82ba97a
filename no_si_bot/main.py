"""Application entry point.

Loads the configuration, configures logging and runs the Telegram bot in
long-polling mode under the dispatcher supervisor.
"""

import asyncio
import logging

from telegram.ext import Application, MessageHandler, filters

from .bot.handlers import route_message
from .config import BotConfig, load_config
from .runtime import BotSupervisor

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Configure root logging for the process."""
    logging.basicConfig(
        format="%(asctime)s - %(levelname)s - %(message)s",
        level=level.upper(),
    )
    # httpx logs every polling request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def build_application(config: BotConfig) -> Application:
    """Create a fresh bot application with all handlers registered.

    Args:
        config: Loaded bot configuration.

    Returns:
        Application ready to be initialized and started.
    """
    application = Application.builder().token(config.bot_token).concurrent_updates(True).build()
    application.bot_data["config"] = config

    application.add_handler(MessageHandler(filters.UpdateType.MESSAGE, route_message))

    return application


def main() -> None:
    """Main application entry point.

    Raises:
        ConfigurationError: If the bot token is not configured.
    """
    config = load_config()
    configure_logging(config.log_level)

    supervisor = BotSupervisor(
        lambda: build_application(config),
        forced_shutdown_timeout=config.forced_shutdown_timeout,
    )
    asyncio.run(supervisor.run())


if __name__ == "__main__":
    main()
