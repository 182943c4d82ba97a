"""Configuration management for the bot.

Settings are read from environment variables first and from a local
``.env`` file second. The bot token is the only required value.
"""

from pathlib import Path

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

TOKEN_ENV_VAR = "TELEGRAM_BOT_TOKEN"
DEFAULT_ENV_FILE = Path(".env")


class BotConfig(BaseSettings):
    """Main Telegram bot configuration.

    Attributes:
        bot_token: Telegram bot API token.
        send_retry_limit: Maximum attempts when sending a reply.
        forced_shutdown_timeout: Seconds to wait after the first interrupt
            before exiting forcibly.
        log_level: Root logging level name.
    """

    model_config = SettingsConfigDict(
        env_file=DEFAULT_ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    bot_token: str = Field(..., min_length=1, validation_alias=TOKEN_ENV_VAR)
    send_retry_limit: int = Field(default=20, ge=1, validation_alias="SEND_RETRY_LIMIT")
    forced_shutdown_timeout: float = Field(
        default=10.0, gt=0, validation_alias="FORCED_SHUTDOWN_TIMEOUT"
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")


def load_config(env_file: Path | str | None = DEFAULT_ENV_FILE) -> BotConfig:
    """Load the bot configuration.

    Args:
        env_file: Path to the ``.env`` file consulted after the process
            environment, None to skip it.

    Returns:
        Validated configuration.

    Raises:
        ConfigurationError: If the token is missing or a value is invalid.
    """
    try:
        return BotConfig(_env_file=env_file)
    except ValidationError as e:
        missing = {
            str(loc) for error in e.errors() if error["type"] == "missing" for loc in error["loc"]
        }
        if TOKEN_ENV_VAR in missing:
            raise ConfigurationError(
                f"Failed to find the bot token ({TOKEN_ENV_VAR}) "
                "in environment variables or the .env file"
            ) from e
        raise ConfigurationError(f"Invalid bot configuration: {e}") from e
