"""Exception hierarchy for the bot.

Errors derived from ``BotError`` are expected failures: they are logged
by the dispatcher error handler and never restart it.
"""


class BotError(Exception):
    """Base class for expected bot failures."""


class ConfigurationError(BotError):
    """Raised when the bot configuration cannot be loaded."""


class MessageProcessingError(BotError):
    """Raised when an incoming message lacks data a handler needs."""


class MessageDeliveryError(BotError):
    """Raised when a reply could not be delivered within the retry limit."""
