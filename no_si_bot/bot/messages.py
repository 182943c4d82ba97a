"""Telegram bot message templates and constants.

Centralizes the user-facing text the bot sends so the wording stays
consistent between handlers and tests.
"""

# Cleaned link replies
SINGLE_LINK_HEADER = "The link without tracking:"
MULTIPLE_LINKS_HEADER = "The links without tracking:"

# Reaction set on replies to the bot's own messages
THANK_REACTION_EMOJI = "💘"
