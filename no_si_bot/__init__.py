"""YouTube tracking-link cleaner bot package.

A Telegram bot that watches chats for YouTube links carrying the ``si``
share-tracking parameter and replies with cleaned copies of them. It also
reacts to users who reply to its own messages.

The application follows a modular architecture with separate concerns for:
- Pure URL cleanup logic
- Bot handlers and message processing
- Dispatcher supervision and shutdown
"""
