"""Telegram bot implementation package.

Contains all Telegram bot specific functionality including message handlers,
URL extraction from message entities, reply formatting and delivery with
retries.
"""
