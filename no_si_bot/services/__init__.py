"""Domain services package.

Contains the side-effect free logic the bot handlers build on.
"""
