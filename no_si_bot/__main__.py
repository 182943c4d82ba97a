"""Allow running the bot with ``python -m no_si_bot``."""

from .main import main

main()
