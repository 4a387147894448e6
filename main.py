"""
Entry point for the clinic chat bot.

The dialogue engine has no transport of its own; this launcher runs it
in the terminal against either the in-memory clinic data or the real
backend API configured by ``API_BASE_URL``.

Usage:
    Mock data:    python main.py
    Live backend: python main.py --backend http
    Scripted:     python main.py --scenario booking
"""

import logging
import sys

from src.config import settings

logger = logging.getLogger(__name__)


if __name__ == "__main__":
    from console_demo import main

    logger.info("Starting %s console (backend API: %s)", settings.clinic.name, settings.backend.base_url)
    sys.exit(main(sys.argv[1:]))
