"""
loguru setup for the CLI.

Library code only calls ``logger``; sinks are installed here, once, by
whichever entry point runs.
"""

import sys

from loguru import logger

CONSOLE_FORMAT = "<level>{level: <7}</level> {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} {level: <7} {name}:{line} {message}"


def setup_logging(level: str = "WARNING", log_file: str | None = None) -> None:
    """Replace every loguru sink with stderr, plus a rotating file when ``log_file`` is set."""
    level = level.upper()
    logger.remove()
    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)
    if log_file:
        logger.add(log_file, level=level, format=FILE_FORMAT, rotation="5 MB", retention=5, encoding="utf-8")
