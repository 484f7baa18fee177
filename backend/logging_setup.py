import os
import sys

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE")


def setup_logger(level: str = LOG_LEVEL, log_file: str = LOG_FILE) -> None:
    """Stderr sink at `level`, plus a DEBUG file sink when `log_file` is set."""
    logger.remove()
    logger.add(sys.stderr, level=level)
    if log_file:
        logger.add(log_file, level="DEBUG", rotation="1 week", encoding="utf-8")
