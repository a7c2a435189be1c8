"""Logging setup for the API process."""
import logging

from investsim.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger("investsim")


def configure_logging(level: str = settings.LOG_LEVEL) -> logging.Logger:
    """Configure the root handler once and set the package log level."""
    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT)
    logger.setLevel(level.upper())
    return logger
