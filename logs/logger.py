"""
This module sets up the logging configuration for the requirement aggregation engine.
Log records are appended to a file in the configured log directory.
"""
import logging
import os

from config import config

# Create the log directory if it doesn't already exist
os.makedirs(config.log_dir, exist_ok=True)

# Configure the basic logging settings
# - level: taken from the LOG_LEVEL setting, INFO by default.
# - filemode: 'a' means append mode, so new log messages are added to the end of the file.
logging.basicConfig(
    level=getattr(logging, config.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(levelname)s - %(message)s",
    filename=os.path.join(config.log_dir, "requirements.log"),
    filemode="a"
)

logger = logging.getLogger("requirements")

def log_error(message: str) -> None:
    """
    Logs an error message to the configured log file.

    Args:
        message (str): The error message string to be logged.
    """
    logger.error(message)

def log_info(message: str) -> None:
    """Logs an informational message to the configured log file."""
    logger.info(message)

def log_debug(message: str) -> None:
    """Logs a debug message, written only when LOG_LEVEL is DEBUG."""
    logger.debug(message)
