"""
Application logging configuration.
"""
import logging
import sys
from pathlib import Path

from ..core.config import settings

# Configure logging format
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = settings.LOG_LEVEL, log_dir: str = settings.LOG_DIR) -> None:
    """Configure the root logger with console and file handlers."""
    # Clear any existing handlers
    root_logger = logging.getLogger()
    root_logger.handlers = []

    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    root_logger.setLevel(numeric_level)

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_path / "app.log")
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    # uvicorn's access log duplicates the request middleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific module.

    Args:
        name: The name of the module (usually __name__)

    Returns:
        A configured logger instance
    """
    return logging.getLogger(name)
