import sys
from typing import Optional

from loguru import logger

_log_format = "{time:YYYY-MM-DD HH:mm:ss} - [{level}] - {name}.{function}({line}) - {message}"


def setup_logger(level: str = "WARNING", log_file: Optional[str] = None):
    """Route loguru to stderr at `level`, plus a rotating file when `log_file` is set."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=_log_format)
    if log_file:
        logger.add(log_file, level="DEBUG", format=_log_format, rotation="1 MB")
    return logger
