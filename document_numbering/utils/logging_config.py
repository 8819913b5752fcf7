"""
Simple Centralized Logging Configuration

Uses Python's standard logging.basicConfig(). All configuration via
environment variables in .env file.

Usage:
    # Once, in the host application's startup code
    from document_numbering.utils.logging_config import setup_logging
    setup_logging()

    # In any module
    import logging
    logger = logging.getLogger(__name__)
"""

import logging
import sys

from document_numbering.config import settings


def _get_log_level(level_str: str) -> int:
    """Convert string log level to logging constant"""
    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return level_map.get(level_str.upper(), logging.INFO)


def setup_logging(level: str | None = None) -> None:
    """Configure logging from Pydantic Settings

    Args:
        level: Optional override for settings.LOG_LEVEL
    """
    root_level = _get_log_level(level or settings.LOG_LEVEL)

    log_format = "%(asctime)s | %(name)-25s | %(levelname)-8s | %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=root_level,
        format=log_format,
        datefmt=date_format,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,  # Override any existing configuration
    )

    # SQLAlchemy - statement logging is controlled by DATABASE_ECHO instead
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
