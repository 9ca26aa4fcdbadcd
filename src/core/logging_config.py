"""Logging setup shared by the API server and the management CLI."""

import logging

from config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = LOG_LEVEL) -> None:
    """Configure the root logger.

    Args:
        level: Log level name, e.g. "INFO" or "DEBUG".
    """
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # SQLAlchemy echoes every statement at INFO; keep it quiet unless asked
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
