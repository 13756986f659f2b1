"""Logging setup for the API process."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Root handler + level; uvicorn keeps its own handlers."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("app").setLevel(level.upper())
    # SQL output comes from the engine echo flag
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
