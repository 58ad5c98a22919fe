"""Process-wide logging setup."""

import logging

_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO") -> None:
    """Configure the root logger once.

    Library modules only create named loggers; the application entry
    point (API lifespan, scripts) decides where records go.

    Args:
        level: Level name (e.g. "DEBUG") or numeric logging level
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(level=level, format=_FORMAT)
    logging.getLogger().setLevel(level)

    # Driver chatter
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
