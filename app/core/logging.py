"""
Application-wide logging configuration.

- One format for every module: timestamp | level | module | message
- Logs stream to stdout so uvicorn picks them up
- Call configure_logging() ONCE at app startup
"""

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Configure root logging settings.

    Args:
        level: "DEBUG", "INFO", "WARNING", "ERROR" or "CRITICAL"
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
    logging.getLogger(__name__).info("Logging initialized with level %s", level)
