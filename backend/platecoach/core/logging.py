import logging
from logging.config import dictConfig
from typing import Optional

# Chatty third-party loggers that only matter when something is wrong
QUIET_LOGGERS = ("sqlalchemy.engine", "google", "urllib3")


def configure_logging(level: Optional[str] = None) -> str:
    """
    Console logging for the app. ``level`` normally comes from
    ``settings.server.log_level``; unknown names fall back to INFO.
    Returns the level that was applied.
    """
    log_level = (level or "INFO").upper()
    if not isinstance(logging.getLevelName(log_level), int):
        log_level = "INFO"

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structured": {
                    "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S%z",
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "structured",
                }
            },
            "loggers": {
                "platecoach": {"level": log_level},
                # Access lines go through our formatter only once
                "uvicorn.access": {"handlers": ["console"], "level": log_level, "propagate": False},
                **{name: {"level": "WARNING"} for name in QUIET_LOGGERS},
            },
            "root": {"handlers": ["console"], "level": log_level},
        }
    )
    logging.getLogger("platecoach").debug("Logging configured at %s", log_level)
    return log_level


__all__ = ["configure_logging"]
