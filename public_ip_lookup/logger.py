"""Logging for the library and the API.

Library modules only log through the `public_ip_lookup` logger and leave handler
setup to the application. The API calls `configure_logging()`, which gives the
package logger and the uvicorn loggers the same formatters.
"""

import os
from logging import config, getLevelName, getLogger
from typing import Any

LOGGER_NAME = "public_ip_lookup"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _formatter(factory: str, fmt: str) -> dict[str, Any]:
    return {"()": factory, "fmt": fmt, "datefmt": DATE_FORMAT, "use_colors": True}


def _stream_handler(formatter: str, stream: str) -> dict[str, Any]:
    return {"class": "logging.StreamHandler", "formatter": formatter, "stream": stream}


def build_log_config(level: str | int) -> dict[str, Any]:
    """dictConfig schema with the package logger and uvicorn's loggers at `level`."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "library": _formatter("uvicorn.logging.DefaultFormatter", "%(levelprefix)s %(asctime)s - %(name)s - %(message)s"),
            "access": _formatter(
                "uvicorn.logging.AccessFormatter",
                '%(levelprefix)s %(asctime)s - %(client_addr)s - "%(request_line)s" %(status_code)s',
            ),
        },
        "handlers": {
            "stderr": _stream_handler("library", "ext://sys.stderr"),
            "access": _stream_handler("access", "ext://sys.stdout"),
        },
        "loggers": {
            LOGGER_NAME: {"handlers": ["stderr"], "level": level, "propagate": False},
            "uvicorn": {"handlers": ["stderr"], "level": level, "propagate": True},
            "uvicorn.error": {"level": level, "propagate": False},
            "uvicorn.access": {"handlers": ["access"], "level": level, "propagate": False},
        },
    }


def configure_logging(level: str | None = None) -> None:
    """Apply `build_log_config`; `level` defaults to LOG_LEVEL (DEBUG, INFO, WARNING or ERROR)."""
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    config.dictConfig(build_log_config(getLevelName(level)))


logger = getLogger(LOGGER_NAME)
