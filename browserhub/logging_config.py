"""
Logging setup for browserhub and the uvicorn server it runs under.
"""

import logging
from typing import Any, Dict

# Health endpoints polled every few seconds by orchestrators
QUIET_PATHS = ("/healthz", "/health")


class HealthCheckFilter(logging.Filter):
    """Drop uvicorn access lines for health endpoints."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name != "uvicorn.access":
            return True
        message = record.getMessage()
        return not any(f"GET {path} " in message for path in QUIET_PATHS)


def _logger(handler: str, level: str) -> Dict[str, Any]:
    return {"handlers": [handler], "level": level, "propagate": False}


def get_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """
    Build a dictConfig mapping.

    Args:
        level: Level for browserhub's own loggers and the root logger

    Provider HTTP traffic (httpx) is kept at WARNING so each session
    request does not produce a line per call.
    """
    level = level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "health_check_filter": {"()": HealthCheckFilter},
        },
        "formatters": {
            "default": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"},
            "access": {"format": "%(message)s"},
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "access",
                "stream": "ext://sys.stdout",
                "filters": ["health_check_filter"],
            },
        },
        "loggers": {
            "uvicorn": _logger("default", "INFO"),
            "uvicorn.error": _logger("default", "INFO"),
            "uvicorn.access": _logger("access", "INFO"),
            "browserhub": _logger("default", level),
            "httpx": _logger("default", "WARNING"),
        },
        "root": {"level": level, "handlers": ["default"]},
    }
