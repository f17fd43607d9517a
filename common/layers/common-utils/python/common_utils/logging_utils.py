import logging
import os
import json

__all__ = ["configure_logger"]


class JsonFormatter(logging.Formatter):
    """Render each record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logger(name: str, level: str = "INFO") -> logging.Logger:
    """Return a logger configured with a standard formatter.

    The log level can be overridden via the ``LOG_LEVEL`` environment variable.
    When ``LOG_JSON`` is ``true`` logs are formatted as JSON. Both options may
    also be supplied via Parameter Store under the same names.
    """
    # late import to avoid circular dependency during package init
    from common_utils.get_ssm import get_config

    logger = logging.getLogger(name)

    log_level = os.getenv("LOG_LEVEL") or get_config("LOG_LEVEL") or level
    level_const = getattr(logging, str(log_level).upper(), logging.INFO)
    logger.setLevel(level_const)

    handler = logging.StreamHandler()
    json_flag = os.getenv("LOG_JSON") or get_config("LOG_JSON") or "false"
    if str(json_flag).lower() == "true":
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)s [%(name)s] %(message)s",
            "%Y-%m-%dT%H:%M:%S%z",
        )
    handler.setFormatter(formatter)
    if not logger.handlers:
        logger.addHandler(handler)
    return logger
