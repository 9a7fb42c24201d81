"""
Logging setup for the transcription robot
"""

import datetime
import json
import logging
import sys
from typing import Optional

# Client libraries that log every request at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "openai", "google", "uvicorn.access")

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per line, with any bound context fields merged in"""

    def __init__(self, service_name: Optional[str] = None):
        super().__init__()
        self.service_name = service_name

    def format(self, record):
        entry = {
            "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
            "line": record.lineno,
        }
        if self.service_name:
            entry["service"] = self.service_name
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        entry.update(getattr(record, "extra_fields", None) or {})
        return json.dumps(entry, default=str)


def configure_logging(
    level: str = "INFO", format_type: str = "json", service_name: Optional[str] = None
) -> None:
    """
    Install a single stdout handler on the root logger

    Args:
        level: Log level name
        format_type: "json" for structured lines, anything else for plain text
        service_name: Added to every line
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)

    if format_type == "json":
        formatter = JsonFormatter(service_name)
    elif service_name:
        formatter = logging.Formatter(TEXT_FORMAT.replace("%(name)s", f"{service_name}.%(name)s"))
    else:
        formatter = logging.Formatter(TEXT_FORMAT)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handler.setLevel(log_level)

    root.setLevel(log_level)
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class ExtraFieldsAdapter(logging.LoggerAdapter):
    """Binds context fields (e.g. a subscription id) to every record"""

    def process(self, msg, kwargs):
        kwargs.setdefault("extra", {})["extra_fields"] = self.extra
        return msg, kwargs


def get_logger(name: str, extra_fields: Optional[dict] = None) -> logging.Logger:
    """
    Get a module logger, optionally bound to context fields

    Args:
        name: Logger name
        extra_fields: Fields added to every record logged through the result

    Returns:
        Logger, or an ExtraFieldsAdapter when fields are given
    """
    logger = logging.getLogger(name)
    if extra_fields:
        return ExtraFieldsAdapter(logger, extra_fields)
    return logger
