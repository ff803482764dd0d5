"""
Logging setup shared by the API and service modules.

Call setup_logging() once at startup; modules grab their logger with
get_logger(__name__).
"""

import json
import logging
import sys
from datetime import datetime
from typing import Optional

from quote_portal.core.config import get_settings

_configured = False


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log shippers."""

    def format(self, record):
        entry = {
            "ts": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)
        for key in ("co_id", "job_id", "quote_id", "session_id", "route"):
            if hasattr(record, key):
                entry[key] = getattr(record, key)
        return json.dumps(entry, default=str)


def setup_logging(level: Optional[str] = None, json_logs: Optional[bool] = None):
    """
    Configure the root logger.

    Args:
        level: Override log level (default: LOG_LEVEL setting)
        json_logs: Force JSON lines (default: LOG_JSON setting)
    """
    global _configured
    settings = get_settings()
    level = (level or settings.LOG_LEVEL).upper()
    if json_logs is None:
        json_logs = settings.LOG_JSON

    root = logging.getLogger()
    root.setLevel(getattr(logging, level, logging.INFO))

    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    if json_logs:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)-7s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        ))
    root.addHandler(handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
