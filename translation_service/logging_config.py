import json
import logging
import os
from datetime import datetime, timezone
from typing import Optional


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            base["exception_type"] = record.exc_info[0].__name__ if record.exc_info[0] else None
            base["traceback"] = self.formatException(record.exc_info)
        return json.dumps(base, ensure_ascii=False)


class HumanFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        base = f"{ts} | {record.levelname:<8} | {record.name} | {record.getMessage()}"
        if record.exc_info:
            base += "\n" + self.formatException(record.exc_info)
        return base


def _safe_level(level_value: str) -> int:
    level = getattr(logging, (level_value or "INFO").upper(), None)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(json_enabled: Optional[bool] = None, level_value: Optional[str] = None) -> None:
    """Install a single root handler for the whole process."""
    if json_enabled is None:
        json_enabled = os.getenv("LOG_JSON", "false").lower() in {"1", "true", "yes", "on"}
    if level_value is None:
        level_value = os.getenv("LOG_LEVEL", "INFO")

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter() if json_enabled else HumanFormatter())
    root.addHandler(handler)
    root.setLevel(_safe_level(level_value))
