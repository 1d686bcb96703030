import json
import logging
import sys
from datetime import datetime, timezone

from rentalroi.config import config

ROOT_LOGGER = "rentalroi"
_RESERVED = ("ts", "level", "logger", "env", "message", "exc")


class JsonLogFormatter(logging.Formatter):
    """One JSON object per line. ``extra={"context": {...}}`` fields are merged in."""

    def format(self, record):
        payload = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "env": config.ENV,
            "message": record.getMessage(),
        }
        ctx = getattr(record, "context", None)
        if isinstance(ctx, dict):
            for key, value in ctx.items():
                # context never overwrites the envelope
                payload[f"ctx_{key}" if key in _RESERVED else key] = value
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def get_logger(name: str) -> logging.Logger:
    """Logger under the ``rentalroi`` tree; the handler lives on the tree root only."""
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"

    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JsonLogFormatter())
        root.addHandler(handler)
        root.setLevel(config.LOG_LEVEL)
        root.propagate = False
    return logging.getLogger(name)
