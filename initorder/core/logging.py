"""Logging setup for the initorder CLI: plain or JSON lines tagged with a run ID."""
import functools
import json
import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Optional

_RUN_ID: Optional[str] = None

# Keys callers may pass through `extra=` that end up in JSON output
STRUCTURED_FIELDS = ("element_id", "dependency_id", "manifest", "action")

TEXT_FORMAT = "%(asctime)s [%(levelname)s] [%(run_id)s] %(message)s"


def get_run_id() -> str:
    """Get or create the current run ID."""
    global _RUN_ID
    if _RUN_ID is None:
        _RUN_ID = uuid.uuid4().hex[:8]
    return _RUN_ID


class RunIdFilter(logging.Filter):
    """Stamps each record passing through a handler with the run ID."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = get_run_id()
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per record, carrying the structured extras."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "run_id": getattr(record, "run_id", get_run_id()),
            "message": record.getMessage(),
        }
        entry.update({key: getattr(record, key) for key in STRUCTURED_FIELDS
                      if hasattr(record, key)})
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def setup_logging(verbosity: int = 0, json_format: bool = False) -> None:
    """Route all logging to a single stderr handler.

    Safe to call repeatedly: the previous handler is replaced, and the run ID
    is attached by a handler filter so the global record factory is untouched.

    Args:
        verbosity: 0=WARNING, 1=INFO, 2+=DEBUG
        json_format: Emit JSON lines instead of text
    """
    if verbosity <= 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    handler = logging.StreamHandler()
    handler.addFilter(RunIdFilter())
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def timed(func):
    """Log how long the wrapped call took, at DEBUG."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            logging.debug(f"{func.__name__} took {(time.perf_counter() - start) * 1000:.2f}ms")
    return wrapper
