"""Structured JSON logging configuration.

Every record carries the current request id and, while a store is being
synced or a webhook applied, the store id.
"""

import contextvars
import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from uuid import UUID

from pythonjsonlogger.json import JsonFormatter

request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="")
store_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("store_id", default="")

# Chatty at INFO; only their warnings are worth shipping.
QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "celery.redirected")


class LogContextFilter(logging.Filter):
    """Inject request_id and store_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get("")  # type: ignore[attr-defined]
        record.store_id = store_id_var.get("")  # type: ignore[attr-defined]
        return True


def setup_logging(*, debug: bool = False) -> None:
    """Configure root logger with JSON formatter and context filter."""
    handler = logging.StreamHandler()
    formatter = JsonFormatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(message)s %(request_id)s %(store_id)s",
        rename_fields={"asctime": "timestamp", "levelname": "level"},
    )
    handler.setFormatter(formatter)
    handler.addFilter(LogContextFilter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else logging.INFO)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


@contextmanager
def store_log_context(store_id: UUID | str) -> Iterator[None]:
    """Tag log records emitted inside the block with ``store_id``."""
    token = store_id_var.set(str(store_id))
    try:
        yield
    finally:
        store_id_var.reset(token)


def generate_request_id() -> str:
    """Generate a new request ID."""
    return uuid.uuid4().hex[:16]
