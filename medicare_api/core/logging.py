import logging
import logging.handlers
import os
import sys
from contextvars import ContextVar
from medicare_api.core.config import settings

# Set by the request middleware; log lines emitted while serving a request pick it up
request_id_var: ContextVar[str] = ContextVar("request_id", default="N/A")

# Third-party loggers that are too chatty at INFO
QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
    "aiosqlite": logging.WARNING,
    "jose": logging.WARNING,
}


class RequestIDFilter(logging.Filter):
    """Stamp each record with the current request id unless the caller passed one."""

    def filter(self, record):
        if not getattr(record, "request_id", None):
            record.request_id = request_id_var.get()
        return True


def _rotating_file_handler(path: str) -> logging.Handler:
    log_dir = os.path.dirname(path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )


def setup_logging() -> logging.Logger:
    """Configure the root logger: stdout always, a rotating file outside DEBUG."""
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    formatter = logging.Formatter(settings.LOG_FORMAT)
    request_id_filter = RequestIDFilter()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handlers = [logging.StreamHandler(sys.stdout)]
    if not settings.DEBUG:
        handlers.append(_rotating_file_handler(settings.LOG_FILE))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
        handler.addFilter(request_id_filter)
        root_logger.addHandler(handler)

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)

    return root_logger


logger = setup_logging()
