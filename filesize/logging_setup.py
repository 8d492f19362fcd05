from __future__ import annotations

import contextlib
import contextvars
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterator, Optional

from filesize.config_loader import LoggingSettings
from filesize.size_parser import MB, parse_env

DEFAULT_CATEGORY = "CONFIG"
CATEGORIES = {
    "PARSE",
    "CONFIG",
    "CLI",
    "ERRORS",
}
DEFAULT_LOG_MAX_BYTES = 10 * MB
DEFAULT_LOG_BACKUP_COUNT = 10
LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(category)s | %(name)s | "
    "%(filename)s:%(lineno)d %(funcName)s() | %(message)s"
)

_category_var: contextvars.ContextVar[str] = contextvars.ContextVar("category", default=DEFAULT_CATEGORY)


def get_category() -> str:
    return _category_var.get()


@contextlib.contextmanager
def category_context(category: str) -> Iterator[None]:
    token = _category_var.set(category if category in CATEGORIES else DEFAULT_CATEGORY)
    try:
        yield
    finally:
        _category_var.reset(token)


class ContextEnricherFilter(logging.Filter):
    """
    Ensures every LogRecord has a category, so the shared format never
    fails on records from third-party loggers.
    """

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        if not hasattr(record, "category") or not getattr(record, "category"):
            record.category = get_category()
        return True


class CategoryLoggerAdapter(logging.LoggerAdapter):
    def __init__(self, logger: logging.Logger, category: str) -> None:
        super().__init__(logger, extra={"category": category})

    def process(self, msg, kwargs):
        extra = kwargs.get("extra", {})
        if "category" not in extra:
            extra["category"] = self.extra.get("category") or get_category()
        kwargs["extra"] = extra
        return msg, kwargs


def _log_level(settings: Optional[LoggingSettings]) -> int:
    fallback = settings.level if settings is not None else "INFO"
    level_name = os.environ.get("FILESIZE_LOG_LEVEL", fallback).upper()
    return getattr(logging, level_name, logging.INFO)


def _log_file(settings: Optional[LoggingSettings]) -> Optional[Path]:
    raw = os.environ.get("FILESIZE_LOG_FILE", "").strip()
    if raw:
        return Path(raw).expanduser()
    return settings.file if settings is not None else None


def _log_max_bytes(settings: Optional[LoggingSettings]) -> int:
    fallback = settings.max_file_size if settings is not None else DEFAULT_LOG_MAX_BYTES
    return parse_env("FILESIZE_LOG_MAX_BYTES", fallback)


def _log_backup_count(settings: Optional[LoggingSettings]) -> int:
    fallback = settings.backup_count if settings is not None else DEFAULT_LOG_BACKUP_COUNT
    raw = os.environ.get("FILESIZE_LOG_BACKUP_COUNT", "").strip()
    if raw:
        try:
            val = int(raw)
            if val >= 0:
                return val
        except ValueError:
            pass
    return fallback


def setup_logging(settings: Optional[LoggingSettings] = None) -> None:
    """
    Central logging setup.

    Console output always; a rotating file when a log file is configured.
    FILESIZE_LOG_* environment variables take precedence over ``settings``.
    FILESIZE_LOG_MAX_BYTES takes a size string such as "10MB".
    """
    level = _log_level(settings)
    root_logger = logging.getLogger()

    # Avoid double-installation; still allow runtime level update.
    if getattr(root_logger, "_filesize_logging_installed", False):
        root_logger.setLevel(level)
        for h in root_logger.handlers:
            h.setLevel(level)
        return
    root_logger.setLevel(level)

    # Important: do NOT pass datefmt; default includes ",%03d" milliseconds.
    formatter = logging.Formatter(fmt=LOG_FORMAT)
    enricher = ContextEnricherFilter()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.addFilter(enricher)
    root_logger.addHandler(console_handler)

    log_file = _log_file(settings)
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=_log_max_bytes(settings),
            backupCount=_log_backup_count(settings),
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(enricher)
        root_logger.addHandler(file_handler)

    root_logger._filesize_logging_installed = True  # type: ignore[attr-defined]


def get_logger(name: str, category: str = DEFAULT_CATEGORY) -> CategoryLoggerAdapter:
    return CategoryLoggerAdapter(logging.getLogger(name), category if category in CATEGORIES else DEFAULT_CATEGORY)
