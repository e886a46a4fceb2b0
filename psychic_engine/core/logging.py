"""Structured JSON logging for fulfillment exchanges.

Every record carries the exchange's correlation id, the pseudonymized user,
the client address and the intent being dispatched. Handlers are attached
once to the ``psychic_engine`` package logger; module loggers propagate to it.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar, Token
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Iterator, Optional

from pythonjsonlogger import jsonlogger

from psychic_engine.core.config import settings

PACKAGE_LOGGER_NAME = "psychic_engine"
LOG_LEVEL = getattr(logging, str(settings.PSYCHIC_LOG_LEVEL).upper(), logging.INFO)
LOG_SCHEMA_VERSION = str(settings.PSYCHIC_LOG_SCHEMA_VERSION)
LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 5


def _resolve_log_file() -> Optional[Path]:
    """Return the log file path, or None when no log directory is writable."""
    logs_dir = Path(settings.PSYCHIC_LOG_DIR or Path(settings.DATA_DIR) / "logs")
    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
    except OSError:
        return None
    return logs_dir / "psychic.log"


LOG_FILE_PATH = _resolve_log_file()


class _ContextField:
    """One piece of per-exchange metadata stamped onto log records."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._var: ContextVar[Optional[str]] = ContextVar(name, default=None)

    def bind(self, value: Optional[str]) -> Token[Optional[str]]:
        return self._var.set(value)

    def reset(self, token: Token[Optional[str]]) -> None:
        self._var.reset(token)

    def get(self) -> Optional[str]:
        return self._var.get()

    @contextmanager
    def bound(self, value: Optional[str]) -> Iterator[None]:
        token = self.bind(value)
        try:
            yield
        finally:
            self.reset(token)


_CORRELATION_ID = _ContextField("correlation_id")
_LOG_USER_ID = _ContextField("log_user_id")
_CLIENT_IP = _ContextField("client_ip")
_INTENT = _ContextField("intent")
_FIELDS = (_CORRELATION_ID, _LOG_USER_ID, _CLIENT_IP, _INTENT)

bind_correlation_id = _CORRELATION_ID.bind
reset_correlation_id = _CORRELATION_ID.reset
get_correlation_id = _CORRELATION_ID.get
correlation_id_context = _CORRELATION_ID.bound

bind_log_user_id = _LOG_USER_ID.bind
reset_log_user_id = _LOG_USER_ID.reset
get_log_user_id = _LOG_USER_ID.get
log_user_id_context = _LOG_USER_ID.bound

bind_client_ip = _CLIENT_IP.bind
reset_client_ip = _CLIENT_IP.reset
get_client_ip = _CLIENT_IP.get

get_intent = _INTENT.get
intent_context = _INTENT.bound


class VersionedJsonFormatter(jsonlogger.JsonFormatter):
    """Inject a schema version into each structured log entry."""

    def __init__(self, *args, schema_version: str, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._schema_version = schema_version

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record.setdefault("schema_version", self._schema_version)


class CorrelationIdFilter(logging.Filter):  # pylint: disable=too-few-public-methods
    """Copy the bound exchange metadata onto each record; unbound fields log as ``-``."""

    def filter(self, record: logging.LogRecord) -> bool:
        for field in _FIELDS:
            setattr(record, field.name, field.get() or "-")
        return True


def _build_formatter() -> VersionedJsonFormatter:
    fields = ["asctime", "levelname", "name", "message", *(field.name for field in _FIELDS)]
    return VersionedJsonFormatter(
        " ".join(f"%({name})s" for name in fields),
        rename_fields={
            "asctime": "timestamp",
            "levelname": "level",
            "name": "logger",
            "correlation_id": "cid",
            "log_user_id": "user",
        },
        datefmt="%Y-%m-%d %H:%M:%S",
        json_ensure_ascii=False,
        schema_version=LOG_SCHEMA_VERSION,
    )


def configure_logging() -> logging.Logger:
    """Attach stdout and rotating-file JSON handlers to the package logger once."""
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    if package_logger.handlers:
        return package_logger

    package_logger.setLevel(LOG_LEVEL)
    formatter = _build_formatter()
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if LOG_FILE_PATH is not None:
        handlers.append(
            RotatingFileHandler(
                LOG_FILE_PATH,
                maxBytes=LOG_MAX_BYTES,
                backupCount=LOG_BACKUP_COUNT,
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler.addFilter(CorrelationIdFilter())
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name`` with package handlers configured."""
    configure_logging()
    return logging.getLogger(name)


__all__ = [
    "CorrelationIdFilter",
    "VersionedJsonFormatter",
    "bind_correlation_id",
    "bind_client_ip",
    "bind_log_user_id",
    "reset_correlation_id",
    "reset_client_ip",
    "reset_log_user_id",
    "get_correlation_id",
    "get_client_ip",
    "get_intent",
    "get_log_user_id",
    "correlation_id_context",
    "intent_context",
    "log_user_id_context",
    "configure_logging",
    "get_logger",
    "LOG_FILE_PATH",
    "LOG_SCHEMA_VERSION",
    "PACKAGE_LOGGER_NAME",
]
