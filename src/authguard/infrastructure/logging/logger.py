"""
authguard logging.

One ``authguard`` logger serves every use case. Console records go to
stderr in a short human-readable line; file records are JSON objects, one
per line, so audit-adjacent logs can be shipped alongside the security
events the account store persists.

Fields from ``LogContext`` (``use_case``, ``user_id``) are merged into the
``extra`` of every record. Callers pass ids, counts and error types only:
passwords, emails and phone numbers never reach a log record.

Settings map one to one onto ``LoggingConfig``:

    logging:
      level: INFO          # threshold for console and logger
      file: ""             # JSON log path; empty disables the file handler
      console: true
      rotation: daily      # "daily" rolls at midnight, "none" appends forever
      retention_days: 30   # rolled files kept when rotation is daily
"""

import json
import logging
import logging.handlers
import sys
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional, Union

from .context import LogContext

if TYPE_CHECKING:
    from ..config.config_models import LoggingConfig


LOGGER_NAME = "authguard"

# LogRecord attributes that are not caller-supplied extra fields.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message", "asctime",
}


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with extra fields at top level."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        payload.update(
            (key, value) for key, value in vars(record).items() if key not in _RECORD_ATTRS
        )

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            payload["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(payload, default=str)


class HumanReadableFormatter(logging.Formatter):
    """``2024-06-01 12:00:00 - INFO - Guarded operation started``"""

    def __init__(self):
        super().__init__(
            fmt='%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )


def _file_handler(log_file: Path, rotation: str, retention_days: int) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    if rotation == "daily":
        handler: logging.Handler = logging.handlers.TimedRotatingFileHandler(
            filename=str(log_file),
            when='midnight',
            interval=1,
            backupCount=retention_days,
            encoding='utf-8'
        )
    else:
        handler = logging.FileHandler(str(log_file), encoding='utf-8')
    # The file keeps everything the logger lets through.
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(JSONFormatter())
    return handler


class AuthGuardLogger:
    """
    Process-wide logger for authguard.

    Handlers read the singleton through ``get_instance()``;
    ``AuthOrchestrator.create`` rebuilds it from configuration with
    ``from_config()``.

    Example:
        >>> logger = AuthGuardLogger.from_config(config.logging)
        >>> with logging_context(use_case="enable_mfa", user_id="user-1"):
        ...     logger.info("Guarded operation started", extra={"action": "mfa_enabled"})
    """

    _instance: Optional['AuthGuardLogger'] = None
    _lock: threading.Lock = threading.Lock()

    def __init__(
        self,
        level: str = "INFO",
        log_file: Optional[Union[str, Path]] = None,
        console: bool = True,
        rotation: str = "daily",
        retention_days: int = 30,
    ):
        """
        Build handlers for the ``authguard`` logger, replacing any old ones.

        Args:
            level: Threshold name, as validated by ``LoggingConfig.level``
            log_file: JSON log path; None or "" means no file handler
            console: Write human-readable lines to stderr
            rotation: "daily" for a midnight TimedRotatingFileHandler,
                anything else for a plain FileHandler
            retention_days: Rolled files kept (backupCount) with daily rotation
        """
        threshold = getattr(logging, level.upper())
        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(threshold)
        self.logger.propagate = False
        self.logger.handlers.clear()

        if console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(threshold)
            console_handler.setFormatter(HumanReadableFormatter())
            self.logger.addHandler(console_handler)

        if log_file:
            self.logger.addHandler(_file_handler(Path(log_file), rotation, retention_days))

    @classmethod
    def get_instance(cls, **settings: Any) -> 'AuthGuardLogger':
        """
        Return the singleton, creating it from ``settings`` on first use.

        Later calls ignore ``settings``; use ``configure`` or
        ``from_config`` to change them.
        """
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls(**settings)
        return cls._instance

    @classmethod
    def configure(cls, **settings: Any) -> 'AuthGuardLogger':
        """Replace the singleton with one built from ``settings``."""
        with cls._lock:
            cls._instance = cls(**settings)
        return cls._instance

    @classmethod
    def from_config(cls, config: 'LoggingConfig') -> 'AuthGuardLogger':
        """Replace the singleton with one built from a ``LoggingConfig``."""
        return cls.configure(
            level=config.level,
            log_file=config.file or None,
            console=config.console,
            rotation=config.rotation,
            retention_days=config.retention_days,
        )

    def _log(self, level: int, message: str, kwargs: Dict[str, Any]) -> None:
        context = LogContext.get_context()
        if context:
            # Explicit extra fields win over context fields.
            kwargs = {**kwargs, "extra": {**context, **kwargs.get("extra", {})}}
        self.logger.log(level, message, **kwargs)

    def debug(self, message: str, **kwargs):
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs):
        self._log(logging.CRITICAL, message, kwargs)


def get_logger(name: str) -> logging.Logger:
    """Child of the ``authguard`` logger, e.g. ``get_logger("cli")``."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
