# vault_ledger/core/logging.py
"""
Logging for the ledger.

Everything logs under the 'vault_ledger' logger tree. Structured context
travels on the record as a single `ledger_context` mapping and is rendered
after the message as key=value pairs, event coordinates first.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping, Optional

from logging import DEBUG, INFO, WARNING, ERROR, CRITICAL


ROOT_LOGGER_NAME = 'vault_ledger'
CONTEXT_ATTR = 'ledger_context'

# Rendered first, in this order; any other keys follow alphabetically
PRIORITY_KEYS = ('event_type', 'block_number', 'tx_hash', 'log_index', 'pool_id', 'handler_name')


def render_context(context: Mapping[str, Any]) -> str:
    ordered = [key for key in PRIORITY_KEYS if key in context]
    ordered += sorted(key for key in context if key not in PRIORITY_KEYS)
    return ' '.join(f"{key}={context[key]}" for key in ordered)


class LedgerFormatter(logging.Formatter):
    def __init__(self, include_context: bool = True):
        super().__init__()
        self.include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]
        line = f"{created} [{record.levelname:<7}] {record.name}: {record.getMessage()}"

        context = getattr(record, CONTEXT_ATTR, None)
        if self.include_context and context:
            line = f"{line} | {render_context(context)}"

        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class LedgerLogger:
    """Process-wide handler setup for the 'vault_ledger' logger tree"""

    _configured = False
    _log_level = INFO

    @classmethod
    def configure(cls,
                  log_dir: Optional[Path] = None,
                  log_level: str = "INFO",
                  console_enabled: bool = True,
                  file_enabled: bool = False,
                  structured_format: bool = True,
                  force: bool = False) -> None:
        """
        Attach handlers to the ledger's root logger.

        Only the first call takes effect unless `force` is set, which
        replaces the existing handlers.
        """
        if cls._configured and not force:
            return

        level = logging.getLevelName(log_level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {log_level}")
        cls._log_level = level

        root = logging.getLogger(ROOT_LOGGER_NAME)
        root.setLevel(level)
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()

        formatter = LedgerFormatter(include_context=structured_format)

        if console_enabled:
            root.addHandler(cls._handler(logging.StreamHandler(sys.stdout), level, formatter))

        if file_enabled and log_dir:
            log_dir = Path(log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)
            root.addHandler(cls._handler(
                logging.FileHandler(log_dir / 'vault_ledger.log'), level, formatter))
            # Rejected events and other failures, kept separately
            root.addHandler(cls._handler(
                logging.FileHandler(log_dir / 'vault_ledger_errors.log'), ERROR, formatter))

        cls._configured = True

    @staticmethod
    def _handler(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        return handler

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        if name != ROOT_LOGGER_NAME and not name.startswith(f'{ROOT_LOGGER_NAME}.'):
            name = f'{ROOT_LOGGER_NAME}.{name}'
        return logging.getLogger(name)


def get_class_logger(instance) -> logging.Logger:
    """Logger named after the instance's module (minus the package prefix) and class"""
    module = instance.__class__.__module__
    module = module[len(ROOT_LOGGER_NAME) + 1:] if module.startswith(f'{ROOT_LOGGER_NAME}.') else module
    return LedgerLogger.get_logger(f"{module}.{instance.__class__.__name__}")


def log_with_context(logger: logging.Logger, level: int, message: str, **context) -> None:
    if logger.isEnabledFor(level):
        logger.log(level, message, extra={CONTEXT_ATTR: context}, stacklevel=2)


class LoggingMixin:
    """Class-named logger plus log_<level> helpers that take keyword context"""

    @property
    def logger(self) -> logging.Logger:
        if not hasattr(self, '_logger'):
            self._logger = get_class_logger(self)
        return self._logger

    def log_debug(self, message: str, **context) -> None:
        log_with_context(self.logger, DEBUG, message, **context)

    def log_info(self, message: str, **context) -> None:
        log_with_context(self.logger, INFO, message, **context)

    def log_warning(self, message: str, **context) -> None:
        log_with_context(self.logger, WARNING, message, **context)

    def log_error(self, message: str, **context) -> None:
        log_with_context(self.logger, ERROR, message, **context)

    def log_critical(self, message: str, **context) -> None:
        log_with_context(self.logger, CRITICAL, message, **context)
