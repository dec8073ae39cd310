import json
import logging
import sys
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from contextvars import ContextVar

# Context variables for correlation
source_var: ContextVar[Optional[str]] = ContextVar('source', default=None)
stage_var: ContextVar[Optional[str]] = ContextVar('stage', default=None)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        source = source_var.get()
        stage = stage_var.get()

        log_entry = {
            'ts': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if source:
            log_entry['source'] = source
        if stage:
            log_entry['stage'] = stage

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        if getattr(record, 'fields', None):
            log_entry['fields'] = record.fields

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class CorrelationContext:
    """Context manager for correlation data."""

    def __init__(self, source: Optional[str] = None, stage: Optional[str] = None):
        """Initialize correlation context."""
        self.source = source
        self.stage = stage
        self._tokens = []

    def __enter__(self):
        """Set correlation context."""
        if self.source is not None:
            self._tokens.append((source_var, source_var.set(self.source)))
        if self.stage is not None:
            self._tokens.append((stage_var, stage_var.set(self.stage)))
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Restore correlation context."""
        while self._tokens:
            var, token = self._tokens.pop()
            var.reset(token)


def setup_logging(level: str = 'INFO',
                  log_file: Optional[str] = None) -> logging.Logger:
    """Setup structured logging for the ``itl`` logger hierarchy."""
    logger = logging.getLogger('itl')
    logger.setLevel(getattr(logging, level.upper()))

    logger.handlers.clear()

    formatter = StructuredFormatter()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = 'itl') -> logging.Logger:
    """Get logger with structured formatting."""
    return logging.getLogger(name)


def log_with_fields(logger: logging.Logger, level: str, message: str,
                    fields: Optional[Dict[str, Any]] = None,
                    exc_info: bool = False, **kwargs):
    """Log message with additional fields."""
    levelno = getattr(logging, level.upper())
    if not logger.isEnabledFor(levelno):
        return

    record = logger.makeRecord(
        logger.name, levelno, '', 0, message, (),
        sys.exc_info() if exc_info else None
    )

    merged = dict(fields or {})
    merged.update(kwargs)
    if merged:
        record.fields = merged

    logger.handle(record)


def log_decode_start(logger: logging.Logger, source: str, byte_count: int, **kwargs):
    """Log the start of a library decode."""
    with CorrelationContext(source=source, stage='decode_start'):
        log_with_fields(logger, 'INFO', 'Library decode started', {
            'byte_count': byte_count,
            **kwargs
        })


def log_decode_complete(logger: logging.Logger, source: str,
                        track_count: int, playlist_count: int, **kwargs):
    """Log a successful library decode."""
    with CorrelationContext(source=source, stage='decode_complete'):
        log_with_fields(logger, 'INFO', 'Library decode completed', {
            'track_count': track_count,
            'playlist_count': playlist_count,
            **kwargs
        })


def log_error(logger: logging.Logger, message: str, error: Exception, **kwargs):
    """Log error with exception details."""
    log_with_fields(logger, 'ERROR', message, {
        'error_type': type(error).__name__,
        'error_message': str(error),
        **kwargs
    }, exc_info=True)
