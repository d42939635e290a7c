"""
Core logging infrastructure for the subtitle fetcher.

Provides single-line JSON logging with a thread-local extraction context
and third-party library noise suppression.
"""

import json
import logging
import threading
from datetime import datetime, timezone
from typing import Dict


# Thread-local storage for extraction context
_local = threading.local()

_CONTEXT_FIELDS = ('video_ref', 'canonical_url')

_STAGE_FIELDS = ('stage', 'event', 'outcome', 'dur_ms', 'detail')

_STANDARD_FIELDS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
    'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'exc_info',
    'exc_text', 'stack_info', 'taskName', 'message', 'asctime',
}


def set_extraction_ctx(video_ref: str = None, canonical_url: str = None):
    """
    Set thread-local context for log correlation.

    Args:
        video_ref: Video reference as given by the caller
        canonical_url: Normalized URL submitted to the extraction tool
    """
    if not hasattr(_local, 'context'):
        _local.context = {}

    if video_ref is not None:
        _local.context['video_ref'] = video_ref
    if canonical_url is not None:
        _local.context['canonical_url'] = canonical_url


def clear_extraction_ctx():
    """Clear thread-local context."""
    if hasattr(_local, 'context'):
        _local.context.clear()


def get_extraction_ctx() -> Dict[str, str]:
    """Get current thread-local context."""
    if not hasattr(_local, 'context'):
        return {}
    return _local.context.copy()


class JsonFormatter(logging.Formatter):
    """
    JSON formatter with standardized field order and context injection.

    Produces single-line JSON with stable schema:
    ts, lvl, video_ref, canonical_url, stage, event, outcome, dur_ms, detail
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as single-line JSON."""
        try:
            dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
            timestamp = dt.strftime('%Y-%m-%dT%H:%M:%S') + f'.{int(dt.microsecond / 1000):03d}Z'

            log_data = {
                'ts': timestamp,
                'lvl': record.levelname
            }

            context = get_extraction_ctx()
            for field in _CONTEXT_FIELDS:
                if field in context:
                    log_data[field] = context[field]

            for field in _STAGE_FIELDS:
                value = getattr(record, field, None)
                if value is not None:
                    log_data[field] = value

            # Anything else passed via extra=...
            skip = _STANDARD_FIELDS | set(_CONTEXT_FIELDS) | set(_STAGE_FIELDS) | {'ts', 'lvl'}
            for attr_name, attr_value in record.__dict__.items():
                if attr_name.startswith('_') or attr_name in skip:
                    continue
                if attr_value is not None:
                    log_data[attr_name] = attr_value

            if 'detail' not in log_data and record.getMessage():
                log_data['detail'] = record.getMessage()

            if record.exc_info:
                log_data['exc'] = self.formatException(record.exc_info)

            return json.dumps(log_data, separators=(',', ':'), ensure_ascii=False, default=str)

        except Exception:
            # Fallback to basic formatting on any error
            return json.dumps({
                'ts': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
                'lvl': record.levelname,
                'detail': str(record.msg),
            }, ensure_ascii=False)


def configure_logging(log_level: str = "INFO", use_json: bool = True) -> logging.Logger:
    """
    Configure application logging with JSON formatting and noise suppression.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        use_json: Whether to use JSON formatting (True) or basic formatting (False)

    Returns:
        Configured root logger
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    handler = logging.StreamHandler()
    if use_json:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
    root_logger.addHandler(handler)

    _suppress_library_noise()

    return root_logger


def _suppress_library_noise():
    """Suppress verbose logging from third-party libraries."""
    library_levels = {
        'playwright': logging.WARNING,
        'asyncio': logging.WARNING,
        'urllib3': logging.WARNING,
    }

    for library, level in library_levels.items():
        logging.getLogger(library).setLevel(level)


def get_logger(name: str = None) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (defaults to calling module)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
