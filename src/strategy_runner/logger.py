import logging
import sys
import json
from datetime import datetime

# Attributes every LogRecord carries; anything else came in through `extra`
_RESERVED_ATTRS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename', 'module',
    'lineno', 'funcName', 'created', 'msecs', 'relativeCreated', 'thread', 'threadName',
    'processName', 'process', 'taskName', 'getMessage', 'exc_info', 'exc_text',
    'stack_info', 'message',
}


class StructuredFormatter(logging.Formatter):
    """Formatter rendering extra fields such as strategy, as text or JSON"""

    def __init__(self, fmt: str = 'text'):
        super().__init__()
        self.fmt = fmt

    def format(self, record):
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage()
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value.isoformat() if isinstance(value, datetime) else value

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        if self.fmt == 'json':
            return json.dumps(log_data, default=str)

        base_msg = f"[{log_data['timestamp']}] [{log_data['level']}] [{log_data['logger']}] {log_data['message']}"
        extras = [
            f"{key}={value}" for key, value in log_data.items()
            if key not in ('timestamp', 'level', 'logger', 'message', 'exception')
        ]
        if extras:
            base_msg += f" [{' '.join(extras)}]"
        if 'exception' in log_data:
            base_msg += f"\n{log_data['exception']}"
        return base_msg


def configure_logging(level: str = 'INFO', fmt: str = 'text'):
    """Configure the root logger to use structured formatting for all logs"""
    root_logger = logging.getLogger()

    # Clear existing handlers to avoid duplicates
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper()))

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(StructuredFormatter(fmt))
    root_logger.addHandler(console_handler)

    _configure_third_party_loggers()


def _configure_third_party_loggers():
    """Configure specific third-party library loggers with appropriate levels"""
    # aiohttp: Set to WARNING to reduce HTTP request/response noise
    logging.getLogger('aiohttp').setLevel(logging.WARNING)

    # apscheduler: job execution lines on every interval are noise
    logging.getLogger('apscheduler').setLevel(logging.WARNING)
