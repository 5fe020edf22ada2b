"""
Logging Configuration for Pacelane

Every module gets its logger from here:

    from pacelane.core.logging_config import get_logger

    logger = get_logger(__name__)
    logger.info(f"Saved pacing preferences for user {user_id}")
    logger.error("Suggestion generation failed", exc_info=True)

Console output is coloured in development and one JSON-like line per record
elsewhere. Records also go to a rotating logs/pacelane.log unless
LOG_FILE_ENABLED is false. Both handlers redact credentials and phone numbers.
"""

import logging
import logging.handlers
import os
import re
import sys
from typing import Optional

LOG_DIR = 'logs'
LOG_FILE_NAME = 'pacelane.log'
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

REDACTED = '***REDACTED***'

# Third-party loggers that are too chatty at INFO
QUIET_LOGGERS = {
    'werkzeug': logging.WARNING,
    'urllib3': logging.WARNING,
    'boto3': logging.WARNING,
    'botocore': logging.WARNING,
    's3transfer': logging.WARNING,
    'openai': logging.WARNING,
    'httpx': logging.WARNING,
    'celery': logging.INFO,
}


class SensitiveDataFilter(logging.Filter):
    """Redact secrets and contact details before a record is written"""

    SENSITIVE_KEYS = [
        'password', 'secret', 'token', 'api_key', 'apikey',
        'authorization', 'auth', 'key', 'email', 'phone',
        'whatsapp', 'whatsapp_number'
    ]

    # International numbers or runs of 8+ bare digits
    PHONE_PATTERN = re.compile(r'\+\d[\d\s\-]{6,}\d|\b\d{8,}\b')

    def filter(self, record):
        if isinstance(record.msg, str):
            record.msg = self._redact_message(record.msg)

        # Values passed through extra={...}
        for key in self.SENSITIVE_KEYS:
            if hasattr(record, key):
                setattr(record, key, REDACTED)

        return True

    def _redact_message(self, message: str) -> str:
        lowered = message.lower()
        if '=' in message and any(key in lowered for key in self.SENSITIVE_KEYS):
            message = f"{message.split('=', 1)[0]}={REDACTED}"
        return self.PHONE_PATTERN.sub(REDACTED, message)


class ColoredFormatter(logging.Formatter):
    """Colored formatter for console output (development)"""

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            # Other handlers share the record
            record.levelname = levelname


def _console_formatter(flask_env: str) -> logging.Formatter:
    if flask_env == 'development':
        return ColoredFormatter(
            '%(asctime)s | %(levelname)s | %(name)s:%(lineno)d | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    # One line per record so the platform log drain can parse it
    return logging.Formatter(
        '{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s",'
        '"line":%(lineno)d,"message":"%(message)s"}',
        datefmt='%Y-%m-%dT%H:%M:%S'
    )


def _file_handler(log_file: Optional[str], level: int) -> logging.Handler:
    if log_file is None:
        os.makedirs(LOG_DIR, exist_ok=True)
        log_file = os.path.join(LOG_DIR, LOG_FILE_NAME)

    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        '%(asctime)s | %(levelname)-8s | %(name)-30s | %(funcName)-20s | Line:%(lineno)-4d | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    return handler


def setup_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    enable_console: bool = True,
    enable_file: Optional[bool] = None
) -> None:
    """
    Configure the root logger.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL (default: LOG_LEVEL env, INFO)
        log_file: Path to log file (default: logs/pacelane.log)
        enable_console: Log to stdout
        enable_file: Log to the rotating file (default: LOG_FILE_ENABLED env, true)
    """
    if log_level is None:
        log_level = os.environ.get('LOG_LEVEL', 'INFO').upper()
    if enable_file is None:
        enable_file = os.environ.get('LOG_FILE_ENABLED', 'true').lower() in ('1', 'true', 'yes')

    numeric_level = getattr(logging, log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers = []

    handlers = []
    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(_console_formatter(os.environ.get('FLASK_ENV', 'development')))
        handlers.append(console_handler)
    if enable_file:
        handlers.append(_file_handler(log_file, numeric_level))

    for handler in handlers:
        handler.addFilter(SensitiveDataFilter())
        root_logger.addHandler(handler)

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)

    logging.getLogger(__name__).info(
        f"Logging configured: level={log_level}, console={enable_console}, file={enable_file}"
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Logger name (typically __name__ of the calling module)
    """
    return logging.getLogger(name)


def handle_exception(exc_type, exc_value, exc_traceback):
    """Log uncaught exceptions"""
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return

    logging.getLogger(__name__).critical(
        "Uncaught exception",
        exc_info=(exc_type, exc_value, exc_traceback)
    )


sys.excepthook = handle_exception


# Initialize logging on import
if __name__ != '__main__':
    setup_logging()
