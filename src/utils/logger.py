# src/utils/logger.py
# Process-wide "SalesDashboard" logger: stdout plus a size-rotated file shared by all workers.

import logging
import os
import sys
from concurrent_log_handler import ConcurrentRotatingFileHandler
from typing import Optional

PROJECT_LOG_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))), "logs")
LOG_DIRECTORY = os.environ.get('LOG_DIRECTORY', PROJECT_LOG_DIR)
LOG_FILENAME = "app.log"
DEFAULT_LEVEL = "DEBUG"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d | %(funcName)s] - %(message)s'
LOG_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
LOG_BACKUP_COUNT = 10


def _resolve_level(level_str: Optional[str]) -> int:
    if level_str is None:
        try:
            from src.config import config  # late import
            level_str = config.LOG_LEVEL
        except ImportError:
            level_str = DEFAULT_LEVEL
    numeric_level = getattr(logging, str(level_str).upper(), None)
    if not isinstance(numeric_level, int):
        print(f"Warning: invalid log level '{level_str}'. Falling back to {DEFAULT_LEVEL}.", file=sys.stderr)
        numeric_level = getattr(logging, DEFAULT_LEVEL)
    return numeric_level


def _file_handler(formatter: logging.Formatter) -> Optional[logging.Handler]:
    """Rotating file handler that is safe across gunicorn workers; None if the log dir is unwritable."""
    try:
        os.makedirs(LOG_DIRECTORY, exist_ok=True)
        handler = ConcurrentRotatingFileHandler(
            filename=os.path.join(LOG_DIRECTORY, LOG_FILENAME),
            mode='a',
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding='utf-8',
        )
    except OSError as e:
        print(f"File logging disabled, cannot write to {LOG_DIRECTORY}: {e}", file=sys.stderr)
        return None
    handler.setFormatter(formatter)
    return handler


class Logger:
    """Singleton holder; the first construction attaches handlers, later ones only change the level."""
    _instance = None
    _logger = None

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super(Logger, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, name: str = "SalesDashboard", log_level: Optional[str] = None):
        if self._initialized:
            if log_level is not None:
                self._logger.setLevel(_resolve_level(log_level))
            return

        self._logger = logging.getLogger(name)
        self._logger.setLevel(_resolve_level(log_level))
        self._logger.propagate = False

        if not self._logger.handlers:
            formatter = logging.Formatter(LOG_FORMAT)
            console = logging.StreamHandler(sys.stdout)
            console.setFormatter(formatter)
            self._logger.addHandler(console)

            file_handler = _file_handler(formatter)
            if file_handler is not None:
                self._logger.addHandler(file_handler)

        self._initialized = True

    def get_logger(self) -> logging.Logger:
        if not self._logger:
            raise RuntimeError("Logger has not been initialized.")
        return self._logger

# Global logger instance
logger_instance = Logger()
logger = logger_instance.get_logger()

def configure_logger(level: str):
    """Applies the configured LOG_LEVEL to the shared logger."""
    global logger_instance, logger
    logger_instance = Logger(log_level=level)
    logger = logger_instance.get_logger()
