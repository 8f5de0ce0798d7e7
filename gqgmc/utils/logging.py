import logging
import sys
from pathlib import Path
from datetime import datetime
import logging.handlers
import os
import threading
from typing import Optional

from gqgmc.config import settings

class LoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that adds contextual information to log records.

    Every record carries the device path (or 'none'), the thread name and
    the process ID so that traces from several counters can be told apart.
    """
    def process(self, msg, kwargs):
        if 'extra' not in kwargs:
            kwargs['extra'] = {}
        extra = kwargs['extra']

        if 'device' not in extra:
            extra['device'] = 'none'

        # Include thread name for offloaded commits
        if 'thread_name' not in extra:
            extra['thread_name'] = threading.current_thread().name

        if 'process_id' not in extra:
            extra['process_id'] = os.getpid()

        return msg, kwargs

class DeviceLoggerAdapter(LoggerAdapter):
    """
    Specialized logger adapter bound to one device path.
    """
    def __init__(self, logger, device=None):
        """
        Initialize with device context.

        Args:
            logger: Base logger to adapt
            device: Serial device path of the counter
        """
        super().__init__(logger, {'device': device or 'none'})

    def process(self, msg, kwargs):
        extra = kwargs.get('extra', {})
        if 'device' not in extra and self.extra.get('device'):
            extra['device'] = self.extra.get('device')

        kwargs['extra'] = extra
        return super().process(msg, kwargs)

class ColoredFormatter(logging.Formatter):
    """
    Custom formatter that adds colors to console output.
    """
    COLORS = {
        'DEBUG': '\033[94m',     # Blue
        'INFO': '\033[92m',      # Green
        'WARNING': '\033[93m',   # Yellow
        'ERROR': '\033[91m',     # Red
        'CRITICAL': '\033[91m\033[1m',  # Bold Red
        'RESET': '\033[0m'       # Reset
    }

    def __init__(self, *args, is_console=False, **kwargs):
        super().__init__(*args, **kwargs)
        self.is_console = is_console

    def format(self, record):
        if not self.is_console:
            return super().format(record)
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"
        try:
            return super().format(record)
        finally:
            # Other handlers share the record
            record.levelname = levelname

def _get_detailed_formatter(for_console=False):
    """Create the formatter for one handler, coloured on the console."""
    return ColoredFormatter(settings.LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S', is_console=for_console)

def setup_logging() -> logging.Logger:
    """
    Set up structured logging for an application using the driver.

    Library modules never call this; it is for the embedding application.

    Returns:
        logging.Logger: Configured package logger
    """
    level_name = str(settings.LOG_LEVEL).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handlers = []

    if settings.LOG_TO_CONSOLE:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(_get_detailed_formatter(for_console=True))
        handlers.append(console_handler)

    log_dir = Path(settings.LOG_DIR)
    if settings.LOG_TO_FILE:
        try:
            log_dir.mkdir(exist_ok=True, parents=True)

            # Create daily rotating file handler
            log_file = log_dir / f"gqgmc_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.handlers.TimedRotatingFileHandler(
                log_file, when='midnight', backupCount=7, encoding='utf-8'
            )
            file_handler.setLevel(log_level)
            file_formatter = _get_detailed_formatter(for_console=False)
            file_handler.setFormatter(file_formatter)
            handlers.append(file_handler)

            # Separate log for warnings and above (failed exchanges)
            error_log_file = log_dir / f"gqgmc_errors_{datetime.now().strftime('%Y%m%d')}.log"
            error_handler = logging.handlers.TimedRotatingFileHandler(
                error_log_file, when='midnight', backupCount=7, encoding='utf-8'
            )
            error_handler.setLevel(logging.WARNING)
            error_handler.setFormatter(file_formatter)
            handlers.append(error_handler)

        except OSError as e:
            print(f"Warning: Could not set up file logging: {str(e)}. Using console logging only.")

    for handler in handlers:
        root_logger.addHandler(handler)

    # pyserial is chatty at DEBUG
    logging.getLogger("serial").setLevel(logging.WARNING)

    logger = logging.getLogger("gqgmc")
    logger.debug("Logging initialized. Log directory: %s", log_dir)

    def exception_handler(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return

        logger.critical(
            "Uncaught exception",
            exc_info=(exc_type, exc_value, exc_traceback),
            extra={'device': 'uncaught_exception'}
        )

    sys.excepthook = exception_handler

    return logger

def get_logger(name: str, device: Optional[str] = None) -> logging.LoggerAdapter:
    """
    Get a logger with the specified name and optional device context.

    Args:
        name: Logger name, typically module name
        device: Optional serial device path

    Returns:
        LoggerAdapter: Logger adapter with contextual information
    """
    logger = logging.getLogger(name)

    if device:
        return DeviceLoggerAdapter(logger, device)
    return LoggerAdapter(logger, {})
