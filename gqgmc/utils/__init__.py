"""
Utility package for the GQ GMC driver: logging setup and port detection.
"""

from gqgmc.utils.logging import setup_logging, get_logger, DeviceLoggerAdapter
from gqgmc.utils.helpers import detect_serial_port

__all__ = ['setup_logging', 'get_logger', 'DeviceLoggerAdapter', 'detect_serial_port']
