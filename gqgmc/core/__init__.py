# core/__init__.py
"""
Core package for the GQ GMC driver.

This package provides the serial transport, the device handle and the
command/response protocol engine.
"""

from gqgmc.core.exceptions import (
    GeigerCounterError, CommunicationError, OpenFailedError,
    DeviceDisconnectedError, ConfigurationError
)
from gqgmc.core.errors import ErrorCode, ErrorState, get_error_text
from gqgmc.core.transport import SerialTransport
from gqgmc.core.image import ConfigurationImage, ConfigField, FieldId, FIELD_TABLE, NVM_SIZE
from gqgmc.core.device import DeviceHandle
from gqgmc.core.protocol import (
    Protocol, Command, ResponseSize, communicate, send_command, read_response,
    clear_input_buffer, decode_count
)

__all__ = [
    # Exceptions
    'GeigerCounterError', 'CommunicationError', 'OpenFailedError',
    'DeviceDisconnectedError', 'ConfigurationError',

    # Error state
    'ErrorCode', 'ErrorState', 'get_error_text',

    # Device state
    'SerialTransport', 'ConfigurationImage', 'ConfigField', 'FieldId',
    'FIELD_TABLE', 'NVM_SIZE', 'DeviceHandle',

    # Protocol
    'Protocol', 'Command', 'ResponseSize', 'communicate', 'send_command',
    'read_response', 'clear_input_buffer', 'decode_count'
]
