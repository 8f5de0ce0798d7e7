"""
Host-side driver for GQ Electronics GMC-300 and later Geiger-Muller counters.
"""

from gqgmc.core import DeviceHandle, ErrorCode, FieldId, get_error_text
from gqgmc.hardware import GeigerCounter, SaveDataType, SoftKey, open_device, close_device

__version__ = "0.1.0"

__all__ = [
    'DeviceHandle', 'ErrorCode', 'FieldId', 'get_error_text',
    'GeigerCounter', 'SaveDataType', 'SoftKey', 'open_device', 'close_device',
]
