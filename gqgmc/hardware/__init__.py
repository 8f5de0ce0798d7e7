# hardware/__init__.py
"""
Hardware package for the GQ GMC driver.

This package provides the counter's capabilities, configuration management,
heartbeat streaming and front-panel controls, plus the GeigerCounter wrapper.
"""

from gqgmc.hardware.capabilities import (
    get_version, get_serial_number, get_cpm, get_cps, get_battery_voltage,
    get_history_data, parse_firmware_revision
)
from gqgmc.hardware.configuration import (
    SaveDataType, fetch, write_field, read_field, erase, load, update, commit,
    get_save_data_type, set_save_data_type, get_data_save_address,
    reset_data_save_address
)
from gqgmc.hardware.controls import SoftKey, send_key, set_date, set_time, turn_off_power
from gqgmc.hardware.session import open_device, close_device
from gqgmc.hardware.geiger_counter import GeigerCounter

__all__ = [
    # Measurements
    'get_version', 'get_serial_number', 'get_cpm', 'get_cps',
    'get_battery_voltage', 'get_history_data', 'parse_firmware_revision',

    # Configuration
    'SaveDataType', 'fetch', 'write_field', 'read_field', 'erase', 'load',
    'update', 'commit', 'get_save_data_type', 'set_save_data_type',
    'get_data_save_address', 'reset_data_save_address',

    # Controls
    'SoftKey', 'send_key', 'set_date', 'set_time', 'turn_off_power',

    # Session
    'open_device', 'close_device', 'GeigerCounter'
]
