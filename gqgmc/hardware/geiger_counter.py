import datetime
from typing import Any, Dict, Optional, Union

from gqgmc.config import settings
from gqgmc.utils.logging import get_logger
from gqgmc.utils.helpers import detect_serial_port
from gqgmc.core.device import DeviceHandle
from gqgmc.core.errors import ErrorCode, get_error_text
from gqgmc.core.exceptions import CommunicationError
from gqgmc.core.image import FieldId
from gqgmc.hardware import capabilities, configuration, controls, streaming
from gqgmc.hardware.configuration import SaveDataType
from gqgmc.hardware.controls import SoftKey
from gqgmc.hardware.session import open_device, close_device

# Initialize module logger
logger = get_logger(__name__)

class GeigerCounter:
    """
    High-level interface to a GQ GMC counter.

    Wraps one DeviceHandle and exposes the driver's operations as methods.
    Like the functions it wraps, nothing here raises on a protocol failure:
    check ``error_code`` after a call when the result matters.

    The object is not thread-safe. ``commit_configuration`` blocks for
    roughly a minute.
    """

    def __init__(self):
        self._handle: Optional[DeviceHandle] = None

    @property
    def handle(self) -> Optional[DeviceHandle]:
        return self._handle

    def connect(self, port: Optional[str] = None) -> bool:
        """
        Connect to the counter.

        Args:
            port: Serial port, or None to use DEFAULT_PORT or auto-detect

        Returns:
            bool: True if the port opened and the version could be read

        Raises:
            CommunicationError: If no port is given and none can be found
        """
        if self._handle is not None:
            self.disconnect()

        if port is None:
            port = settings.get("DEFAULT_PORT") or detect_serial_port()
            if port is None:
                raise CommunicationError("No port specified and auto-detection failed")

        self._handle = open_device(port)
        connected = (self._handle.is_open and
                     self._handle.error_code != ErrorCode.VERSION_READ_FAILED)
        if not connected:
            logger.error("Connection to %s failed: %s", port, self.error_text)
        return connected

    def disconnect(self) -> None:
        if self._handle is not None:
            close_device(self._handle)
            self._handle = None

    def is_connected(self) -> bool:
        return self._handle is not None and self._handle.is_open

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.disconnect()

    def _require_handle(self) -> DeviceHandle:
        if self._handle is None:
            # A closed handle turns every call into a failed read
            self._handle = DeviceHandle()
        return self._handle

    # Error reporting

    @property
    def error_code(self) -> ErrorCode:
        if self._handle is None:
            return ErrorCode.NO_PROBLEM
        return self._handle.error_code

    @property
    def error_text(self) -> str:
        return get_error_text(self.error_code)

    @property
    def firmware_revision(self) -> Optional[float]:
        return self._handle.firmware_revision if self._handle else None

    # Measurements

    def get_version(self) -> str:
        return capabilities.get_version(self._require_handle())

    def get_serial_number(self) -> str:
        return capabilities.get_serial_number(self._require_handle())

    def get_cpm(self) -> int:
        return capabilities.get_cpm(self._require_handle())

    def get_cps(self) -> int:
        return capabilities.get_cps(self._require_handle())

    def get_battery_voltage(self) -> float:
        return capabilities.get_battery_voltage(self._require_handle())

    def get_history_data(self, address: int, length: int) -> bytes:
        return capabilities.get_history_data(self._require_handle(), address, length)

    # Configuration

    def refresh_configuration(self) -> bool:
        return configuration.fetch(self._require_handle())

    def read_configuration_field(self, field: Union[FieldId, str]) -> int:
        return configuration.read_field(self._require_handle(), field)

    def write_configuration_field(self, field: Union[FieldId, str],
                                  value: Union[int, bytes], byte_count: int = None) -> None:
        configuration.write_field(self._require_handle(), field, value, byte_count)

    def get_configuration(self) -> Dict[str, Any]:
        return self._require_handle().image.as_dict()

    def commit_configuration(self) -> bool:
        return configuration.commit(self._require_handle())

    def get_save_data_type(self) -> SaveDataType:
        return configuration.get_save_data_type(self._require_handle())

    def set_save_data_type(self, save_data_type: SaveDataType) -> None:
        configuration.set_save_data_type(self._require_handle(), save_data_type)

    def get_data_save_address(self) -> int:
        return configuration.get_data_save_address(self._require_handle())

    def reset_data_save_address(self) -> None:
        configuration.reset_data_save_address(self._require_handle())

    # Heartbeat

    def turn_on_cps(self) -> None:
        streaming.turn_on(self._require_handle())

    def turn_off_cps(self) -> None:
        streaming.turn_off(self._require_handle())

    def get_auto_cps(self) -> int:
        return streaming.read_streamed(self._require_handle())

    # Controls

    def send_key(self, key: SoftKey) -> None:
        controls.send_key(self._require_handle(), key)

    def set_date(self, date: datetime.date) -> bool:
        return controls.set_date(self._require_handle(), date)

    def set_time(self, time: datetime.time) -> bool:
        return controls.set_time(self._require_handle(), time)

    def set_clock(self, when: datetime.datetime) -> bool:
        """Set date and time from one datetime."""
        return self.set_date(when.date()) and self.set_time(when.time())

    def turn_off_power(self) -> None:
        controls.turn_off_power(self._require_handle())
