"""
Host-side shadow of the counter's 256-byte configuration NVM.

All multi-byte fields are stored most significant byte first, which is the
order the counter expects on the wire, so the raw image can be streamed to
the device without further transformation.
"""
from enum import Enum
from typing import Dict, NamedTuple, Union

from gqgmc.core.exceptions import ConfigurationError

NVM_SIZE = 256


class ConfigField(NamedTuple):
    offset: int
    width: int
    byteorder: str = "big"


class FieldId(Enum):
    """Named configuration parameters."""
    POWER_ON_OFF = "power_on_off"
    ALARM_ON_OFF = "alarm_on_off"
    SPEAKER_ON_OFF = "speaker_on_off"
    GRAPHIC_MODE_ON_OFF = "graphic_mode_on_off"
    BACKLIGHT_TIMEOUT_SECONDS = "backlight_timeout_seconds"
    IDLE_TITLE_DISPLAY_MODE = "idle_title_display_mode"
    ALARM_CPM_VALUE = "alarm_cpm_value"
    CALIBRATION_CPM_0 = "calibration_cpm_0"
    CALIBRATION_SVUC_0 = "calibration_svuc_0"
    CALIBRATION_CPM_1 = "calibration_cpm_1"
    CALIBRATION_SVUC_1 = "calibration_svuc_1"
    CALIBRATION_CPM_2 = "calibration_cpm_2"
    CALIBRATION_SVUC_2 = "calibration_svuc_2"
    IDLE_DISPLAY_MODE = "idle_display_mode"
    ALARM_VALUE_USVUC = "alarm_value_usvuc"
    ALARM_TYPE = "alarm_type"
    # Logging interval and data type; see SaveDataType
    SAVE_DATA_TYPE = "save_data_type"
    SWIVEL_DISPLAY = "swivel_display"
    ZOOM = "zoom"
    # First sample after the latest timestamp/label record in history
    DATA_SAVE_ADDRESS = "data_save_address"
    DATA_READ_ADDRESS = "data_read_address"
    POWER_SAVING_MODE = "power_saving_mode"
    SENSITIVITY_MODE = "sensitivity_mode"
    COUNTER_DELAY = "counter_delay"
    VOLTAGE_OFFSET = "voltage_offset"
    MAX_CPM = "max_cpm"
    SENSITIVITY_AUTO_MODE_THRESHOLD = "sensitivity_auto_mode_threshold"
    # YY MM DD and HH MM SS of the current logging run
    SAVE_DATE = "save_date"
    SAVE_TIME = "save_time"
    # Always 0xFF
    MAX_BYTES = "max_bytes"


FIELD_TABLE: Dict[FieldId, ConfigField] = {
    FieldId.POWER_ON_OFF: ConfigField(0, 1),
    FieldId.ALARM_ON_OFF: ConfigField(1, 1),
    FieldId.SPEAKER_ON_OFF: ConfigField(2, 1),
    FieldId.GRAPHIC_MODE_ON_OFF: ConfigField(3, 1),
    FieldId.BACKLIGHT_TIMEOUT_SECONDS: ConfigField(4, 1),
    FieldId.IDLE_TITLE_DISPLAY_MODE: ConfigField(5, 1),
    FieldId.ALARM_CPM_VALUE: ConfigField(6, 2),
    FieldId.CALIBRATION_CPM_0: ConfigField(8, 2),
    FieldId.CALIBRATION_SVUC_0: ConfigField(10, 4),
    FieldId.CALIBRATION_CPM_1: ConfigField(14, 2),
    FieldId.CALIBRATION_SVUC_1: ConfigField(16, 4),
    FieldId.CALIBRATION_CPM_2: ConfigField(20, 2),
    FieldId.CALIBRATION_SVUC_2: ConfigField(22, 4),
    FieldId.IDLE_DISPLAY_MODE: ConfigField(26, 1),
    FieldId.ALARM_VALUE_USVUC: ConfigField(27, 4),
    FieldId.ALARM_TYPE: ConfigField(31, 1),
    FieldId.SAVE_DATA_TYPE: ConfigField(32, 1),
    FieldId.SWIVEL_DISPLAY: ConfigField(33, 1),
    FieldId.ZOOM: ConfigField(34, 4),
    FieldId.DATA_SAVE_ADDRESS: ConfigField(38, 3),
    FieldId.DATA_READ_ADDRESS: ConfigField(41, 3),
    FieldId.POWER_SAVING_MODE: ConfigField(44, 1),
    FieldId.SENSITIVITY_MODE: ConfigField(45, 1),
    FieldId.COUNTER_DELAY: ConfigField(46, 2),
    FieldId.VOLTAGE_OFFSET: ConfigField(48, 1),
    FieldId.MAX_CPM: ConfigField(49, 2),
    FieldId.SENSITIVITY_AUTO_MODE_THRESHOLD: ConfigField(51, 1),
    FieldId.SAVE_DATE: ConfigField(52, 3),
    FieldId.SAVE_TIME: ConfigField(55, 3),
    FieldId.MAX_BYTES: ConfigField(58, 1),
}


def lookup_field(field: Union[FieldId, str]) -> ConfigField:
    """
    Resolve a field identifier to its table entry.

    Raises:
        ConfigurationError: If the field is unknown or lies outside the image
    """
    try:
        field_id = field if isinstance(field, FieldId) else FieldId(field)
        entry = FIELD_TABLE[field_id]
    except (ValueError, KeyError):
        raise ConfigurationError(f"Unknown configuration field: {field!r}")

    if entry.offset < 0 or entry.width < 1 or entry.offset + entry.width > NVM_SIZE:
        raise ConfigurationError(f"Field {field!r} lies outside the {NVM_SIZE}-byte image")
    return entry


class ConfigurationImage:
    """
    Fixed 256-byte configuration image.

    Individual bytes cannot be assigned; fields are changed through
    ``set_field`` and the whole image only through ``replace``.
    """

    def __init__(self, data: bytes = None):
        self._data = bytearray(NVM_SIZE)
        if data is not None:
            self.replace(data)

    def replace(self, data: bytes) -> None:
        """Overwrite the entire image with a fresh copy read from the device."""
        if len(data) != NVM_SIZE:
            raise ConfigurationError(
                f"Configuration image must be {NVM_SIZE} bytes, got {len(data)}")
        self._data[:] = data

    def replace_prefix(self, data: bytes) -> None:
        """Overwrite the start of the image with however many bytes the device sent."""
        if len(data) > NVM_SIZE:
            raise ConfigurationError(
                f"Configuration image must be {NVM_SIZE} bytes, got {len(data)}")
        self._data[:len(data)] = data

    def get_field(self, field: Union[FieldId, str]) -> int:
        """Return a field as an unsigned integer decoded from wire order."""
        entry = lookup_field(field)
        raw = self._data[entry.offset:entry.offset + entry.width]
        return int.from_bytes(raw, entry.byteorder)

    def get_field_bytes(self, field: Union[FieldId, str]) -> bytes:
        """Return a field's bytes exactly as they will be sent to the device."""
        entry = lookup_field(field)
        return bytes(self._data[entry.offset:entry.offset + entry.width])

    def set_field(self, field: Union[FieldId, str], value: Union[int, bytes, bytearray],
                  byte_count: int = None) -> None:
        """
        Store a value at the field's offset in wire order.

        Args:
            field: Field identifier
            value: Unsigned integer, or bytes already in wire order
            byte_count: Optional width asserted by the caller

        Raises:
            ConfigurationError: On width mismatch or out-of-range value
        """
        entry = lookup_field(field)
        if byte_count is not None and byte_count != entry.width:
            raise ConfigurationError(
                f"Field {field!r} is {entry.width} bytes wide, not {byte_count}")

        if isinstance(value, (bytes, bytearray)):
            if len(value) != entry.width:
                raise ConfigurationError(
                    f"Field {field!r} needs {entry.width} bytes, got {len(value)}")
            packed = bytes(value)
        else:
            try:
                packed = int(value).to_bytes(entry.width, entry.byteorder)
            except OverflowError:
                raise ConfigurationError(
                    f"Value {value!r} does not fit in {entry.width} byte(s) for {field!r}")

        self._data[entry.offset:entry.offset + entry.width] = packed

    def as_dict(self) -> Dict[str, int]:
        """Return all named fields, keyed by field name."""
        return {field_id.value: self.get_field(field_id) for field_id in FIELD_TABLE}

    def to_bytes(self) -> bytes:
        return bytes(self._data)

    def __len__(self):
        return NVM_SIZE

    def __getitem__(self, offset: int) -> int:
        return self._data[offset]

    def __eq__(self, other):
        if not isinstance(other, ConfigurationImage):
            return NotImplemented
        return self._data == other._data
