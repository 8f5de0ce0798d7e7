"""
Configuration shadow management and the NVM commit sequence.

Changes are staged in the handle's ConfigurationImage with ``write_field``
and reach the device only through ``commit``, which erases the NVM, writes
all 256 bytes one at a time and then tells the counter to apply them.
The sequence is not atomic: a failure part-way leaves the device NVM
partially written, and nothing here can roll it back.
"""
from enum import IntEnum
from typing import Union

from gqgmc.core.device import DeviceHandle
from gqgmc.core.errors import ErrorCode
from gqgmc.core.image import FieldId, NVM_SIZE
from gqgmc.core.protocol import Command, ResponseSize, Protocol, communicate

# Leaves room for the date/timestamp record at the start of the buffer
DATA_SAVE_ADDRESS_START = 0x10


class SaveDataType(IntEnum):
    """What the counter logs into its history buffer."""
    OFF = 0  # logging disabled
    CPS = 1  # counts per second, every second
    CPM = 2  # counts per minute, every minute
    CPH = 3  # CPM averaged over an hour, every hour


def fetch(handle: DeviceHandle) -> bool:
    """
    Replace the shadow image with the device's current NVM contents.

    Call right after opening and whenever the device may have been changed
    from its front panel. The image is always overwritten: on a short read
    the bytes that did arrive replace the start of the image and the rest
    keeps its previous contents.

    Returns:
        bool: True if the full image was read
    """
    data = communicate(handle, Command.GET_CFG, ResponseSize.CONFIG)
    handle.image.replace_prefix(data)
    if not handle.errors.read_ok:
        handle.fail(ErrorCode.CFG_READ_FAILED,
                    "Configuration read failed after %d of %d bytes", len(data), NVM_SIZE)
        return False

    handle.logger.debug("Fetched configuration: %s", handle.image.as_dict())
    return True


def write_field(handle: DeviceHandle, field: Union[FieldId, str],
                value: Union[int, bytes, bytearray], byte_count: int = None) -> None:
    """
    Stage a field value in the shadow image. Nothing is sent to the device.

    Raises:
        ConfigurationError: For unknown fields, width mismatches or values
            that do not fit the field
    """
    handle.image.set_field(field, value, byte_count)
    handle.logger.debug("Staged %s = %r", field, value)


def read_field(handle: DeviceHandle, field: Union[FieldId, str]) -> int:
    """Return a field's value from the shadow image."""
    return handle.image.get_field(field)


def erase(handle: DeviceHandle) -> bool:
    communicate(handle, Command.ERASE_CFG, ResponseSize.ACK)
    if not handle.errors.read_ok:
        handle.fail(ErrorCode.ERASE_FAILED, "Configuration erase was not acknowledged")
        return False
    return True


def load(handle: DeviceHandle) -> bool:
    """
    Write every byte of the shadow image to the device NVM.

    Stops at the first unacknowledged write; the NVM is then partially
    written.
    """
    image = handle.image.to_bytes()
    for offset in range(NVM_SIZE):
        communicate(handle, Protocol.write_config_command(offset, image[offset]), ResponseSize.ACK)
        if not handle.errors.read_ok:
            handle.fail(ErrorCode.WRITE_FAILED,
                        "Configuration write not acknowledged at offset %d; "
                        "device NVM is partially written", offset)
            return False
    return True


def update(handle: DeviceHandle) -> bool:
    communicate(handle, Command.UPDATE_CFG, ResponseSize.ACK)
    if not handle.errors.read_ok:
        handle.fail(ErrorCode.UPDATE_FAILED, "Configuration update was not acknowledged")
        return False
    return True


def commit(handle: DeviceHandle) -> bool:
    """
    Apply the shadow image to the device: erase, load all bytes, update.

    Takes several hundred round trips and blocks throughout. No step is
    retried and a failed step ends the sequence.

    Returns:
        bool: True if every step was acknowledged
    """
    handle.logger.info("Committing configuration")
    if not erase(handle):
        return False
    if not load(handle):
        return False
    if not update(handle):
        return False
    handle.logger.info("Configuration committed")
    return True


def get_save_data_type(handle: DeviceHandle) -> SaveDataType:
    value = read_field(handle, FieldId.SAVE_DATA_TYPE)
    try:
        return SaveDataType(value)
    except ValueError:
        handle.logger.warning("Unknown save data type %d in configuration", value)
        return SaveDataType.OFF


def set_save_data_type(handle: DeviceHandle, save_data_type: SaveDataType) -> None:
    """Stage a new logging mode. Call ``commit`` to apply it."""
    write_field(handle, FieldId.SAVE_DATA_TYPE, int(SaveDataType(save_data_type)))


def get_data_save_address(handle: DeviceHandle) -> int:
    return read_field(handle, FieldId.DATA_SAVE_ADDRESS)


def reset_data_save_address(handle: DeviceHandle) -> None:
    """Stage logging to restart near the beginning of the history buffer."""
    write_field(handle, FieldId.DATA_SAVE_ADDRESS, DATA_SAVE_ADDRESS_START)
