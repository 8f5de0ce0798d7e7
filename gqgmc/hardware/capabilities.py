"""
One accessor per measurement the counter can report.

Every accessor issues one fixed command and applies one decode rule. On a
failed read it returns a fixed default and sets one specific error code.
"""
from typing import Optional

from gqgmc.core.device import DeviceHandle
from gqgmc.core.errors import ErrorCode
from gqgmc.core.protocol import (
    Command, ResponseSize, Protocol, communicate, decode_count,
    HISTORY_DATA_MAXSIZE, HISTORY_ADDR_MAXSIZE
)

INVALID_VERSION = "invalidinvalid"
INVALID_SERIAL_NUMBER = "0" * (2 * ResponseSize.SERIAL)


def get_version(handle: DeviceHandle) -> str:
    """Return the 14-character model and firmware string, e.g. 'GMC-300Re 4.20'."""
    data = communicate(handle, Command.GET_VERSION, ResponseSize.VERSION)
    if not handle.errors.read_ok:
        handle.fail(ErrorCode.VERSION_READ_FAILED, "Version read failed")
        return INVALID_VERSION
    return data.decode("ascii", errors="replace")


def parse_firmware_revision(version: str) -> Optional[float]:
    """Extract the firmware revision from characters 10-13 of the version string."""
    try:
        return float(version[10:14])
    except ValueError:
        return None


def decode_serial_number(data: bytes) -> str:
    """Render each nibble of the raw serial number as a lowercase hex digit."""
    return "".join(f"{(b & 0xF0) >> 4:x}{b & 0x0F:x}" for b in data)


def get_serial_number(handle: DeviceHandle) -> str:
    """Return the 14 hex digit serial number."""
    data = communicate(handle, Command.GET_SERIAL, ResponseSize.SERIAL)
    if not handle.errors.read_ok:
        handle.fail(ErrorCode.SERIAL_READ_FAILED, "Serial number read failed")
        return INVALID_SERIAL_NUMBER
    return decode_serial_number(data)


def get_cpm(handle: DeviceHandle) -> int:
    """Return counts per minute."""
    data = communicate(handle, Command.GET_CPM, ResponseSize.COUNT)
    if not handle.errors.read_ok:
        handle.fail(ErrorCode.CPM_READ_FAILED, "CPM read failed")
        return 0
    return decode_count(data)


def get_cps(handle: DeviceHandle) -> int:
    """Return counts per second."""
    data = communicate(handle, Command.GET_CPS, ResponseSize.COUNT)
    if not handle.errors.read_ok:
        handle.fail(ErrorCode.CPS_READ_FAILED, "CPS read failed")
        return 0
    return decode_count(data)


def decode_voltage(data: bytes) -> float:
    """Convert the signed voltage byte to volts."""
    return int.from_bytes(data[:1], "big", signed=True) / 10.0


def get_battery_voltage(handle: DeviceHandle) -> float:
    """Return the battery voltage in volts."""
    data = communicate(handle, Command.GET_VOLTAGE, ResponseSize.VOLTAGE)
    if not handle.errors.read_ok:
        handle.fail(ErrorCode.VOLTAGE_READ_FAILED, "Battery voltage read failed")
        return 0.0
    return decode_voltage(data)


def validate_history_request(address: int, length: int) -> ErrorCode:
    """
    Check a history request against the buffer limits.

    Returns:
        ErrorCode: NO_PROBLEM, or the first violated limit in the order
        length, address, overrun
    """
    if length > HISTORY_DATA_MAXSIZE:
        return ErrorCode.HISTORY_LENGTH_EXCEEDED
    if address > HISTORY_ADDR_MAXSIZE:
        return ErrorCode.HISTORY_ADDRESS_EXCEEDED
    if address + length > HISTORY_ADDR_MAXSIZE:
        return ErrorCode.HISTORY_OVERRUN
    return ErrorCode.NO_PROBLEM


def get_history_data(handle: DeviceHandle, address: int, length: int) -> bytes:
    """
    Read raw bytes from the history buffer.

    The result is always HISTORY_DATA_MAXSIZE bytes: the requested bytes at
    the head, zeros after. On any failure the result is all zeros.
    Decoding the tagged records is left to the caller.

    Args:
        handle: Device handle
        address: Start address in the 64k history buffer
        length: Number of bytes to read, at most 4096

    Returns:
        bytes: Zero-padded history data
    """
    if address < 0 or length < 0:
        raise ValueError("History address and length must not be negative")

    buffer = bytearray(HISTORY_DATA_MAXSIZE)

    code = validate_history_request(address, length)
    if code != ErrorCode.NO_PROBLEM:
        handle.errors.reset()
        handle.errors.read_ok = False
        handle.fail(code, "Rejected history request address=%d length=%d", address, length)
        return bytes(buffer)

    data = communicate(handle, Protocol.history_command(address, length), length)
    if not handle.errors.read_ok:
        handle.fail(ErrorCode.HISTORY_READ_FAILED,
                    "History read failed at address=%d length=%d", address, length)
        return bytes(buffer)

    buffer[:length] = data
    return bytes(buffer)
