"""
Front-panel emulation, clock setting and power off.
"""
import datetime
from enum import Enum

from gqgmc.core.device import DeviceHandle
from gqgmc.core.errors import ErrorCode
from gqgmc.core.protocol import Command, ResponseSize, Protocol, communicate, send_command


class SoftKey(Enum):
    """
    Front-panel keys. The manual numbers them 1-4; the wire values are
    ASCII '0'-'3'.
    """
    LEFT_ARROW = "0"
    UP_ARROW = "1"
    DOWN_ARROW = "2"
    ENTER = "3"

    KEY1 = "0"
    KEY2 = "1"
    KEY3 = "2"
    KEY4 = "3"


def send_key(handle: DeviceHandle, key: SoftKey) -> None:
    """Press a front-panel key. The counter sends no response."""
    communicate(handle, Protocol.key_command(SoftKey(key).value), 0)


def _set_clock_parts(handle: DeviceHandle, parts) -> bool:
    for name, value, code in parts:
        communicate(handle, Protocol.set_clock_command(name, value), ResponseSize.ACK)
        if not handle.errors.read_ok:
            handle.fail(code, "%s=%d was not acknowledged", name, value)
            return False
    return True


def set_date(handle: DeviceHandle, date: datetime.date) -> bool:
    """
    Set the counter's calendar date.

    Month, day and year are sent as three separate commands; the first
    unacknowledged one ends the sequence.
    """
    return _set_clock_parts(handle, [
        ("SETDATEMM", date.month, ErrorCode.SET_MONTH_FAILED),
        ("SETDATEDD", date.day, ErrorCode.SET_DAY_FAILED),
        ("SETDATEYY", date.year % 100, ErrorCode.SET_YEAR_FAILED),
    ])


def set_time(handle: DeviceHandle, time: datetime.time) -> bool:
    """Set the counter's time of day (hour, minute, second)."""
    return _set_clock_parts(handle, [
        ("SETTIMEHH", time.hour, ErrorCode.SET_HOUR_FAILED),
        ("SETTIMEMM", time.minute, ErrorCode.SET_MINUTE_FAILED),
        ("SETTIMESS", time.second, ErrorCode.SET_SECOND_FAILED),
    ])


def turn_off_power(handle: DeviceHandle) -> None:
    handle.errors.reset()
    send_command(handle, Command.POWER_OFF)
    handle.logger.info("Power off requested")
