"""
Opening and closing a counter.
"""
from typing import Optional

from gqgmc.config import settings
from gqgmc.core.device import DeviceHandle
from gqgmc.core.errors import ErrorCode
from gqgmc.core.exceptions import OpenFailedError
from gqgmc.core.transport import SerialTransport
from gqgmc.hardware.capabilities import get_version, parse_firmware_revision
from gqgmc.hardware.configuration import fetch


def open_device(path: str, transport: Optional[SerialTransport] = None) -> DeviceHandle:
    """
    Open a counter and prime the configuration shadow.

    The firmware version is read first; if that works the configuration
    image is fetched. Firmware older than NEW_FIRMWARE_REVISION leaves the
    OLDER_FIRMWARE advisory set, unless another error is pending.

    Args:
        path: Serial device path
        transport: Transport to use, mainly for tests

    Returns:
        DeviceHandle: The handle; check ``error_code`` for USB_OPEN_FAILED
    """
    handle = DeviceHandle(path, transport)
    try:
        handle.transport.open(path)
    except OpenFailedError as e:
        handle.fail(ErrorCode.USB_OPEN_FAILED, "Could not open %s: %s", path, str(e))
        return handle

    version = get_version(handle)
    if not handle.errors.read_ok:
        return handle

    handle.logger.info("Connected to %s", version)
    handle.firmware_revision = parse_firmware_revision(version)
    fetch(handle)

    minimum = settings.get("NEW_FIRMWARE_REVISION", 2.23)
    if handle.firmware_revision is None:
        handle.logger.warning("Could not parse firmware revision from %r", version)
    elif handle.firmware_revision < minimum and handle.errors.ok:
        handle.fail(ErrorCode.OLDER_FIRMWARE,
                    "Firmware %.2f is older than %.2f; some commands may not work",
                    handle.firmware_revision, minimum)
    return handle


def close_device(handle: DeviceHandle) -> None:
    """Close the transport. Safe to call on a closed handle."""
    if handle.streaming:
        handle.logger.warning("Closing while the heartbeat is still on")
        handle.streaming = False
    handle.transport.close()
