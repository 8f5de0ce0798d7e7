"""
Heartbeat mode: the counter pushes a 2-byte CPS sample every second.

While the heartbeat is on the request/response alternation no longer
holds: other commands still go out but their responses interleave with
samples. A sample already in flight when the heartbeat is turned off is
drained by a best-effort buffer clear; one that arrives later than that
still lands in the input. That race is a property of the device.
"""
from gqgmc.core.device import DeviceHandle
from gqgmc.core.errors import ErrorCode
from gqgmc.core.protocol import (
    Command, ResponseSize, send_command, read_response, clear_input_buffer, decode_count
)


def turn_on(handle: DeviceHandle) -> None:
    handle.errors.reset()
    send_command(handle, Command.HEARTBEAT_ON)
    handle.streaming = handle.errors.read_ok
    if handle.streaming:
        handle.logger.info("Heartbeat on")


def turn_off(handle: DeviceHandle) -> None:
    handle.errors.reset()
    send_command(handle, Command.HEARTBEAT_OFF)
    handle.streaming = False
    # A CLEAR_FAILED here is advisory
    clear_input_buffer(handle)
    handle.logger.info("Heartbeat off")


def read_streamed(handle: DeviceHandle) -> int:
    """
    Read the next pushed CPS sample without clearing the input first.

    Returns:
        int: Counts per second, or 0 if no complete sample arrived
    """
    handle.errors.reset()
    data = read_response(handle, ResponseSize.COUNT)
    if not handle.errors.read_ok:
        handle.fail(ErrorCode.AUTO_CPS_READ_FAILED, "Heartbeat sample read failed")
        return 0
    return decode_count(data)
