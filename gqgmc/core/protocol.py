"""
Command framing and the request/response exchange with the counter.

The counter's protocol has no envelope: a command is ASCII ``<NAME>>`` with
any binary parameters placed verbatim before the closing ``>>``, and a
response is a fixed number of bytes that depends on the command. The only
way to detect a failed exchange is a read that runs out of time before the
expected number of bytes arrived.
"""
from typing import Union

from gqgmc.config import settings
from gqgmc.core.device import DeviceHandle
from gqgmc.core.errors import ErrorCode
from gqgmc.core.exceptions import CommunicationError

HISTORY_DATA_MAXSIZE = 0x1000   # 4k bytes per request
HISTORY_ADDR_MAXSIZE = 0x10000  # 64k history buffer

# History buffer record markers, for external decoders
HISTORY_MARKER = b"\x55\xAA"
HISTORY_TAG_TIMESTAMP = 0x00
HISTORY_TAG_DOUBLE_BYTE = 0x01
HISTORY_TAG_LABEL = 0x02


class Command:
    """Fixed command strings."""
    GET_VERSION = b"<GETVER>>"
    GET_SERIAL = b"<GETSERIAL>>"
    GET_VOLTAGE = b"<GETVOLT>>"
    GET_CPM = b"<GETCPM>>"
    GET_CPS = b"<GETCPS>>"
    GET_CFG = b"<GETCFG>>"
    ERASE_CFG = b"<ECFG>>"
    UPDATE_CFG = b"<CFGUPDATE>>"
    HEARTBEAT_ON = b"<HEARTBEAT1>>"
    HEARTBEAT_OFF = b"<HEARTBEAT0>>"
    POWER_OFF = b"<POWEROFF>>"


class ResponseSize:
    """Number of bytes returned by each command."""
    VERSION = 14
    SERIAL = 7
    COUNT = 2
    VOLTAGE = 1
    CONFIG = 256
    ACK = 1


class Protocol:
    """
    Builds commands that carry binary parameters.
    """

    @staticmethod
    def frame(name: Union[str, bytes], params: bytes = b"") -> bytes:
        """
        Frame a command.

        Args:
            name: Command name without the leading '<'
            params: Binary parameters placed before the closing '>>'

        Returns:
            bytes: Framed command
        """
        if isinstance(name, str):
            name = name.encode("ascii")
        return b"<" + name + bytes(params) + b">>"

    @staticmethod
    def history_command(address: int, length: int) -> bytes:
        """
        Build the history read command.

        The address is sent as 3 big-endian bytes. The length is sent low
        byte first, then high byte, which is the order the counter expects.
        """
        params = address.to_bytes(3, "big") + bytes([length & 0xFF, (length >> 8) & 0xFF])
        return Protocol.frame("SPIR", params)

    @staticmethod
    def write_config_command(offset: int, value: int) -> bytes:
        """Build the single-byte NVM write command."""
        return Protocol.frame("WCFG", bytes([offset & 0xFF, value & 0xFF]))

    @staticmethod
    def key_command(key: str) -> bytes:
        """Build the front-panel key emulation command."""
        return Protocol.frame("KEY", key.encode("ascii"))

    @staticmethod
    def set_clock_command(name: str, value: int) -> bytes:
        """Build one of the SETDATE*/SETTIME* commands."""
        return Protocol.frame(name, bytes([value & 0xFF]))


def decode_count(data: bytes) -> int:
    """
    Decode a 2-byte count (CPM or CPS).

    The top two bits of the first byte are reserved and always masked.
    """
    return ((data[0] & 0x3F) << 8) | data[1]


def send_command(handle: DeviceHandle, command: bytes) -> None:
    """
    Transmit a command verbatim.

    A transport failure marks the exchange failed instead of raising.
    """
    if not handle.is_open:
        handle.errors.read_ok = False
        handle.logger.debug("Not sending %r: device is not open", command)
        return

    try:
        handle.transport.write(command)
        handle.logger.debug("Sent %r", command)
    except CommunicationError as e:
        handle.errors.read_ok = False
        handle.logger.error("Error sending %r: %s", command, str(e))


def read_response(handle: DeviceHandle, expected_length: int) -> bytes:
    """
    Read a fixed-length response one byte at a time.

    At most ``expected_length`` read attempts are made, each bounded by the
    transport timeout. If fewer than ``expected_length`` bytes arrive the
    exchange is marked failed.

    Args:
        handle: Device handle
        expected_length: Number of bytes the command returns

    Returns:
        bytes: The bytes actually received (possibly short)
    """
    received = bytearray()
    handle.errors.read_ok = True

    if not handle.is_open:
        handle.errors.read_ok = False
        return bytes(received)

    try:
        for _ in range(expected_length):
            value = handle.transport.read_byte()
            if value is not None:
                received.append(value)
            if len(received) >= expected_length:
                break
    except CommunicationError as e:
        handle.logger.error("Error reading response: %s", str(e))

    if len(received) < expected_length:
        handle.errors.read_ok = False
        handle.logger.debug("Short response: %d of %d bytes", len(received), expected_length)
    else:
        handle.logger.debug("Received %d bytes", len(received))

    return bytes(received)


def clear_input_buffer(handle: DeviceHandle) -> bool:
    """
    Drain stray bytes left over from a previous exchange.

    Reads up to CLEAR_MAX_TRIES bytes expecting the stream to go quiet. If
    it never does, CLEAR_FAILED is set; callers may carry on.

    Returns:
        bool: True if the input went quiet
    """
    if not handle.is_open:
        return False

    max_tries = settings.get("CLEAR_MAX_TRIES", 10)
    try:
        for _ in range(max_tries):
            if handle.transport.read_byte() is None:
                return True
    except CommunicationError as e:
        handle.logger.error("Error clearing input: %s", str(e))
        return False

    handle.fail(ErrorCode.CLEAR_FAILED,
                "Input did not go quiet after %d bytes", max_tries)
    return False


def communicate(handle: DeviceHandle, command: bytes, expected_length: int) -> bytes:
    """
    Perform one request/response exchange.

    The error state is reset, the input buffer is always cleared first, then
    the command is sent (if any) and the response read (if any).

    Args:
        handle: Device handle
        command: Framed command, or b"" to only read
        expected_length: Number of response bytes, or 0 for none

    Returns:
        bytes: Response bytes; check ``handle.errors.read_ok``
    """
    handle.errors.reset()

    if not handle.is_open:
        handle.errors.read_ok = False
        handle.logger.debug("Exchange %r skipped: device is not open", command)
        return b""

    if handle.streaming:
        handle.logger.warning("Sending %r while streaming; responses will interleave", command)

    clear_input_buffer(handle)

    if command:
        send_command(handle, command)
        if not handle.errors.read_ok:
            return b""

    if expected_length > 0:
        return read_response(handle, expected_length)
    return b""
