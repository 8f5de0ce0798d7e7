"""
Raw byte transport to the counter's USB-serial bridge.
"""
import serial
from typing import Optional

from gqgmc.config import settings
from gqgmc.utils.logging import get_logger
from gqgmc.core.exceptions import OpenFailedError, DeviceDisconnectedError

# Initialize module logger
logger = get_logger(__name__)

class SerialTransport:
    """
    Byte-oriented serial channel with a per-byte read timeout.

    The line discipline is raw 8N1 with no flow control. A read waits at
    most ``timeout`` seconds for a single byte and never requires a minimum
    number of bytes, so a silent device can never block a caller forever.
    """

    def __init__(self, baudrate: Optional[int] = None, timeout: Optional[float] = None):
        self._path = None
        self._serial = None
        self.baudrate = baudrate if baudrate is not None else settings.DEFAULT_BAUDRATE
        self.timeout = timeout if timeout is not None else settings.SERIAL_TIMEOUT

    @property
    def path(self) -> Optional[str]:
        return self._path

    @property
    def is_open(self) -> bool:
        return self._serial is not None and self._serial.is_open

    def open(self, path: str) -> None:
        """
        Open and configure the serial device.

        Args:
            path: Device path, for example /dev/ttyUSB0 or COM3

        Raises:
            OpenFailedError: If the port cannot be opened
        """
        if self.is_open:
            self.close()

        logger.debug("Opening %s at %d baud", path, self.baudrate)
        try:
            self._serial = serial.Serial(
                port=path,
                baudrate=self.baudrate,
                timeout=self.timeout,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                xonxoff=False,
                rtscts=False,
                dsrdtr=False
            )
        except (serial.SerialException, ValueError, OSError) as e:
            logger.error("Failed to open %s: %s", path, str(e))
            self._serial = None
            raise OpenFailedError(f"Could not open {path}: {str(e)}") from e

        self._path = path
        self.configure()
        logger.info("Opened %s at %d baud", path, self.baudrate)

    def configure(self, timeout: Optional[float] = None) -> None:
        """
        (Re)apply the raw line discipline to the open port.

        Args:
            timeout: New per-byte read timeout in seconds, or None to keep
        """
        if timeout is not None:
            self.timeout = timeout
        if self._serial is None:
            return

        self._serial.baudrate = self.baudrate
        self._serial.bytesize = serial.EIGHTBITS
        self._serial.parity = serial.PARITY_NONE
        self._serial.stopbits = serial.STOPBITS_ONE
        self._serial.xonxoff = False
        self._serial.rtscts = False
        self._serial.timeout = self.timeout
        self._serial.inter_byte_timeout = None

    def write(self, data: bytes) -> None:
        """
        Write bytes verbatim.

        Raises:
            DeviceDisconnectedError: If the port is closed or the write fails
        """
        if not self.is_open:
            raise DeviceDisconnectedError("Serial port is not open")

        try:
            self._serial.write(data)
            self._serial.flush()
        except serial.SerialException as e:
            logger.error("Error writing to %s: %s", self._path, str(e))
            raise DeviceDisconnectedError(f"Error sending data: {str(e)}") from e

    def read_byte(self) -> Optional[int]:
        """
        Read a single byte.

        Returns:
            Optional[int]: The byte value, or None if the timeout expired

        Raises:
            DeviceDisconnectedError: If the port is closed or the read fails
        """
        if not self.is_open:
            raise DeviceDisconnectedError("Serial port is not open")

        try:
            data = self._serial.read(1)
        except serial.SerialException as e:
            logger.error("Error reading from %s: %s", self._path, str(e))
            raise DeviceDisconnectedError(f"Error reading data: {str(e)}") from e

        if not data:
            return None
        return data[0]

    def close(self) -> None:
        """Close the port; safe to call more than once."""
        if self._serial is not None and self._serial.is_open:
            try:
                self._serial.close()
            except serial.SerialException as e:
                logger.warning("Error closing serial port: %s", str(e))
            logger.info("Closed %s", self._path)
        self._serial = None
