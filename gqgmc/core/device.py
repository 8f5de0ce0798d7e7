"""
Per-device state shared by all protocol operations.
"""
from typing import Optional

from gqgmc.core.errors import ErrorCode, ErrorState
from gqgmc.core.image import ConfigurationImage
from gqgmc.core.transport import SerialTransport
from gqgmc.utils.logging import get_logger


class DeviceHandle:
    """
    Exclusive owner of one counter connection.

    Holds the transport, the configuration shadow image and the sticky
    error state. Operations in ``gqgmc.core.protocol`` and
    ``gqgmc.hardware`` take a handle as their first argument. A handle must
    only be used by one caller at a time.
    """

    def __init__(self, path: Optional[str] = None, transport: Optional[SerialTransport] = None):
        self.path = path
        self.transport = transport if transport is not None else SerialTransport()
        self.errors = ErrorState()
        self.image = ConfigurationImage()
        self.firmware_revision: Optional[float] = None
        self.streaming = False
        self.logger = get_logger("gqgmc.device", device=path)

    @property
    def is_open(self) -> bool:
        return self.transport.is_open

    @property
    def error_code(self) -> ErrorCode:
        return self.errors.code

    def fail(self, code: ErrorCode, message: str, *args) -> None:
        """Set the sticky error code and log the failure once."""
        self.errors.set(code)
        self.logger.warning(message, *args)

    def __repr__(self):
        state = "open" if self.is_open else "closed"
        return f"DeviceHandle({self.path!r}, {state}, {self.errors.code.name})"
