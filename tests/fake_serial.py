"""
Scripted stand-in for serial.Serial.

Each write queues the next scripted reply into the input buffer; reads
return one queued byte or b'' as a real port does when its timeout expires.
"""
from unittest.mock import patch

from gqgmc.core.device import DeviceHandle
from gqgmc.core.transport import SerialTransport

PORT = "/dev/ttyUSB0"


class FakeSerial:

    def __init__(self, replies=None, pending=b"", stuck=False):
        self.is_open = True
        self.replies = list(replies or [])
        self.input = bytearray(pending)
        self.stuck = stuck
        self.writes = []
        self.read_calls = 0

    def write(self, data):
        self.writes.append(bytes(data))
        if self.replies:
            self.input += self.replies.pop(0)
        return len(data)

    def flush(self):
        pass

    def read(self, size=1):
        self.read_calls += 1
        if self.stuck:
            return b"\x00" * size
        chunk = bytes(self.input[:size])
        del self.input[:size]
        return chunk

    def close(self):
        self.is_open = False


def open_fake_transport(fake):
    with patch("gqgmc.core.transport.serial.Serial", return_value=fake):
        transport = SerialTransport()
        transport.open(PORT)
    return transport


def open_fake_handle(fake):
    """Return a DeviceHandle whose transport talks to ``fake``."""
    return DeviceHandle(PORT, open_fake_transport(fake))
