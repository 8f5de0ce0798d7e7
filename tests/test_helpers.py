import unittest
from unittest.mock import MagicMock, patch

from gqgmc.utils import helpers


class TestDetectSerialPort(unittest.TestCase):

    def _port(self, device, vid=None, pid=None, description="n/a"):
        port = MagicMock()
        port.device = device
        port.vid = vid
        port.pid = pid
        port.description = description
        return port

    def test_matches_bridge_vid_pid(self):
        ports = [self._port("/dev/ttyS0"), self._port("/dev/ttyUSB0", 0x1A86, 0x7523)]
        with patch.object(helpers.list_ports, "comports", return_value=ports):
            self.assertEqual(helpers.detect_serial_port(), "/dev/ttyUSB0")

    def test_matches_description(self):
        ports = [self._port("COM4", description="USB-SERIAL CH340 (COM4)")]
        with patch.object(helpers.list_ports, "comports", return_value=ports):
            self.assertEqual(helpers.detect_serial_port(), "COM4")

    def test_nothing_found(self):
        with patch.object(helpers.list_ports, "comports", return_value=[self._port("/dev/ttyS0")]):
            self.assertIsNone(helpers.detect_serial_port())
        with patch.object(helpers.list_ports, "comports", return_value=[]):
            self.assertIsNone(helpers.detect_serial_port())


if __name__ == '__main__':
    unittest.main()
