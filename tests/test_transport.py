import unittest
from unittest.mock import MagicMock, patch

import serial

from gqgmc.config import settings
from gqgmc.core.exceptions import DeviceDisconnectedError, OpenFailedError
from gqgmc.core.transport import SerialTransport


class TestSerialTransport(unittest.TestCase):

    @patch('gqgmc.core.transport.serial.Serial')
    def test_open_uses_raw_line_settings(self, mock_serial_cls):
        mock_ser = MagicMock()
        mock_serial_cls.return_value = mock_ser

        transport = SerialTransport()
        transport.open("/dev/ttyUSB0")

        mock_serial_cls.assert_called_once_with(
            port="/dev/ttyUSB0",
            baudrate=settings.DEFAULT_BAUDRATE,
            timeout=settings.SERIAL_TIMEOUT,
            bytesize=serial.EIGHTBITS,
            parity=serial.PARITY_NONE,
            stopbits=serial.STOPBITS_ONE,
            xonxoff=False,
            rtscts=False,
            dsrdtr=False
        )
        self.assertEqual(transport.path, "/dev/ttyUSB0")
        self.assertIsNone(mock_ser.inter_byte_timeout)

    def test_defaults_come_from_settings(self):
        transport = SerialTransport()

        self.assertEqual(transport.baudrate, settings.DEFAULT_BAUDRATE)
        self.assertEqual(transport.timeout, settings.SERIAL_TIMEOUT)
        self.assertEqual(settings.DEFAULTS["DEFAULT_BAUDRATE"], 57600)
        self.assertEqual(settings.DEFAULTS["SERIAL_TIMEOUT"], 0.5)

    @patch('gqgmc.core.transport.serial.Serial')
    def test_configure_changes_timeout_on_open_port(self, mock_serial_cls):
        mock_ser = MagicMock()
        mock_serial_cls.return_value = mock_ser
        transport = SerialTransport(baudrate=57600, timeout=0.5)
        transport.open("/dev/ttyUSB0")

        transport.configure(timeout=0.1)

        self.assertEqual(mock_ser.timeout, 0.1)

    @patch('gqgmc.core.transport.serial.Serial')
    def test_open_failure(self, mock_serial_cls):
        mock_serial_cls.side_effect = serial.SerialException("Permission denied")

        transport = SerialTransport()
        with self.assertRaises(OpenFailedError):
            transport.open("/dev/ttyUSB0")
        self.assertFalse(transport.is_open)

    @patch('gqgmc.core.transport.serial.Serial')
    def test_read_byte(self, mock_serial_cls):
        mock_ser = MagicMock()
        mock_ser.is_open = True
        mock_ser.read.side_effect = [b'\x7f', b'']
        mock_serial_cls.return_value = mock_ser
        transport = SerialTransport()
        transport.open("/dev/ttyUSB0")

        self.assertEqual(transport.read_byte(), 0x7F)
        self.assertIsNone(transport.read_byte())
        mock_ser.read.assert_called_with(1)

    @patch('gqgmc.core.transport.serial.Serial')
    def test_write_failure_raises_disconnected(self, mock_serial_cls):
        mock_ser = MagicMock()
        mock_ser.is_open = True
        mock_ser.write.side_effect = serial.SerialException("device reports readiness to read but returned no data")
        mock_serial_cls.return_value = mock_ser
        transport = SerialTransport()
        transport.open("/dev/ttyUSB0")

        with self.assertRaises(DeviceDisconnectedError):
            transport.write(b"<GETCPM>>")

    def test_closed_transport(self):
        transport = SerialTransport()

        self.assertFalse(transport.is_open)
        with self.assertRaises(DeviceDisconnectedError):
            transport.read_byte()
        transport.close()

    @patch('gqgmc.core.transport.serial.Serial')
    def test_close(self, mock_serial_cls):
        mock_ser = MagicMock()
        mock_ser.is_open = True
        mock_serial_cls.return_value = mock_ser
        transport = SerialTransport()
        transport.open("/dev/ttyUSB0")

        transport.close()

        mock_ser.close.assert_called_once()
        self.assertFalse(transport.is_open)


if __name__ == '__main__':
    unittest.main()
