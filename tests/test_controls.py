import datetime
import unittest

from gqgmc.core.errors import ErrorCode
from gqgmc.core.protocol import Command
from gqgmc.hardware import controls
from gqgmc.hardware.controls import SoftKey
from tests.fake_serial import FakeSerial, open_fake_handle


class TestControls(unittest.TestCase):

    def test_send_key(self):
        fake = FakeSerial()
        handle = open_fake_handle(fake)

        controls.send_key(handle, SoftKey.ENTER)
        controls.send_key(handle, SoftKey.KEY1)

        self.assertEqual(fake.writes, [b"<KEY3>>", b"<KEY0>>"])
        self.assertEqual(handle.error_code, ErrorCode.NO_PROBLEM)

    def test_set_date(self):
        fake = FakeSerial(replies=[b"\xAA"] * 3)
        handle = open_fake_handle(fake)

        self.assertTrue(controls.set_date(handle, datetime.date(2024, 10, 19)))

        self.assertEqual(fake.writes, [
            b"<SETDATEMM\x0A>>", b"<SETDATEDD\x13>>", b"<SETDATEYY\x18>>"
        ])

    def test_set_time_stops_at_first_failure(self):
        fake = FakeSerial(replies=[b"\xAA", b""])
        handle = open_fake_handle(fake)

        self.assertFalse(controls.set_time(handle, datetime.time(13, 30, 5)))

        self.assertEqual(fake.writes, [b"<SETTIMEHH\x0D>>", b"<SETTIMEMM\x1E>>"])
        self.assertEqual(handle.error_code, ErrorCode.SET_MINUTE_FAILED)

    def test_turn_off_power(self):
        fake = FakeSerial()
        handle = open_fake_handle(fake)

        controls.turn_off_power(handle)

        self.assertEqual(fake.writes, [Command.POWER_OFF])
        self.assertEqual(fake.read_calls, 0)


if __name__ == '__main__':
    unittest.main()
