import unittest

from gqgmc.core.errors import ErrorCode
from gqgmc.core.protocol import Command
from gqgmc.hardware import capabilities, streaming
from tests.fake_serial import FakeSerial, open_fake_handle


class TestHeartbeat(unittest.TestCase):

    def test_turn_on_sends_without_clearing(self):
        fake = FakeSerial(pending=b"\x00\x05")
        handle = open_fake_handle(fake)

        streaming.turn_on(handle)

        self.assertTrue(handle.streaming)
        self.assertEqual(fake.writes, [Command.HEARTBEAT_ON])
        self.assertEqual(fake.read_calls, 0)

    def test_read_streamed_samples(self):
        fake = FakeSerial(replies=[b"\x00\x05\x40\x06"])
        handle = open_fake_handle(fake)
        streaming.turn_on(handle)

        self.assertEqual(streaming.read_streamed(handle), 5)
        self.assertEqual(streaming.read_streamed(handle), 6)
        self.assertEqual(fake.writes, [Command.HEARTBEAT_ON])

    def test_missing_sample(self):
        fake = FakeSerial(replies=[b"\x00"])
        handle = open_fake_handle(fake)
        streaming.turn_on(handle)

        self.assertEqual(streaming.read_streamed(handle), 0)
        self.assertEqual(handle.error_code, ErrorCode.AUTO_CPS_READ_FAILED)

    def test_turn_off_drains_in_flight_sample(self):
        fake = FakeSerial(replies=[b"", b"\x00\x09"])
        handle = open_fake_handle(fake)
        streaming.turn_on(handle)

        streaming.turn_off(handle)

        self.assertFalse(handle.streaming)
        self.assertEqual(fake.writes, [Command.HEARTBEAT_ON, Command.HEARTBEAT_OFF])
        self.assertEqual(fake.input, bytearray())
        self.assertEqual(handle.error_code, ErrorCode.NO_PROBLEM)

    def test_turn_off_clear_failure_is_reported_not_raised(self):
        fake = FakeSerial(stuck=True)
        handle = open_fake_handle(fake)

        streaming.turn_off(handle)

        self.assertFalse(handle.streaming)
        self.assertEqual(handle.error_code, ErrorCode.CLEAR_FAILED)

    def test_commands_still_go_out_while_streaming(self):
        fake = FakeSerial(replies=[b"", b"\x00\x01"])
        handle = open_fake_handle(fake)
        streaming.turn_on(handle)

        with self.assertLogs("gqgmc.device", level="WARNING"):
            capabilities.get_cpm(handle)

        self.assertEqual(fake.writes[-1], Command.GET_CPM)


if __name__ == '__main__':
    unittest.main()
