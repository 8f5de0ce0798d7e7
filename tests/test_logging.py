import logging
import os
import sys
import tempfile
import unittest
from unittest.mock import patch

from gqgmc.config import settings
from gqgmc.utils.logging import (
    ColoredFormatter, DeviceLoggerAdapter, LoggerAdapter, get_logger, setup_logging
)


class TestLogging(unittest.TestCase):

    def setUp(self):
        self._excepthook = sys.excepthook
        self._handlers = logging.getLogger().handlers[:]

    def tearDown(self):
        sys.excepthook = self._excepthook
        root = logging.getLogger()
        for handler in root.handlers[:]:
            root.removeHandler(handler)
        for handler in self._handlers:
            root.addHandler(handler)

    def test_get_logger_binds_device(self):
        adapter = get_logger("gqgmc.test", device="/dev/ttyUSB0")

        self.assertIsInstance(adapter, DeviceLoggerAdapter)
        _, kwargs = adapter.process("msg", {})
        self.assertEqual(kwargs["extra"]["device"], "/dev/ttyUSB0")
        self.assertIn("thread_name", kwargs["extra"])

    def test_plain_logger_has_default_context(self):
        adapter = get_logger("gqgmc.test")

        self.assertIsInstance(adapter, LoggerAdapter)
        _, kwargs = adapter.process("msg", {})
        self.assertEqual(kwargs["extra"]["device"], "none")

    def test_setup_logging_console_only(self):
        with patch.dict(settings._settings, {"LOG_TO_FILE": False, "LOG_TO_CONSOLE": True}):
            logger = setup_logging()

        self.assertEqual(logger.name, "gqgmc")
        handlers = logging.getLogger().handlers
        self.assertEqual(len(handlers), 1)
        self.assertIsInstance(handlers[0].formatter, ColoredFormatter)
        self.assertIsNot(sys.excepthook, self._excepthook)

    def test_setup_logging_to_files(self):
        with tempfile.TemporaryDirectory() as tmp:
            with patch.dict(settings._settings, {"LOG_TO_FILE": True, "LOG_TO_CONSOLE": False,
                                                 "LOG_DIR": tmp}):
                setup_logging()
            handlers = logging.getLogger().handlers
            self.assertEqual(len(handlers), 2)
            for handler in handlers:
                handler.close()
            self.assertTrue(any(name.startswith("gqgmc_errors_") for name in os.listdir(tmp)))

    def test_console_colour_does_not_leak(self):
        formatter = ColoredFormatter("%(levelname)s %(message)s", is_console=True)
        record = logging.LogRecord("gqgmc", logging.WARNING, __file__, 1, "hi", None, None)

        self.assertIn("\033[93m", formatter.format(record))
        self.assertEqual(record.levelname, "WARNING")


if __name__ == '__main__':
    unittest.main()
