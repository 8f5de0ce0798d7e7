"""
Sticky error codes reported by every device operation.
"""
from enum import IntEnum


class ErrorCode(IntEnum):
    """Error conditions a handle can report."""
    NO_PROBLEM = 0
    USB_OPEN_FAILED = 1
    OLDER_FIRMWARE = 2
    VERSION_READ_FAILED = 3
    SERIAL_READ_FAILED = 4
    CPM_READ_FAILED = 5
    CPS_READ_FAILED = 6
    AUTO_CPS_READ_FAILED = 7
    CFG_READ_FAILED = 8
    ERASE_FAILED = 9
    UPDATE_FAILED = 10
    WRITE_FAILED = 11
    CLEAR_FAILED = 12
    VOLTAGE_READ_FAILED = 13
    HISTORY_READ_FAILED = 14
    HISTORY_LENGTH_EXCEEDED = 15
    HISTORY_ADDRESS_EXCEEDED = 16
    HISTORY_OVERRUN = 17
    SET_YEAR_FAILED = 18
    SET_MONTH_FAILED = 19
    SET_DAY_FAILED = 20
    SET_HOUR_FAILED = 21
    SET_MINUTE_FAILED = 22
    SET_SECOND_FAILED = 23


ERROR_TEXTS = {
    ErrorCode.NO_PROBLEM: "",
    ErrorCode.USB_OPEN_FAILED: "The USB port did not open successfully.",
    ErrorCode.OLDER_FIRMWARE: "Your GQ GMC has older firmware. Some commands may not work.",
    ErrorCode.VERSION_READ_FAILED: "The command to read the version number of the firmware failed.",
    ErrorCode.SERIAL_READ_FAILED: "The command to read the serial number failed.",
    ErrorCode.CPM_READ_FAILED: "The command to read the counts per minute failed.",
    ErrorCode.CPS_READ_FAILED: "The command to read the counts per second failed.",
    ErrorCode.AUTO_CPS_READ_FAILED: "The command to read auto counts per second failed.",
    ErrorCode.CFG_READ_FAILED: "The command to get configuration data failed.",
    ErrorCode.ERASE_FAILED: "The command to erase configuration data failed.",
    ErrorCode.UPDATE_FAILED: "The command to update configuration data failed.",
    ErrorCode.WRITE_FAILED: ("The command to write configuration data failed. "
                             "The device configuration is only partially written."),
    ErrorCode.CLEAR_FAILED: ("Failed to clear USB input buffer. "
                             "You should power cycle GQ GMC."),
    ErrorCode.VOLTAGE_READ_FAILED: "The command to read the battery voltage failed.",
    ErrorCode.HISTORY_READ_FAILED: "The command to read the history data failed.",
    ErrorCode.HISTORY_LENGTH_EXCEEDED: (
        "The requested data length of the history command cannot exceed "
        "4096 bytes."),
    ErrorCode.HISTORY_ADDRESS_EXCEEDED: (
        "The address of the history command cannot exceed 65536 bytes."),
    ErrorCode.HISTORY_OVERRUN: (
        "The history data length added to the address cannot exceed "
        "65536 bytes."),
    ErrorCode.SET_YEAR_FAILED: "The set year command failed.",
    ErrorCode.SET_MONTH_FAILED: "The set month command failed.",
    ErrorCode.SET_DAY_FAILED: "The set day command failed.",
    ErrorCode.SET_HOUR_FAILED: "The set hour command failed.",
    ErrorCode.SET_MINUTE_FAILED: "The set minute command failed.",
    ErrorCode.SET_SECOND_FAILED: "The set second command failed.",
}


def get_error_text(code: ErrorCode) -> str:
    """Return the human-readable description of an error code."""
    return ERROR_TEXTS.get(ErrorCode(code), "")


class ErrorState:
    """
    Sticky error code plus the read-success flag of the last exchange.

    Reset at the start of every protocol exchange; the last code set during
    the exchange is what callers observe.
    """

    def __init__(self):
        self.code = ErrorCode.NO_PROBLEM
        self.read_ok = True

    def reset(self) -> None:
        self.code = ErrorCode.NO_PROBLEM
        self.read_ok = True

    def set(self, code: ErrorCode) -> None:
        self.code = code

    @property
    def ok(self) -> bool:
        return self.code == ErrorCode.NO_PROBLEM

    def __repr__(self):
        return f"ErrorState(code={self.code.name}, read_ok={self.read_ok})"
