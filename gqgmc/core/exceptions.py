"""
Custom exceptions for the GQ GMC driver.

Protocol failures are reported through the handle's sticky error code, not
through exceptions. These are raised for transport faults that the protocol
layer converts into codes, and for programming errors.
"""

class GeigerCounterError(Exception):
    """Base exception for all driver errors."""
    pass

class CommunicationError(GeigerCounterError):
    """Exception raised for errors in the device communication."""
    pass

class OpenFailedError(CommunicationError):
    """Exception raised when the serial device cannot be opened."""
    pass

class DeviceDisconnectedError(CommunicationError):
    """Exception raised when the device is disconnected."""
    pass

class ConfigurationError(GeigerCounterError):
    """Exception raised for misuse of the configuration image."""
    pass
