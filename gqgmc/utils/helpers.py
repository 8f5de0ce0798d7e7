from typing import Optional

from serial.tools import list_ports

from gqgmc.utils.logging import get_logger

logger = get_logger(__name__)

# USB-serial bridges fitted to GMC-300 and later counters
GMC_VIDS_PIDS = [
    (0x1A86, 0x7523),  # QinHeng CH340
    (0x1A86, 0x55D4),  # QinHeng CH9102
    (0x067B, 0x2303),  # Prolific PL2303
]


def detect_serial_port() -> Optional[str]:
    """Try to detect the counter's port automatically."""
    ports = list(list_ports.comports())
    if not ports:
        logger.info("No serial ports detected")
        return None

    logger.debug("Found %d ports", len(ports))
    for port in ports:
        logger.debug("  %s - %s", port.device, port.description)
        if port.vid is not None and (port.vid, port.pid) in GMC_VIDS_PIDS:
            logger.info("Detected GQ GMC bridge on %s", port.device)
            return port.device

        desc = (port.description or "").lower()
        if any(x in desc for x in ["ch340", "ch910", "pl2303", "usb serial"]):
            logger.info("Detected likely GQ GMC bridge on %s", port.device)
            return port.device

    return None
