"""Serial port discovery for the port selector."""

from __future__ import annotations

import logging
import re
from typing import List, NamedTuple, Optional

from serial.tools import list_ports
from serial.tools.list_ports_common import ListPortInfo

logger = logging.getLogger(__name__)


class PortEntry(NamedTuple):
    device: str
    label: str


class PortDiscovery:
    """Lists serial ports, optionally limited to USB adapters.

    Bluetooth and legacy on-board ports (``ttyS*``) are noise for most
    users, so by default only USB-to-serial devices are offered.
    """

    USB_MARKERS = ('USB', 'ACM', 'FTDI', 'CP210', 'CH340', 'PL2303')
    DEVICE_PATTERN = re.compile(r'ttyUSB|ttyACM|ttyAMA|cu\.usb|COM\d+', re.I)

    @classmethod
    def get_ports(cls, show_all: bool = False) -> List[PortEntry]:
        """Ports sorted by device name, each with a display label."""
        try:
            ports = list_ports.comports()
        except (TypeError, ValueError, OSError) as e:
            # pyserial can fail to enumerate inside snap/flatpak sandboxes
            logger.warning(f"Error listing serial ports: {e}")
            return []

        result = []
        for port in ports:
            try:
                if show_all or cls.is_usb_device(port):
                    desc = port.description or port.hwid or 'Unknown'
                    result.append(PortEntry(port.device, f"{port.device} - {desc}"))
            except (TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping port {getattr(port, 'device', 'unknown')}: {e}")
        return sorted(result)

    @classmethod
    def is_usb_device(cls, port: ListPortInfo) -> bool:
        if getattr(port, 'vid', None) is not None:
            return True
        text = f"{port.description or ''} {port.hwid or ''}".upper()
        return any(m in text for m in cls.USB_MARKERS) or bool(cls.DEVICE_PATTERN.search(port.device))

    @staticmethod
    def find(device: str) -> Optional[ListPortInfo]:
        """Port info for ``device``, or None when it is not present."""
        for p in list_ports.comports():
            if p.device == device:
                return p
        return None
