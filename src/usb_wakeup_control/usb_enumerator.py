"""
USB device enumeration using pyudev.

Lists the USB devices currently attached, together with their vendor/product
IDs, product string and power/wakeup flag read from sysfs.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Any, Optional
import pyudev

from .models import DeviceIdentity, LiveDevice, WakeupState

logger = logging.getLogger(__name__)


def read_attribute(sys_path: Path, name: str) -> Optional[str]:
    """Read a sysfs attribute, returning None if it is missing or unreadable."""
    attr_path = sys_path / name
    try:
        return attr_path.read_text().strip()
    except OSError as e:
        # Missing attribute, or the device went away mid-scan.
        logger.debug(f"Cannot read {attr_path}: {e}")
        return None


def build_live_device(device: Any) -> Optional[LiveDevice]:
    """Build a LiveDevice from a pyudev Device.

    Devices without an idVendor/idProduct pair or without a usable
    power/wakeup flag are skipped.
    """
    sys_path = Path(device.sys_path)

    vendor_id = read_attribute(sys_path, "idVendor")
    product_id = read_attribute(sys_path, "idProduct")
    if not vendor_id or not product_id:
        return None

    wakeup = read_attribute(sys_path, "power/wakeup")
    if wakeup is None:
        return None
    try:
        state = WakeupState(wakeup)
    except ValueError:
        logger.debug(f"Ignoring {sys_path}: unexpected wakeup value {wakeup!r}")
        return None

    return LiveDevice(
        bus_path=str(sys_path),
        identity=DeviceIdentity(vendor_id=vendor_id, product_id=product_id),
        product_name=read_attribute(sys_path, "product"),
        wakeup=state,
    )


class USBEnumerator:
    """Scans the USB device tree."""

    def __init__(self, context: Optional[Any] = None):
        self._context = context

    @property
    def context(self) -> Any:
        if self._context is None:
            self._context = pyudev.Context()
        return self._context

    def list_devices(self) -> list[LiveDevice]:
        """Return every attached USB device that exposes a wakeup flag."""
        devices: list[LiveDevice] = []
        for device in self.context.list_devices(subsystem="usb", DEVTYPE="usb_device"):
            live = build_live_device(device)
            if live:
                devices.append(live)

        devices.sort(key=lambda d: d.bus_path)
        logger.debug(f"Found {len(devices)} USB devices with a wakeup flag")
        return devices

    def find_devices_by_identity(self, identity: DeviceIdentity) -> list[LiveDevice]:
        """Return all attached devices matching the vendor/product pair exactly."""
        return [d for d in self.list_devices() if d.identity == identity]
