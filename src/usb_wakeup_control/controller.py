"""
Wakeup state reconciliation.

Keeps the persisted enabled/disabled sets and the live power/wakeup flags of
attached USB devices in agreement.
"""

from __future__ import annotations
import logging
from typing import Optional

from .config_store import ConfigStore
from .exceptions import UsageError, WakeupWriteError
from .models import ConfigSet, DeviceIdentity, LiveDevice, WakeupReport, WakeupState
from .usb_enumerator import USBEnumerator

logger = logging.getLogger(__name__)


def write_wakeup(device: LiveDevice, state: WakeupState) -> WakeupReport:
    """Write the wakeup flag of one device and read back the result."""
    wakeup_path = device.wakeup_path
    old = wakeup_path.read_text().strip()
    wakeup_path.write_text(state.value)
    new = wakeup_path.read_text().strip()

    return WakeupReport(
        bus_path=device.bus_path,
        identity=device.identity,
        product_name=device.product_name,
        old=old,
        new=new,
    )


class WakeupController:
    """Applies enable/disable commands to the config store and live devices."""

    def __init__(self, store: ConfigStore, enumerator: Optional[USBEnumerator] = None):
        self.store = store
        self.enumerator = enumerator or USBEnumerator()

    def detect(self) -> list[LiveDevice]:
        """List attached devices with their current wakeup flag."""
        return self.enumerator.list_devices()

    def enable(self, vendor_id: str, product_id: str) -> list[WakeupReport]:
        """Persist and apply wakeup for a device."""
        return self._set(vendor_id, product_id, ConfigSet.ENABLED)

    def disable(self, vendor_id: str, product_id: str) -> list[WakeupReport]:
        """Persist and apply no-wakeup for a device."""
        return self._set(vendor_id, product_id, ConfigSet.DISABLED)

    def _set(self, vendor_id: str, product_id: str, target: ConfigSet) -> list[WakeupReport]:
        if not vendor_id or not product_id:
            raise UsageError("vendorId and productId are required")
        # Each ID is stored as a single token on a "<vendor> <product>" line.
        if len(vendor_id.split()) != 1 or len(product_id.split()) != 1:
            raise UsageError("vendorId and productId must not contain whitespace")

        identity = DeviceIdentity(vendor_id=vendor_id, product_id=product_id)
        self.store.move(identity, target.opposite, target)
        return self.apply(identity, target.state)

    def apply(self, identity: DeviceIdentity, state: WakeupState) -> list[WakeupReport]:
        """Write a wakeup state to every attached device matching an identity.

        Every matching device is attempted. Raises WakeupWriteError afterwards
        if any of them failed.
        """
        reports, failed = self._apply(identity, state)
        if failed:
            raise WakeupWriteError(failed)
        return reports

    def _apply(self, identity: DeviceIdentity, state: WakeupState) -> tuple[list[WakeupReport], list[str]]:
        reports: list[WakeupReport] = []
        failed: list[str] = []

        devices = self.enumerator.find_devices_by_identity(identity)
        if not devices:
            logger.debug(f"No attached device matches {identity}")

        for device in devices:
            try:
                report = write_wakeup(device, state)
            except OSError as e:
                logger.exception(f"Error setting wakeup={state.value} on {device.bus_path}: {e}")
                failed.append(device.bus_path)
                continue

            print(report.format_line(), flush=True)
            reports.append(report)

        return reports, failed

    def replay(self) -> list[WakeupReport]:
        """Re-apply every persisted entry to the devices attached now.

        Disabled entries are applied first and enabled entries last, so an
        identity listed in both sets ends up enabled.
        """
        reports: list[WakeupReport] = []
        failed: list[str] = []

        for config_set in (ConfigSet.DISABLED, ConfigSet.ENABLED):
            for identity in self.store.entries(config_set):
                set_reports, set_failed = self._apply(identity, config_set.state)
                reports.extend(set_reports)
                failed.extend(set_failed)

        if failed:
            raise WakeupWriteError(failed)
        return reports
