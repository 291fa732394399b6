"""
Pydantic models for USB device identities, live devices and wakeup reports.

Defines the data structures shared by the enumerator, the config store and
the controller.
"""

from __future__ import annotations
from enum import Enum
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class WakeupState(str, Enum):
    """Value of a device's power/wakeup attribute."""
    ENABLED = "enabled"
    DISABLED = "disabled"


class ConfigSet(str, Enum):
    """Persisted wakeup lists, named after the file each one lives in."""
    DISABLED = "disabled"
    ENABLED = "enabled"

    @property
    def state(self) -> WakeupState:
        """Wakeup state applied to devices listed in this set."""
        return WakeupState(self.value)

    @property
    def opposite(self) -> ConfigSet:
        return ConfigSet.ENABLED if self is ConfigSet.DISABLED else ConfigSet.DISABLED


class DeviceIdentity(BaseModel):
    """Vendor/product pair identifying a kind of USB device."""

    model_config = ConfigDict(frozen=True)

    vendor_id: str = Field(description="Vendor ID in hex e.g. '046d'")
    product_id: str = Field(description="Product ID in hex e.g. 'c52b'")

    @classmethod
    def parse_line(cls, line: str) -> Optional[DeviceIdentity]:
        """Parse a persisted "<vendor> <product>" line.

        Returns None for blank lines and for lines that do not hold exactly
        two whitespace-separated fields.
        """
        fields = line.split()
        if len(fields) != 2:
            return None
        return cls(vendor_id=fields[0], product_id=fields[1])

    def to_line(self) -> str:
        return f"{self.vendor_id} {self.product_id}"

    def __str__(self) -> str:
        return self.to_line()


class LiveDevice(BaseModel):
    """A USB device currently present in sysfs."""

    bus_path: str = Field(description="sysfs directory of the device e.g. '/sys/bus/usb/devices/1-2'")
    identity: DeviceIdentity
    product_name: Optional[str] = Field(default=None, description="Product string, if exposed")
    wakeup: WakeupState

    @property
    def wakeup_path(self) -> Path:
        return Path(self.bus_path) / "power" / "wakeup"

    def format_detect_line(self) -> str:
        """Line printed by the detect command."""
        return (
            f"{self.bus_path} vendor={self.identity.vendor_id} product={self.identity.product_id} "
            f"WakeUp={self.wakeup.value} name={self.product_name or ''}"
        )


class WakeupReport(BaseModel):
    """Outcome of writing the wakeup flag on one device."""

    bus_path: str
    identity: DeviceIdentity
    product_name: Optional[str] = None
    old: str
    new: str

    def format_line(self) -> str:
        """Journal-friendly line describing the change."""
        return (
            f"Bus-port:{self.bus_path} vendor={self.identity.vendor_id} "
            f"product={self.identity.product_id} name={self.product_name or ''} "
            f"WakeUp: old={self.old} new={self.new}"
        )
