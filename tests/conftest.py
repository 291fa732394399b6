from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
from typing import Optional

import pytest

from usb_wakeup_control.config_store import ConfigStore
from usb_wakeup_control.controller import WakeupController
from usb_wakeup_control.usb_enumerator import USBEnumerator


class FakeUdevContext:
    """Stands in for pyudev.Context, listing every directory under a fake sysfs root."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.calls: list[dict] = []

    def list_devices(self, **kwargs):
        self.calls.append(kwargs)
        return [
            SimpleNamespace(sys_path=str(p), sys_name=p.name)
            for p in sorted(self.root.iterdir())
            if p.is_dir()
        ]


def make_device(
    root: Path,
    name: str,
    vendor: Optional[str] = "046d",
    product: Optional[str] = "c52b",
    product_name: Optional[str] = "USB Receiver",
    wakeup: Optional[str] = "enabled",
) -> Path:
    device = root / name
    device.mkdir(parents=True)
    if vendor is not None:
        (device / "idVendor").write_text(f"{vendor}\n")
    if product is not None:
        (device / "idProduct").write_text(f"{product}\n")
    if product_name is not None:
        (device / "product").write_text(f"{product_name}\n")
    if wakeup is not None:
        (device / "power").mkdir()
        (device / "power" / "wakeup").write_text(f"{wakeup}\n")
    return device


def wakeup_of(device: Path) -> str:
    return (device / "power" / "wakeup").read_text().strip()


@pytest.fixture
def sysfs(tmp_path: Path) -> Path:
    root = tmp_path / "sys" / "bus" / "usb" / "devices"
    root.mkdir(parents=True)
    return root


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    return tmp_path / "etc" / "usb-wakeup-control"


@pytest.fixture
def enumerator(sysfs: Path) -> USBEnumerator:
    return USBEnumerator(context=FakeUdevContext(sysfs))


@pytest.fixture
def store(config_dir: Path) -> ConfigStore:
    return ConfigStore(config_dir, lock_timeout=1.0)


@pytest.fixture
def controller(store: ConfigStore, enumerator: USBEnumerator) -> WakeupController:
    return WakeupController(store, enumerator)
