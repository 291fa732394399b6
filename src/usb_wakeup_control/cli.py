"""
Command line interface for USB Wakeup Control.

Dispatches the install, detect, enable, disable and systemd-run-before-sleep
commands. Device reports go to stdout, diagnostics to the log on stderr.
"""

from __future__ import annotations
import logging
import sys
from typing import Callable, Optional

from .config_store import ConfigStore
from .controller import WakeupController
from .exceptions import UsageError, WakeupControlError
from .installer import install
from .settings import Settings, load_settings
from .usb_enumerator import USBEnumerator

logger = logging.getLogger(__name__)

PROG = "usb-wakeup-control"

USAGE = f"""\
{PROG}

This simple utility enables or prevents specific USB devices from waking up the system upon suspend.
Useful when a Linux laptop or PC refuses to go to sleep because some USB device keeps it awake,
or to prevent unintended mouse movements from waking it up.

Usage:
  {PROG} install                       install {PROG} and a systemd service
                                       NOTE: This is required for the other commands to persist after
                                       rebooting or unplugging and replugging.
  {PROG} detect                        list all connected USB devices and their current wakeup status
  {PROG} disable vendorId productId    disable wakeup for a specific USB device
  {PROG} enable vendorId productId     enable wakeup for a specific USB device

Vendor ID and product ID can be found using [{PROG} detect] or [lsusb].

For example, if [lsusb] shows:

    Bus 001 Device 007: ID 046d:c52b Logitech, Inc. Unifying Receiver

then the vendor ID is '046d' and the product ID is 'c52b'.

The disable and enable commands store the vendor ID and product ID in
<config dir>/disabled or <config dir>/enabled (default /etc/usb-wakeup-control)
so the setting is reapplied after reboot, suspend or replug.

Examples:
  {PROG} detect
  {PROG} disable 0bda 8153
  {PROG} enable 0bda 8153

Note: disable and enable require root privileges to write /sys/bus/usb/devices/*/power/wakeup.
      install also requires root privileges to write the launcher and the systemd unit.
"""

HELP_COMMANDS = ("help", "--help", "-h")


def configure_logging(level: str) -> None:
    """Install the stderr handler once and set the root level."""
    logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    logging.getLogger().setLevel(getattr(logging, level.upper(), logging.INFO))


def _cmd_install(controller: WakeupController, settings: Settings, args: list[str]) -> None:
    install(settings, controller.store)
    print(f"Done! Use [{PROG} enable] and [{PROG} disable] to control USB wakeup from specific devices.")


def _cmd_detect(controller: WakeupController, settings: Settings, args: list[str]) -> None:
    for device in controller.detect():
        print(device.format_detect_line())


def _cmd_enable(controller: WakeupController, settings: Settings, args: list[str]) -> None:
    if len(args) < 2:
        raise UsageError(f"Usage: {PROG} enable vendorId productId")
    controller.enable(args[0], args[1])


def _cmd_disable(controller: WakeupController, settings: Settings, args: list[str]) -> None:
    if len(args) < 2:
        raise UsageError(f"Usage: {PROG} disable vendorId productId")
    controller.disable(args[0], args[1])


def _cmd_replay(controller: WakeupController, settings: Settings, args: list[str]) -> None:
    controller.replay()


COMMANDS: dict[str, Callable[[WakeupController, Settings, list[str]], None]] = {
    "install": _cmd_install,
    "detect": _cmd_detect,
    "enable": _cmd_enable,
    "disable": _cmd_disable,
    "systemd-run-before-sleep": _cmd_replay,
}


def main(
    argv: Optional[list[str]] = None,
    *,
    settings: Optional[Settings] = None,
    enumerator: Optional[USBEnumerator] = None,
) -> int:
    """Run a command and return the process exit code."""
    args = sys.argv[1:] if argv is None else list(argv)
    command = args[0] if args else ""

    if command in HELP_COMMANDS:
        print(USAGE, end="")
        return 0

    handler = COMMANDS.get(command)
    if handler is None:
        print(USAGE, end="")
        return 1

    configure_logging("INFO")
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    store = ConfigStore(settings.config_dir, lock_timeout=settings.lock_timeout)
    controller = WakeupController(store, enumerator)

    try:
        handler(controller, settings, args[1:])
    except UsageError as e:
        message = str(e)
        if not message.startswith("Usage:"):
            message = f"Usage: {PROG} {command} vendorId productId"
        print(message)
        return 1
    except (WakeupControlError, OSError) as e:
        logger.error(f"{command} failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
