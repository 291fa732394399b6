"""Exception hierarchy for usb_wakeup_control."""

from __future__ import annotations


class WakeupControlError(Exception):
    """Base exception for all usb_wakeup_control errors."""


class UsageError(WakeupControlError):
    """A command was invoked with missing arguments."""


class ConfigLockError(WakeupControlError):
    """The config directory lock could not be acquired in time."""


class InstallError(WakeupControlError):
    """A step of the install command failed."""


class WakeupWriteError(WakeupControlError):
    """One or more devices could not have their wakeup flag written."""

    def __init__(self, failed_paths: list[str]) -> None:
        self.failed_paths = failed_paths
        super().__init__(f"Failed to set wakeup on: {', '.join(failed_paths)}")
