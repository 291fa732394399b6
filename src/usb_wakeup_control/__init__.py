"""
USB Wakeup Control - Per-device USB wake-from-suspend management for Linux.

Enables or prevents specific USB devices from waking the system, and keeps
that choice across reboots, suspend/resume cycles and replugs.
"""

__version__ = "0.1.0"
__all__ = ["main"]

from .cli import main
