"""
CLI entry point for USB Wakeup Control.

Allows running with: python -m usb_wakeup_control
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
