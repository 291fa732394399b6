"""
System installation for USB Wakeup Control.

Installs a launcher on the PATH and a systemd unit that replays the
configured wakeup settings at boot and before every sleep.
"""

from __future__ import annotations
import logging
import subprocess
import sys
from pathlib import Path

from .config_store import ConfigStore
from .exceptions import InstallError
from .settings import Settings

logger = logging.getLogger(__name__)

LAUNCHER_TEMPLATE = """\
#!{python}
import sys

from usb_wakeup_control.cli import main

sys.exit(main())
"""

UNIT_TEMPLATE = """\
[Unit]
Description=Apply USB wakeup settings
Before=sleep.target

[Service]
Type=oneshot
ExecStart={executable} systemd-run-before-sleep

[Install]
WantedBy=multi-user.target sleep.target
"""


def render_launcher(python: str = sys.executable) -> str:
    return LAUNCHER_TEMPLATE.format(python=python)


def render_unit(executable: Path) -> str:
    return UNIT_TEMPLATE.format(executable=executable)


def _systemctl(*args: str) -> None:
    cmd = ["systemctl", *args]
    logger.debug(f"Running {' '.join(cmd)}")
    try:
        subprocess.run(cmd, check=True)
    except (OSError, subprocess.CalledProcessError) as e:
        raise InstallError(f"{' '.join(cmd)} failed: {e}") from e


def install(settings: Settings, store: ConfigStore) -> None:
    """Install the launcher and systemd unit, then initialise the config files."""
    launcher = settings.install_path
    logger.info(f"Installing usb-wakeup-control to {launcher.parent}")
    launcher.parent.mkdir(parents=True, exist_ok=True)
    launcher.write_text(render_launcher())
    launcher.chmod(0o755)

    unit_path = settings.unit_dir / settings.unit_name
    logger.info(f"Installing {settings.unit_name} to {settings.unit_dir}")
    settings.unit_dir.mkdir(parents=True, exist_ok=True)
    unit_path.write_text(render_unit(launcher))
    unit_path.chmod(0o644)

    _systemctl("daemon-reload")
    _systemctl("enable", settings.unit_name)

    store.initialize()
