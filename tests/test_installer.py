from __future__ import annotations

import stat
import subprocess
import sys
from pathlib import Path

import pytest

from usb_wakeup_control.config_store import ConfigStore
from usb_wakeup_control.exceptions import InstallError
from usb_wakeup_control.installer import install, render_launcher, render_unit
from usb_wakeup_control.settings import Settings


@pytest.fixture
def settings(config_dir: Path, tmp_path: Path) -> Settings:
    return Settings(
        config_dir=config_dir,
        install_path=tmp_path / "usr" / "local" / "bin" / "usb-wakeup-control",
        unit_dir=tmp_path / "etc" / "systemd" / "system",
    )


def test_render_unit_runs_replay_before_sleep() -> None:
    unit = render_unit(Path("/usr/local/bin/usb-wakeup-control"))
    assert "ExecStart=/usr/local/bin/usb-wakeup-control systemd-run-before-sleep" in unit
    assert "Before=sleep.target" in unit
    assert "Type=oneshot" in unit
    assert "WantedBy=multi-user.target sleep.target" in unit


def test_render_launcher_uses_interpreter() -> None:
    launcher = render_launcher("/opt/venv/bin/python")
    assert launcher.startswith("#!/opt/venv/bin/python\n")
    assert "from usb_wakeup_control.cli import main" in launcher


def test_install_writes_files(
    settings: Settings, store: ConfigStore, config_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    calls = []
    monkeypatch.setattr(subprocess, "run", lambda cmd, check: calls.append(cmd))

    install(settings, store)

    launcher = settings.install_path
    assert launcher.read_text() == render_launcher(sys.executable)
    assert launcher.stat().st_mode & stat.S_IXUSR
    unit = settings.unit_dir / settings.unit_name
    assert unit.read_text() == render_unit(launcher)
    assert calls[0] == ["systemctl", "daemon-reload"]
    assert calls[1] == ["systemctl", "enable", "usb-wakeup-control.service"]
    assert (config_dir / "disabled").read_text() == ""
    assert (config_dir / "enabled").read_text() == ""


def test_install_systemctl_failure(
    settings: Settings, store: ConfigStore, config_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def fail(cmd, check):
        raise subprocess.CalledProcessError(1, cmd)

    monkeypatch.setattr(subprocess, "run", fail)

    with pytest.raises(InstallError):
        install(settings, store)
    assert not config_dir.exists()
