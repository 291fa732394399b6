"""
Settings for USB Wakeup Control.

Loads optional overrides for install locations, the config directory and
logging from a YAML file, then from environment variables.
"""

from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Optional
import yaml
from pydantic import BaseModel, Field

from .config_store import DEFAULT_CONFIG_DIR

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = DEFAULT_CONFIG_DIR / "settings.yaml"

SETTINGS_ENV = "USB_WAKEUP_CONTROL_SETTINGS"
CONFIG_DIR_ENV = "USB_WAKEUP_CONTROL_CONFIG_DIR"
LOG_LEVEL_ENV = "USB_WAKEUP_CONTROL_LOG_LEVEL"


class Settings(BaseModel):
    """Runtime settings."""

    config_dir: Path = Field(default=DEFAULT_CONFIG_DIR)
    install_path: Path = Field(default=Path("/usr/local/bin/usb-wakeup-control"))
    unit_dir: Path = Field(default=Path("/etc/systemd/system"))
    unit_name: str = Field(default="usb-wakeup-control.service")
    lock_timeout: float = Field(default=10.0, description="Seconds to wait for the config lock")
    log_level: str = Field(default="INFO")


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load settings from YAML, falling back to defaults, then apply env overrides."""
    settings_path = path or Path(os.environ.get(SETTINGS_ENV, DEFAULT_SETTINGS_PATH))

    if settings_path.exists():
        try:
            with open(settings_path) as f:
                data = yaml.safe_load(f) or {}
            settings = Settings(**data)
            logger.debug(f"Loaded settings from {settings_path}")
        except Exception as e:
            logger.exception(f"Error loading settings from {settings_path}: {e}")
            settings = Settings()
    else:
        settings = Settings()

    overrides = {}
    if os.environ.get(CONFIG_DIR_ENV):
        overrides["config_dir"] = Path(os.environ[CONFIG_DIR_ENV])
    if os.environ.get(LOG_LEVEL_ENV):
        overrides["log_level"] = os.environ[LOG_LEVEL_ENV]

    if overrides:
        settings = settings.model_copy(update=overrides)
    return settings
