"""
Persistent storage for the enabled/disabled wakeup lists.

Each list is a plain text file under the config directory holding one
"<vendorId> <productId>" pair per line. Writes go through a temp file that is
renamed into place, and every mutation holds an advisory lock on the
directory so concurrent invocations cannot lose updates.
"""

from __future__ import annotations
import logging
import os
import stat
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional
from filelock import FileLock, Timeout

from .exceptions import ConfigLockError
from .models import ConfigSet, DeviceIdentity

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path("/etc/usb-wakeup-control")
LOCK_FILE_NAME = ".lock"


class ConfigStore:
    """Manages the persisted enabled and disabled sets."""

    def __init__(self, config_dir: Optional[Path] = None, lock_timeout: float = 10.0):
        self.config_dir = Path(config_dir or DEFAULT_CONFIG_DIR)
        self.lock_timeout = lock_timeout
        self._lock: Optional[FileLock] = None

    def path(self, config_set: ConfigSet) -> Path:
        return self.config_dir / config_set.value

    @contextmanager
    def _locked(self) -> Iterator[None]:
        """Hold the config directory lock. Re-entrant within one store."""
        if self._lock is None:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            self._lock = FileLock(str(self.config_dir / LOCK_FILE_NAME), timeout=self.lock_timeout)
        try:
            with self._lock:
                yield
        except Timeout as e:
            raise ConfigLockError(f"Timed out waiting for lock on {self.config_dir}") from e

    def _read_lines(self, config_set: ConfigSet) -> list[str]:
        path = self.path(config_set)
        if not path.exists():
            return []
        return path.read_text().splitlines()

    def _write_lines(self, config_set: ConfigSet, lines: list[str]) -> None:
        """Replace a set's file atomically."""
        path = self.path(config_set)
        path.parent.mkdir(parents=True, exist_ok=True)
        mode = stat.S_IMODE(path.stat().st_mode) if path.exists() else 0o644

        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                f.write("".join(f"{line}\n" for line in lines))
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_name, mode)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def entries(self, config_set: ConfigSet) -> list[DeviceIdentity]:
        """Identities in a set, in file order, without duplicates."""
        seen: list[DeviceIdentity] = []
        for line in self._read_lines(config_set):
            identity = DeviceIdentity.parse_line(line)
            if identity is None:
                if line.strip():
                    logger.warning(f"Ignoring malformed line in {self.path(config_set)}: {line!r}")
                continue
            if identity not in seen:
                seen.append(identity)
        return seen

    def is_member(self, config_set: ConfigSet, identity: DeviceIdentity) -> bool:
        return any(DeviceIdentity.parse_line(line) == identity for line in self._read_lines(config_set))

    def add(self, config_set: ConfigSet, identity: DeviceIdentity) -> bool:
        """Append an identity unless it is already present.

        Returns True if the file was changed.
        """
        with self._locked():
            lines = self._read_lines(config_set)
            if any(DeviceIdentity.parse_line(line) == identity for line in lines):
                return False
            self._write_lines(config_set, lines + [identity.to_line()])

        logger.info(f"Config: added USB device {identity} to {self.path(config_set)}")
        return True

    def remove(self, config_set: ConfigSet, identity: DeviceIdentity) -> bool:
        """Drop every line matching an identity.

        Returns True if the file was changed.
        """
        with self._locked():
            if not self.path(config_set).exists():
                return False
            lines = self._read_lines(config_set)
            kept = [line for line in lines if DeviceIdentity.parse_line(line) != identity]
            if len(kept) == len(lines):
                return False
            self._write_lines(config_set, kept)

        logger.info(f"Config: removed USB device {identity} from {self.path(config_set)}")
        return True

    def move(self, identity: DeviceIdentity, source: ConfigSet, target: ConfigSet) -> tuple[bool, bool]:
        """Move an identity from one set to the other under a single lock.

        Returns (removed_from_source, added_to_target).
        """
        with self._locked():
            removed = self.remove(source, identity)
            added = self.add(target, identity)
        return removed, added

    def initialize(self) -> None:
        """Create the config directory and empty set files if missing."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        for config_set in ConfigSet:
            path = self.path(config_set)
            if not path.exists():
                path.touch(mode=0o644)
                logger.info(f"Created {path}")
