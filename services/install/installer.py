"""Place the binary, guard the previous install, and wire up integration."""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from services.install.constants import BINARY_MODE
from services.install.models import ExtractionError, InstallError, InstallPaths, PathState
from services.install.platforms import Platform, probe_path


_LOGGER = logging.getLogger(__name__)

__all__ = ["Installer"]


class Installer:
    """Install the unpacked binary described by ``paths`` on ``platform``."""

    def __init__(self, platform: Platform, paths: InstallPaths) -> None:
        self._platform = platform
        self._paths = paths
        self._linked = False

    @property
    def paths(self) -> InstallPaths:
        return self._paths

    def prepare(self) -> None:
        try:
            self._paths.bin_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise InstallError(f"Unable to create {self._paths.bin_dir}: {exc}") from exc

    @contextmanager
    def replacing_binary(self) -> Iterator[bool]:
        """Move the live binary aside; put it back if the block raises.

        Yields ``True`` when a previous binary was backed up. On success the
        backup is left in place as ``old_<binary>``.
        """

        self._linked = False
        backed_up = self._backup()
        try:
            yield backed_up
        except BaseException:
            self._rollback(backed_up)
            raise

    def install(self, archive: Path, workspace: Path) -> Path:
        self._platform.unpack(archive, self._paths, workspace)
        self._set_permissions()
        return self._paths.binary_path

    def integrate(self) -> None:
        self._linked = self._platform.integrate(self._paths)

    def _backup(self) -> bool:
        binary = self._paths.binary_path
        probe = probe_path(binary)
        if probe.is_err():
            raise ExtractionError(f"Unable to inspect {binary}: {probe.unwrap_err()}") from probe.unwrap_err()
        if probe.unwrap() is PathState.MISSING:
            return False
        try:
            os.replace(binary, self._paths.backup_binary_path)
        except OSError as exc:
            raise ExtractionError(
                f"Unable to move {binary} to {self._paths.backup_binary_path}: {exc}"
            ) from exc
        _LOGGER.debug("Backed up %s to %s", binary, self._paths.backup_binary_path)
        return True

    def _rollback(self, backed_up: bool) -> None:
        binary = self._paths.binary_path
        try:
            binary.unlink(missing_ok=True)
            if backed_up:
                os.replace(self._paths.backup_binary_path, binary)
                _LOGGER.warning("Restored previous binary at %s", binary)
            elif self._linked:
                self._paths.integration_target.unlink(missing_ok=True)
                _LOGGER.warning("Removed link %s", self._paths.integration_target)
        except OSError:
            _LOGGER.exception("Unable to restore previous binary at %s", binary)

    def _set_permissions(self) -> None:
        for path in (self._paths.install_dir, self._paths.binary_path):
            try:
                os.chmod(path, BINARY_MODE)
            except OSError as exc:
                raise InstallError(f"Unable to set permissions on {path}: {exc}") from exc
