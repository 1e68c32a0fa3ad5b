"""Platform-specific unpacking and shell integration."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Protocol

from services.install.constants import (
    LINUX_ASSET,
    MACOS_ASSET,
    POSIX_BINARY_NAME,
    WINDOWS_ASSET,
    WINDOWS_BINARY_NAME,
    WINDOWS_UNZIP_POWERSHELL,
    WINDOWS_UNZIP_STRATEGIES,
    WINDOWS_UNZIP_VBSCRIPT,
)
from services.install.models import (
    ExtractionError,
    InstallPaths,
    IntegrationError,
    PathState,
    PlatformProfile,
    UnsupportedPlatformError,
)
from services.install.process import CommandRunner, run_command
from services.install.windows_scripts import (
    append_user_path_command,
    expand_archive_command,
    path_contains,
    vbscript_unzip_command,
    write_unzip_script,
)
from shared.result import Result


_LOGGER = logging.getLogger(__name__)

__all__ = [
    "Platform",
    "PosixPlatform",
    "WindowsPlatform",
    "probe_path",
    "profile_for",
]

PROFILES: dict[str, PlatformProfile] = {
    "linux": PlatformProfile("linux", False, LINUX_ASSET, "gz", POSIX_BINARY_NAME),
    "darwin": PlatformProfile("darwin", False, MACOS_ASSET, "gz", POSIX_BINARY_NAME),
    "windows": PlatformProfile("windows", True, WINDOWS_ASSET, "zip", WINDOWS_BINARY_NAME),
}


def profile_for(sys_platform: str) -> PlatformProfile:
    """Return the :class:`PlatformProfile` for a ``sys.platform`` value."""

    if sys_platform.startswith("linux"):
        return PROFILES["linux"]
    if sys_platform == "darwin":
        return PROFILES["darwin"]
    if sys_platform == "win32":
        return PROFILES["windows"]
    raise UnsupportedPlatformError(f"Unsupported operating system {sys_platform}")


def probe_path(path: Path) -> Result[PathState, OSError]:
    """Report whether anything (including a dangling link) exists at ``path``."""

    try:
        os.lstat(path)
    except FileNotFoundError:
        return Result.ok(PathState.MISSING)
    except OSError as exc:
        return Result.err(exc)
    return Result.ok(PathState.PRESENT)


class Platform(Protocol):
    """Capabilities that differ between POSIX and Windows installs."""

    profile: PlatformProfile

    def unpack(self, archive: Path, paths: InstallPaths, workspace: Path) -> None:
        """Expand ``archive`` so the binary ends up at ``paths.binary_path``."""

    def integrate(self, paths: InstallPaths) -> bool:
        """Make the installed binary reachable by name.

        Returns ``True`` when a new link was created at
        ``paths.integration_target``.
        """


def _run_tool(runner: CommandRunner, args: tuple[str, ...], description: str) -> int:
    try:
        return runner(args)
    except OSError as exc:
        raise ExtractionError(f"Unable to run {description} ({args[0]}): {exc}") from exc


class PosixPlatform:
    """Single-file gzip asset, linked into a system binary directory."""

    def __init__(self, profile: PlatformProfile, *, runner: CommandRunner = run_command) -> None:
        self.profile = profile
        self._runner = runner

    def unpack(self, archive: Path, paths: InstallPaths, workspace: Path) -> None:
        args = ("gunzip", "-d", str(archive))
        code = _run_tool(self._runner, args, "gunzip")
        if code != 0:
            raise ExtractionError(f"gunzip failed. {' '.join(args)} -> {code}", exit_code=code)

        decompressed = archive.with_suffix("")
        if not decompressed.is_file():
            raise ExtractionError(f"gunzip did not produce {decompressed}")
        try:
            shutil.copyfile(decompressed, paths.binary_path)
        except OSError as exc:
            raise ExtractionError(f"Failed to copy {decompressed} to {paths.binary_path}: {exc}") from exc
        _LOGGER.debug("Copied %s to %s", decompressed, paths.binary_path)

    def integrate(self, paths: InstallPaths) -> bool:
        link = paths.integration_target
        probe = probe_path(link)
        if probe.is_err():
            raise IntegrationError(f"Unable to inspect {link}: {probe.unwrap_err()}") from probe.unwrap_err()

        state = probe.unwrap()
        if state is PathState.PRESENT:
            _LOGGER.debug("%s already exists; leaving it in place", link)
            return False
        if state is PathState.MISSING:
            try:
                os.symlink(paths.binary_path, link)
            except FileExistsError:
                _LOGGER.debug("%s appeared while linking; leaving it in place", link)
                return False
            except OSError as exc:
                raise IntegrationError(f"Unable to link {link} -> {paths.binary_path}: {exc}") from exc
            _LOGGER.info("Linked %s -> %s", link, paths.binary_path)
            return True
        return False


class WindowsPlatform:
    """Zip asset expanded in place, bin directory added to the user PATH."""

    def __init__(
        self,
        profile: PlatformProfile,
        *,
        path_env: str = "",
        unzip_strategy: str = WINDOWS_UNZIP_POWERSHELL,
        runner: CommandRunner = run_command,
    ) -> None:
        if unzip_strategy not in WINDOWS_UNZIP_STRATEGIES:
            raise ValueError(f"Unknown Windows unzip strategy: {unzip_strategy}")
        self.profile = profile
        self._path_env = path_env
        self._unzip_strategy = unzip_strategy
        self._runner = runner

    def unpack(self, archive: Path, paths: InstallPaths, workspace: Path) -> None:
        if self._unzip_strategy == WINDOWS_UNZIP_VBSCRIPT:
            script = write_unzip_script(workspace, archive, paths.bin_dir, self.profile.binary_name)
            args = vbscript_unzip_command(script)
        else:
            args = expand_archive_command(archive, paths.bin_dir)

        code = _run_tool(self._runner, args, "archive extraction")
        if code != 0:
            raise ExtractionError(f"unzip failed. {args[0]} -> {code}", exit_code=code)
        if not paths.binary_path.is_file():
            raise ExtractionError(f"{archive.name} did not contain {self.profile.binary_name}")

    def integrate(self, paths: InstallPaths) -> bool:
        if path_contains(self._path_env, paths.bin_dir):
            _LOGGER.debug("%s is already on PATH", paths.bin_dir)
            return False

        args = append_user_path_command(paths.bin_dir)
        try:
            code = self._runner(args)
        except OSError as exc:
            raise IntegrationError(f"Unable to edit PATH: {exc}") from exc
        if code != 0:
            raise IntegrationError(f"Unable to edit PATH. {args[0]} -> {code}")
        _LOGGER.info(
            "Added %s to your user PATH. Start a new shell session to use deno by name.",
            paths.bin_dir,
        )
        return False
