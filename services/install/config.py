"""Environment-derived configuration, read once at startup."""

from __future__ import annotations

import logging
import ntpath
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from services.install import constants


_LOGGER = logging.getLogger(__name__)

__all__ = ["InstallerConfig"]


@dataclass(frozen=True)
class InstallerConfig:
    """Snapshot of everything the installer needs from the environment."""

    sys_platform: str
    home: Path
    path_env: str = ""
    install_root: Path | None = None
    link_dir: Path = Path(constants.DEFAULT_LINK_DIR)
    repo_url: str = constants.DENO_REPO_URL
    windows_unzip: str = constants.WINDOWS_UNZIP_POWERSHELL
    http_timeout: float = constants.DEFAULT_HTTP_TIMEOUT
    log_file: Path | None = None

    @property
    def install_dir(self) -> Path:
        if self.install_root is not None:
            return self.install_root
        return self.home / constants.INSTALL_DIRNAME

    @classmethod
    def from_environ(
        cls,
        environ: Mapping[str, str] | None = None,
        sys_platform: str | None = None,
    ) -> "InstallerConfig":
        env = dict(os.environ if environ is None else environ)
        platform_name = sys_platform or sys.platform
        is_windows = platform_name == "win32"

        install_root = env.get(constants.INSTALL_ROOT_ENV)
        link_dir = env.get(constants.LINK_DIR_ENV)
        log_file = env.get(constants.LOG_FILE_ENV)

        return cls(
            sys_platform=platform_name,
            home=_resolve_home(env, is_windows),
            path_env=_lookup_path(env, is_windows),
            install_root=Path(install_root).expanduser() if install_root else None,
            link_dir=Path(link_dir).expanduser() if link_dir else Path(constants.DEFAULT_LINK_DIR),
            repo_url=(env.get(constants.REPO_URL_ENV) or constants.DENO_REPO_URL).rstrip("/"),
            windows_unzip=_windows_unzip(env.get(constants.WINDOWS_UNZIP_ENV)),
            http_timeout=_positive_float(env.get(constants.HTTP_TIMEOUT_ENV), constants.DEFAULT_HTTP_TIMEOUT),
            log_file=Path(log_file).expanduser() if log_file else None,
        )


def _resolve_home(env: Mapping[str, str], is_windows: bool) -> Path:
    if is_windows:
        homepath = env.get("HOMEPATH")
        if homepath:
            return Path(ntpath.join(env.get("HOMEDRIVE") or "C:", homepath))
        profile = env.get("USERPROFILE")
        if profile:
            return Path(profile)
    else:
        home = env.get("HOME")
        if home:
            return Path(home)
    return Path.home()


def _lookup_path(env: Mapping[str, str], is_windows: bool) -> str:
    if not is_windows:
        return env.get("PATH", "")
    # Windows environment names are case-insensitive; the block usually spells it ``Path``.
    for name, value in env.items():
        if name.upper() == "PATH":
            return value
    return ""


def _windows_unzip(raw: str | None) -> str:
    if not raw:
        return constants.WINDOWS_UNZIP_POWERSHELL
    choice = raw.strip().lower()
    if choice in constants.WINDOWS_UNZIP_STRATEGIES:
        return choice
    _LOGGER.warning(
        "Ignoring %s=%s; expected one of %s",
        constants.WINDOWS_UNZIP_ENV,
        raw,
        ", ".join(constants.WINDOWS_UNZIP_STRATEGIES),
    )
    return constants.WINDOWS_UNZIP_POWERSHELL


def _positive_float(raw: str | None, default: float) -> float:
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        value = 0.0
    if value <= 0:
        _LOGGER.warning("Ignoring %s=%s; using %s", constants.HTTP_TIMEOUT_ENV, raw, default)
        return default
    return value
