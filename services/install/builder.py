"""Helpers for constructing the install service."""

from __future__ import annotations

import logging

from services.install.archive_fetcher import ArchiveFetcher
from services.install.config import InstallerConfig
from services.install.http import HttpResolver, Transport, UrllibTransport
from services.install.installer import Installer
from services.install.models import InstallPaths, PlatformProfile
from services.install.platforms import Platform, PosixPlatform, WindowsPlatform, profile_for
from services.install.process import CommandRunner, run_command
from services.install.release_locator import ReleaseLocator
from services.install.service import InstallService
from services.install.verifier import Verifier


_LOGGER = logging.getLogger(__name__)


def build_platform(
    config: InstallerConfig, profile: PlatformProfile, runner: CommandRunner = run_command
) -> Platform:
    if profile.is_windows:
        return WindowsPlatform(
            profile,
            path_env=config.path_env,
            unzip_strategy=config.windows_unzip,
            runner=runner,
        )
    return PosixPlatform(profile, runner=runner)


def build_install_service(
    config: InstallerConfig,
    *,
    transport: Transport | None = None,
    runner: CommandRunner = run_command,
    verifier: Verifier | None = None,
) -> InstallService:
    """Construct an :class:`InstallService` for ``config``.

    Raises :class:`UnsupportedPlatformError` when no asset exists for the
    configured operating system.
    """

    profile = profile_for(config.sys_platform)
    paths = InstallPaths.for_profile(config.install_dir, profile, config.link_dir)
    _LOGGER.debug("Install layout for %s: %s", profile.name, paths)

    resolver = HttpResolver(transport or UrllibTransport(timeout=config.http_timeout))
    return InstallService(
        profile,
        ReleaseLocator(resolver, profile, repo_url=config.repo_url),
        ArchiveFetcher(resolver),
        Installer(build_platform(config, profile, runner), paths),
        verifier or Verifier(paths.binary_path),
    )


__all__ = ["build_install_service", "build_platform"]
