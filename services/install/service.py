"""Service that resolves, downloads, installs and verifies a release."""

from __future__ import annotations

import logging

from services.install.archive_fetcher import ArchiveFetcher
from services.install.installer import Installer
from services.install.models import PlatformProfile, ReleaseReference, ResolvedRelease
from services.install.release_locator import ReleaseLocator
from services.install.verifier import Verifier
from services.install.versioning import describe_change
from services.install.workspace import temporary_workspace


_LOGGER = logging.getLogger(__name__)


class InstallService:
    """Run the install pipeline one step at a time.

    Every step finishes before the next starts. The temporary workspace is
    removed whether the run succeeds or fails, and a failure after the live
    binary was moved aside puts the previous binary back.
    """

    def __init__(
        self,
        profile: PlatformProfile,
        locator: ReleaseLocator,
        fetcher: ArchiveFetcher,
        installer: Installer,
        verifier: Verifier,
    ) -> None:
        self._profile = profile
        self._locator = locator
        self._fetcher = fetcher
        self._installer = installer
        self._verifier = verifier

    def run(self, reference: ReleaseReference) -> ResolvedRelease:
        _LOGGER.info("Installing deno %s", reference.describe())
        with temporary_workspace() as workspace:
            release = self._locator.resolve(reference.tag)
            _LOGGER.info("Downloading %s", release.url)
            archive = self._fetcher.download(workspace, release.url, self._profile.archive_suffix)

            _LOGGER.info(describe_change(self._verifier.installed_version(), release.version))
            self._installer.prepare()
            with self._installer.replacing_binary() as backed_up:
                if backed_up:
                    _LOGGER.debug("Previous binary kept at %s", self._installer.paths.backup_binary_path)
                binary = self._installer.install(archive, workspace)
                _LOGGER.debug("Installed binary at %s", binary)
                self._installer.integrate()
                self._verifier.check(release.tag)

        _LOGGER.info("Successfully installed deno %s", release.tag)
        return release
