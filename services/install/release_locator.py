"""Locate the platform's release asset by scraping the release page."""

from __future__ import annotations

import logging
import re
from urllib.parse import urlsplit

from services.install.constants import (
    ASSET_DOWNLOAD_PATH,
    DENO_REPO_URL,
    LATEST_RELEASE_PATH,
    TAG_RELEASE_PATH,
)
from services.install.http import HttpResolver
from services.install.models import AssetNotFoundError, PlatformProfile, ResolvedRelease
from services.install.versioning import extract_tag


_LOGGER = logging.getLogger(__name__)

__all__ = ["ReleaseLocator", "find_asset_href"]

_LINE_SPLIT_RE = re.compile(r"\r?\n")
_HREF_RE = re.compile(r"""href=["']([^"']*)["']""")


def find_asset_href(page: str, asset_filename: str) -> str | None:
    """Return the href value on the first line linking to ``asset_filename``."""

    for line in _LINE_SPLIT_RE.split(page):
        if "href" not in line or asset_filename not in line:
            continue
        for match in _HREF_RE.finditer(line):
            if asset_filename in match.group(1):
                return match.group(1)
        match = _HREF_RE.search(line)
        return match.group(1) if match else None
    return None


class ReleaseLocator:
    """Resolve a release tag (or latest) to the asset download URL."""

    def __init__(
        self,
        resolver: HttpResolver,
        profile: PlatformProfile,
        *,
        repo_url: str = DENO_REPO_URL,
    ) -> None:
        self._resolver = resolver
        self._profile = profile
        self._repo_url = repo_url.rstrip("/")
        parts = urlsplit(self._repo_url)
        self._origin = f"{parts.scheme}://{parts.netloc}"
        self._asset_prefix = f"{parts.path.rstrip('/')}/{ASSET_DOWNLOAD_PATH}/"

    def release_page_url(self, tag: str | None = None) -> str:
        if tag:
            return f"{self._repo_url}/{TAG_RELEASE_PATH}/{tag}"
        return f"{self._repo_url}/{LATEST_RELEASE_PATH}"

    def resolve(self, tag: str | None = None) -> ResolvedRelease:
        page_url = self.release_page_url(tag)
        filename = self._profile.asset_filename
        _LOGGER.debug("Looking up %s on %s", filename, page_url)

        response = self._resolver.follow(page_url)
        href = find_asset_href(response.text(), filename)
        if href is None:
            raise AssetNotFoundError(f"Unable to find {filename} @ {page_url}")
        if not href.startswith(self._asset_prefix):
            _LOGGER.debug("Rejecting asset link %s outside %s", href, self._asset_prefix)
            raise AssetNotFoundError(f"Unable to find {filename} @ {page_url}")

        resolved_tag = extract_tag(href)
        if resolved_tag is None:
            raise AssetNotFoundError(f"Asset link {href} does not name a release tag")

        release = ResolvedRelease(url=f"{self._origin}{href}", tag=resolved_tag)
        _LOGGER.debug("Resolved %s to %s", tag or "latest", release.url)
        return release
