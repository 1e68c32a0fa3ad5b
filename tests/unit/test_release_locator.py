from __future__ import annotations

import re

import pytest

from services.install.http import HttpResolver
from services.install.models import AssetNotFoundError
from services.install.platforms import PROFILES
from services.install.release_locator import ReleaseLocator, find_asset_href
from tests.unit.install_test_utils import (
    LATEST_URL,
    LINUX_HREF,
    LINUX_PROFILE,
    FakeTransport,
    ok,
    redirect,
    release_page,
)

_ALL_HREFS = (
    "/denoland/deno/releases/download/v1.4.0/deno_linux_x64.gz",
    "/denoland/deno/releases/download/v1.4.0/deno_osx_x64.gz",
    "/denoland/deno/releases/download/v1.4.0/deno_win_x64.zip",
)


def _locator(transport: FakeTransport, platform: str = "linux", **kwargs) -> ReleaseLocator:
    return ReleaseLocator(HttpResolver(transport), PROFILES[platform], **kwargs)


@pytest.mark.parametrize("platform", ["linux", "darwin", "windows"])
def test_resolve_latest_returns_asset_for_each_platform(platform: str) -> None:
    transport = FakeTransport().add(LATEST_URL, ok(LATEST_URL, release_page(*_ALL_HREFS)))

    release = _locator(transport, platform).resolve()

    assert release.url.startswith("https://github.com/denoland/")
    assert release.url.endswith(PROFILES[platform].asset_filename)
    assert re.fullmatch(r"v\d+\.\d+\.\d+", release.tag)
    assert release.tag == "v1.4.0"


def test_resolve_tag_requests_tag_page_after_redirect() -> None:
    tag_url = "https://github.com/denoland/deno/releases/tag/v0.3.2"
    href = "/denoland/deno/releases/download/v0.3.2/deno_linux_x64.gz"
    transport = (
        FakeTransport()
        .add(tag_url, redirect(tag_url, "https://github.com/denoland/deno/releases/tag/v0.3.2?expanded=1"))
        .add(
            "https://github.com/denoland/deno/releases/tag/v0.3.2?expanded=1",
            ok("https://github.com/denoland/deno/releases/tag/v0.3.2?expanded=1", release_page(href)),
        )
    )

    release = _locator(transport).resolve("v0.3.2")

    assert release.tag == "v0.3.2"
    assert release.url == f"https://github.com{href}"
    assert release.version == "0.3.2"
    assert transport.requested[0] == tag_url


def test_resolve_fails_when_page_has_no_asset_for_platform() -> None:
    page = release_page("/denoland/deno/releases/download/v1.4.0/deno_win_x64.zip")
    transport = FakeTransport().add(LATEST_URL, ok(LATEST_URL, page))

    with pytest.raises(AssetNotFoundError, match="deno_linux_x64.gz"):
        _locator(transport).resolve()

    assert transport.requested == [LATEST_URL]


def test_resolve_rejects_link_outside_vendor_path() -> None:
    page = release_page("/someone-else/deno/releases/download/v1.4.0/deno_linux_x64.gz")
    transport = FakeTransport().add(LATEST_URL, ok(LATEST_URL, page))

    with pytest.raises(AssetNotFoundError):
        _locator(transport).resolve()


def test_resolve_accepts_single_quoted_href() -> None:
    page = f"<div><a href='{LINUX_HREF}' class='asset'>deno_linux_x64.gz</a></div>"
    transport = FakeTransport().add(LATEST_URL, ok(LATEST_URL, page))

    release = _locator(transport).resolve()

    assert release.url == f"https://github.com{LINUX_HREF}"


def test_resolve_honours_mirror_repository() -> None:
    mirror = "https://mirror.example/denoland/deno"
    latest = f"{mirror}/releases/latest"
    transport = FakeTransport().add(latest, ok(latest, release_page(LINUX_HREF)))

    release = _locator(transport, repo_url=mirror).resolve()

    assert release.url == f"https://mirror.example{LINUX_HREF}"


def test_find_asset_href_prefers_link_naming_the_asset() -> None:
    line = f'<a href="/denoland/deno">repo</a> <a href="{LINUX_HREF}">deno_linux_x64.gz</a>'

    assert find_asset_href(line, LINUX_PROFILE.asset_filename) == LINUX_HREF


def test_find_asset_href_ignores_lines_without_href() -> None:
    page = "deno_linux_x64.gz is published below\n" + release_page(LINUX_HREF)

    assert find_asset_href(page, "deno_linux_x64.gz") == LINUX_HREF
