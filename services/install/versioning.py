"""Helpers for validating release tags and comparing installed versions."""

from __future__ import annotations

import re

from packaging.version import InvalidVersion, Version

from services.install.constants import TAG_PATTERN
from services.install.models import InvalidReleaseTagError


__all__ = [
    "compare_versions",
    "describe_change",
    "extract_tag",
    "normalise_tag",
    "version_pattern",
]

_TAG_RE = re.compile(TAG_PATTERN)
_FULL_TAG_RE = re.compile(rf"^{TAG_PATTERN}$")
_BARE_VERSION_RE = re.compile(r"^\d+\.\d+\.\d+$")


def normalise_tag(raw: str | None) -> str | None:
    """Return ``raw`` as a ``vMAJOR.MINOR.PATCH`` tag, or ``None`` for latest.

    A bare ``MAJOR.MINOR.PATCH`` gains the ``v`` prefix. Anything else is
    rejected rather than silently treated as "latest".
    """

    if raw is None:
        return None
    candidate = raw.strip()
    if not candidate:
        return None
    if _BARE_VERSION_RE.match(candidate):
        candidate = f"v{candidate}"
    if not _FULL_TAG_RE.match(candidate):
        raise InvalidReleaseTagError(
            f"Invalid release tag {raw!r}; expected the form vMAJOR.MINOR.PATCH (e.g. v1.4.0)"
        )
    return candidate


def extract_tag(text: str) -> str | None:
    """Return the first ``vMAJOR.MINOR.PATCH`` substring of ``text``."""

    match = _TAG_RE.search(text)
    return match.group(0) if match else None


def version_pattern(tag: str) -> re.Pattern[str]:
    """Pattern matching ``tag``'s digits as a whole version in command output."""

    digits = tag[1:] if tag.startswith("v") else tag
    return re.compile(rf"(?<![\d.]){re.escape(digits)}(?![\d.]*\d)")


def compare_versions(current_version: str, candidate: str) -> int:
    """Return ``1`` if ``candidate`` is newer, ``-1`` if older, ``0`` if equal."""

    try:
        current_parsed = Version(current_version)
        candidate_parsed = Version(candidate)
    except InvalidVersion:
        return 0 if current_version == candidate else 1
    if candidate_parsed == current_parsed:
        return 0
    return 1 if candidate_parsed > current_parsed else -1


def describe_change(current_version: str | None, candidate: str) -> str:
    if current_version is None:
        return f"Installing deno {candidate}"
    comparison = compare_versions(current_version, candidate)
    if comparison > 0:
        return f"Upgrading deno {current_version} -> {candidate}"
    if comparison < 0:
        return f"Downgrading deno {current_version} -> {candidate}"
    return f"Reinstalling deno {candidate}"
