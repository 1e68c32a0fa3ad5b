"""Download a release asset into the temporary workspace."""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path

from services.install.http import HttpResolver
from services.install.models import TransferError


_LOGGER = logging.getLogger(__name__)

__all__ = ["ArchiveFetcher"]


class ArchiveFetcher:
    """Fetch an asset and persist it under a fresh, timestamp-based name."""

    def __init__(self, resolver: HttpResolver) -> None:
        self._resolver = resolver

    def download(self, directory: Path, url: str, suffix: str) -> Path:
        response = self._resolver.follow(url)
        target = self._unique_path(directory, suffix)
        partial = target.with_name(f"{target.name}.part")
        try:
            with partial.open("wb") as destination:
                destination.write(response.body)
                destination.flush()
                os.fsync(destination.fileno())
            os.replace(partial, target)
        except OSError as exc:
            partial.unlink(missing_ok=True)
            raise TransferError(f"Failed to write {url} to {target}: {exc}") from exc
        _LOGGER.debug("Downloaded %s bytes to %s", len(response.body), target)
        return target

    @staticmethod
    def _unique_path(directory: Path, suffix: str) -> Path:
        stamp = time.time_ns() // 1_000_000
        candidate = directory / f"{stamp}.{suffix}"
        while candidate.exists() or candidate.with_name(f"{candidate.name}.part").exists():
            stamp += 1
            candidate = directory / f"{stamp}.{suffix}"
        return candidate
