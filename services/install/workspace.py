"""Temporary working directory owned by a single pipeline run."""

from __future__ import annotations

import logging
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator


_LOGGER = logging.getLogger(__name__)

__all__ = ["temporary_workspace"]


@contextmanager
def temporary_workspace(prefix: str = "deno-install-") -> Iterator[Path]:
    """Create a private temporary directory and remove it on every exit path."""

    path = Path(tempfile.mkdtemp(prefix=prefix))
    _LOGGER.debug("Created workspace %s", path)
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)
        _LOGGER.debug("Removed workspace %s", path)
