from __future__ import annotations

import sys
from pathlib import Path

import pytest

from services.install import constants
from shared import logging_config


def _ensure_project_root_on_path() -> None:
    """Guarantee the repository root is discoverable for absolute imports."""

    root = Path(__file__).resolve().parent.parent
    root_str = str(root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)


_ensure_project_root_on_path()

_INSTALLER_ENV_VARS = (
    constants.INSTALL_ROOT_ENV,
    constants.LINK_DIR_ENV,
    constants.REPO_URL_ENV,
    constants.WINDOWS_UNZIP_ENV,
    constants.HTTP_TIMEOUT_ENV,
    constants.LOG_FILE_ENV,
)


@pytest.fixture(autouse=True)
def _isolate_installer_env(monkeypatch: pytest.MonkeyPatch):
    """Keep a developer's own installer overrides out of the tests."""

    for name in _INSTALLER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture(autouse=True)
def _reset_logging():
    logging_config._reset_for_tests()
    try:
        yield
    finally:
        logging_config._reset_for_tests()
