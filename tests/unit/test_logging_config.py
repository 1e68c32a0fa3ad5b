from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest

from shared import logging_config


def _flush_managed_handlers() -> None:
    for handler in logging.getLogger().handlers:
        if getattr(handler, logging_config._HANDLER_TAG, False):  # type: ignore[attr-defined]
            handler.flush()


def _managed_handlers() -> list[logging.Handler]:
    return [
        handler
        for handler in logging.getLogger().handlers
        if getattr(handler, logging_config._HANDLER_TAG, False)  # type: ignore[attr-defined]
    ]


def test_console_messages_carry_prefix_and_split_streams() -> None:
    out, err = io.StringIO(), io.StringIO()
    logging_config.ensure_installer_logging(stdout=out, stderr=err)

    logging.getLogger("services.install").info("Downloading asset")
    logging.getLogger("services.install").error("Installation failed")
    _flush_managed_handlers()

    assert out.getvalue() == "[deno-install info] Downloading asset\n"
    assert err.getvalue() == "[deno-install error] Installation failed\n"


def test_debug_output_only_when_verbose() -> None:
    out = io.StringIO()
    logging_config.ensure_installer_logging("verbose", stdout=out, stderr=io.StringIO())

    logging.getLogger("services.install").debug("Running gunzip")
    _flush_managed_handlers()

    assert "[deno-install debug] Running gunzip" in out.getvalue()


def test_quiet_suppresses_info() -> None:
    out = io.StringIO()
    logging_config.ensure_installer_logging(logging_config.LogVerbosity.QUIET, stdout=out, stderr=io.StringIO())

    logging.getLogger("services.install").info("Downloading asset")
    _flush_managed_handlers()

    assert out.getvalue() == ""


def test_logging_configuration_is_idempotent() -> None:
    logging_config.ensure_installer_logging(stdout=io.StringIO(), stderr=io.StringIO())
    logging_config.ensure_installer_logging(stdout=io.StringIO(), stderr=io.StringIO())

    assert len(_managed_handlers()) == 2


def test_log_file_records_debug_and_redacts_home(tmp_path: Path) -> None:
    home = tmp_path / "alice"
    log_path = tmp_path / "logs" / "install.log"
    logging_config.ensure_installer_logging(
        log_file=log_path, home=home, stdout=io.StringIO(), stderr=io.StringIO()
    )

    logging.getLogger("services.install").debug("Installed binary at %s", home / ".deno" / "bin" / "deno")
    logging.getLogger("services.install").debug("Running as alice")
    _flush_managed_handlers()

    contents = log_path.read_text(encoding="utf-8")
    assert f"Installed binary at {logging_config.USER_HOME_PLACEHOLDER}" in contents
    assert f"Running as {logging_config.USER_PLACEHOLDER}" in contents
    assert str(home) not in contents


def test_unwritable_log_file_falls_back_to_console(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("", encoding="utf-8")
    out, err = io.StringIO(), io.StringIO()

    logging_config.ensure_installer_logging(log_file=blocker / "install.log", stdout=out, stderr=err)
    logging.getLogger("services.install").info("Downloading asset")
    _flush_managed_handlers()

    assert "[deno-install warning] Unable to write installer log" in err.getvalue()
    assert out.getvalue() == "[deno-install info] Downloading asset\n"
    assert len(_managed_handlers()) == 2


def test_unknown_verbosity_is_rejected() -> None:
    with pytest.raises(ValueError):
        logging_config.ensure_installer_logging("chatty")
