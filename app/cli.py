"""Command line entry point: install or update deno to a release."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import NoReturn, Sequence

from services.install import InstallError, InstallerConfig, ReleaseReference, build_install_service
from services.install.versioning import normalise_tag
from shared.logging_config import LogVerbosity, ensure_installer_logging


_LOGGER = logging.getLogger(__name__)

EXIT_FAILURE = 1


class _InstallerArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILURE, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _InstallerArgumentParser(
        prog="deno-install",
        description="Install or update the deno executable from a GitHub release.",
    )
    parser.add_argument(
        "tag",
        nargs="?",
        help="Release tag to install, e.g. v1.4.0. Defaults to the latest release.",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v",
        "--verbose",
        action="store_const",
        dest="verbosity",
        const=LogVerbosity.VERBOSE,
        help="Show debug output and tracebacks.",
    )
    verbosity.add_argument(
        "-q",
        "--quiet",
        action="store_const",
        dest="verbosity",
        const=LogVerbosity.QUIET,
        help="Only report warnings and errors.",
    )
    parser.set_defaults(verbosity=LogVerbosity.INFO)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = InstallerConfig.from_environ()
    ensure_installer_logging(args.verbosity, log_file=config.log_file, home=config.home)
    verbose = args.verbosity is LogVerbosity.VERBOSE

    try:
        reference = ReleaseReference(normalise_tag(args.tag))
        service = build_install_service(config)
        service.run(reference)
    except InstallError as exc:
        _LOGGER.error("%s", exc, exc_info=verbose)
        _LOGGER.error("Installation failed")
        return EXIT_FAILURE
    except Exception:
        _LOGGER.exception("Unexpected error during installation")
        _LOGGER.error("Installation failed")
        return EXIT_FAILURE
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
