"""
Entry point for the UDEV Gothic installer for Termux.
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from .application.domain import InstallOptions
from .application.exceptions import InstallerError
from .application.release import PRESET_EXAMPLES
from .infrastructure.containers import Container
from .infrastructure.termux import is_termux_env

logger = logging.getLogger(__name__)

_EPILOG = """\
Examples:
  %(prog)s
  %(prog)s --preset nf
  %(prog)s --preset 35nflg-bold
  %(prog)s --font UDEVGothic35HS-Regular.ttf
  %(prog)s --preset nf --yes

Cache:
  Downloaded zip files are cached in: {cache_dir}
"""


def setup_logging(level: str, fmt: str):
    """Applies basic logging configuration."""
    logging.basicConfig(level=level, format=fmt)


def build_parser(cache_dir: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="udevg-termux",
        description="Install a UDEV Gothic font as the Termux terminal font.",
        epilog=_EPILOG.format(cache_dir=cache_dir),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-f", "--font",
        metavar="NAME",
        help="Font file name in release archive (exact or partial).",
    )

    parser.add_argument(
        "-p", "--preset",
        metavar="PRESET",
        help="Short preset (e.g. nf, nflg, 35nf, 35nflg, hs).",
    )

    parser.add_argument(
        "-l", "--list",
        dest="list_only",
        action="store_true",
        help="Show available packages/presets and exit.",
    )

    parser.add_argument(
        "-y", "--yes",
        dest="assume_yes",
        action="store_true",
        help="Skip confirmation prompt.",
    )

    parser.add_argument(
        "--no-verify",
        action="store_true",
        help="Skip SHA256 verification (not recommended).",
    )

    parser.add_argument(
        "--require-verify",
        action="store_true",
        help="Fail if SHA256 digest is unavailable.",
    )

    return parser


def print_listing(rows):
    print("Available packages (latest release):")
    for label, name in rows:
        print(f"  - {label:<8} {name}")
    print()
    print("Preset examples:")
    for example in PRESET_EXAMPLES:
        print(f"  - {example}")


def run_application(args: argparse.Namespace, container: Container) -> int:
    """Wires and runs the application using the DI container."""

    container.cli_args.from_dict(vars(args))
    config = container.config()

    if not is_termux_env(config.termux.prefix):
        logger.warning("This does not look like Termux. Continuing anyway.")

    options = InstallOptions(
        font_name=args.font,
        preset=args.preset,
        list_only=args.list_only,
        assume_yes=args.assume_yes,
    )

    try:
        service = container.installer_service()
        if options.list_only:
            print_listing(service.list_packages())
        else:
            service.run(options)
    except InstallerError as e:
        logger.error(f"An installer error occurred: {e}")
        return 1
    finally:
        container.shutdown_resources()

    return 0


def main(
    argv: Optional[Sequence[str]] = None, container: Optional[Container] = None
) -> int:
    container = container or Container()
    config = container.config()
    setup_logging(level=config.logging.level, fmt=config.logging.format)

    parser = build_parser(config.paths.cache_dir)
    args = parser.parse_args(argv)

    try:
        return run_application(args, container)
    except KeyboardInterrupt:
        logger.error("Interrupted.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
