"""CLI entry point: renc convert <profile|custom> <file>..."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from lib.config import load_config
from lib.dialogs import Dialogs
from lib.errors import ConfigError, DependencyMissingError, DialogError, UserCancelled
from lib.profiles import CUSTOM, PROFILE_ORDER, PROFILES, get_profile, is_valid_choice
from lib.servicemenu import install_servicemenu, uninstall_servicemenu
from lib.tools import check_dependencies, resolve_qdbus
from renc.batch import run_batch

logger = logging.getLogger("renc")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def _default_dialogs() -> Dialogs:
    try:
        return Dialogs.from_settings(load_config())
    except ConfigError:
        return Dialogs()


def _notify_error(message: str, dialogs: Optional[Dialogs] = None):
    """Print to stderr and, when possible, show a kdialog error."""
    print(f"renc: {message}", file=sys.stderr)
    (dialogs or _default_dialogs()).error(message)


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        self.print_usage(sys.stderr)
        _notify_error(message)
        sys.exit(EXIT_USAGE)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="renc",
        description="renc -- re-encode videos with ffmpeg from the Dolphin context menu",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    sub = parser.add_subparsers(dest="command", parser_class=_ArgumentParser)

    convert = sub.add_parser("convert", help="Convert one or more files")
    convert.add_argument(
        "profile",
        help=f"One of {', '.join(PROFILE_ORDER)}, or '{CUSTOM}' to choose interactively",
    )
    convert.add_argument("files", nargs="+", help="Input files")

    sub.add_parser("help", help="Show this help")

    install = sub.add_parser("install-menu", help="Install the Dolphin service menu")
    install.add_argument("--dir", type=Path, default=None, help="Service menu directory")
    install.add_argument("--exec", dest="exec_cmd", default="renc", help="Command the menu runs")

    uninstall = sub.add_parser("uninstall-menu", help="Remove the Dolphin service menu")
    uninstall.add_argument("--dir", type=Path, default=None, help="Service menu directory")
    return parser


def pick_profile(dialogs: Dialogs) -> str:
    """Ask for a profile. Raises UserCancelled if dismissed."""
    items = [(name, PROFILES[name].description) for name in PROFILE_ORDER]
    return dialogs.radiolist("Choose the output profile:", items, default=PROFILE_ORDER[0])


def convert(profile_name: str, files, settings, dialogs: Dialogs) -> int:
    try:
        check_dependencies(settings)
    except DependencyMissingError as e:
        _notify_error(str(e), dialogs)
        return EXIT_FAILURE

    if not is_valid_choice(profile_name):
        _notify_error(
            f"Unknown profile '{profile_name}'. Choose one of: {', '.join(PROFILE_ORDER)}, {CUSTOM}",
            dialogs,
        )
        return EXIT_USAGE

    if profile_name == CUSTOM:
        try:
            profile_name = pick_profile(dialogs)
        except UserCancelled:
            logger.info("Profile selection cancelled")
            return EXIT_USAGE

    try:
        result = run_batch(files, get_profile(profile_name), settings, dialogs)
    except DialogError as e:
        _notify_error(str(e), dialogs)
        return EXIT_FAILURE
    return result.exit_code


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    if args.command in (None, "help"):
        parser.print_help()
        return EXIT_OK

    if args.command == "install-menu":
        path = install_servicemenu(args.dir, args.exec_cmd)
        print(f"Service menu installed: {path}")
        return EXIT_OK

    if args.command == "uninstall-menu":
        if uninstall_servicemenu(args.dir):
            print("Service menu removed")
        else:
            print("Service menu was not installed")
        return EXIT_OK

    try:
        settings = load_config()
    except ConfigError as e:
        logger.error(str(e))
        _notify_error(str(e), Dialogs())
        return EXIT_FAILURE

    resolve_qdbus(settings)
    dialogs = Dialogs.from_settings(settings)
    return convert(args.profile, args.files, settings, dialogs)


if __name__ == "__main__":
    sys.exit(main())
