"""
Command-line interface for pdfverify.

Argument parsing and dispatch.  Verification output lives in ``check``.
"""

from __future__ import annotations

import argparse
import logging
import sys

from ...constants import ENV_MAX_RETRIES, ENV_STRUCTURE_CHECK, __version__
from .check import cmd_check


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="pdfverify",
        description="Verify detached CMS/PKCS#7 signatures embedded in PDF documents.",
        epilog=(
            "Environment variables:\n"
            f"  {ENV_MAX_RETRIES}      Zero-padding retries for CMS decoding (0-255)\n"
            f"  {ENV_STRUCTURE_CHECK}  Set to 0 to skip the pikepdf structure check\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-V", "--version", action="version", version=f"pdfverify {__version__}")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Show debug logging",
    )

    sub = parser.add_subparsers(dest="command", help="Available commands")

    # check
    p_check = sub.add_parser("check", help="Check the last embedded PDF signature")
    p_check.add_argument("pdf", help="Signed PDF file")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "check":
        cmd_check(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
