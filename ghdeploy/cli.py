# SPDX-License-Identifier: MIT
"""
Command-line front end:

    ghdeploy https://github.com/user/repo[/tree/branch] /var/www/bot

Prints a one-line success or error message; exit status 0 on success, 1 on a
failed deploy, 2 on bad arguments.
"""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from .config import Settings
from .deployer import Deployer
from .errors import DeployError


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="ghdeploy",
        description="Replace a directory with the contents of a GitHub branch archive.",
    )
    ap.add_argument("repo_url", help="https://github.com/<owner>/<repo>[/tree/<branch>]")
    ap.add_argument("dest", help="deployment directory (destroyed and recreated)")
    ap.add_argument("--timeout", type=float, default=None, help="HTTP timeout in seconds (default: none)")
    ap.add_argument("--default-branch", default=None, help="branch used when the URL names none")
    ap.add_argument("-v", "--verbose", action="store_true", help="log progress to stderr")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="[ghdeploy] %(levelname)s: %(message)s")

    try:
        settings = Settings.from_env()
    except ValueError as e:
        parser.error(str(e))
    if args.timeout is not None:
        settings = replace(settings, timeout=args.timeout if args.timeout > 0 else None)
    if args.default_branch:
        settings = replace(settings, default_branch=args.default_branch)

    try:
        report = Deployer(settings=settings).deploy(args.repo_url, args.dest)
    except DeployError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Success! Deployed {report.reference} to {report.destination} ({report.files_copied} files).")
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
