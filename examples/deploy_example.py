# -*- coding: utf-8 -*-
"""
examples/deploy_example.py

Deploy a GitHub branch into a local directory and print the report.

Usage:
    python -m examples.deploy_example https://github.com/user/repo/tree/main ./public_html/bot

Env (optional):
    GHDEPLOY_DEBUG=1        : log every step to stderr
    GHDEPLOY_HTTP_TIMEOUT   : seconds before the download gives up (default: never)
"""
from __future__ import annotations

import sys

from ghdeploy import Deployer, DeployError


def main() -> int:
    if len(sys.argv) != 3:
        print(__doc__)
        return 2
    repo_url, dest = sys.argv[1], sys.argv[2]

    try:
        report = Deployer().deploy(repo_url, dest)
    except DeployError as e:
        print(f"❌ {e.kind}: {e}")
        return 1

    print(f"✅ Deployed {report.reference} → {report.destination}")
    print(f"   archive : {report.archive_url}")
    print(f"   size    : {report.bytes_downloaded} bytes")
    print(f"   files   : {report.files_copied} ({report.dirs_created} dirs)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
