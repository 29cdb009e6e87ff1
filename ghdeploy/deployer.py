# SPDX-License-Identifier: MIT
from __future__ import annotations

import os
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import httpx

from .archivefetch import download_archive, extract_archive, locate_root
from .config import Settings, short_path, configure_logger
from .locking import destination_lock
from .reference import RepoReference, parse_repo_url
from .tree import copy_tree, discard_file, reset_destination, scratch_dir, scratch_file

__all__ = ["DeployReport", "Deployer", "deploy"]

logger = configure_logger("deployer")


@dataclass(frozen=True)
class DeployReport:
    reference: RepoReference
    destination: str
    archive_url: str
    bytes_downloaded: int = 0
    files_copied: int = 0
    dirs_created: int = 0


class Deployer:
    """
    Replaces a deployment directory with the contents of a GitHub branch:
      parse    → owner/repo/branch from the reference string
      download → branch ZIP into a scratch file
      reset    → destroy and recreate the destination
      extract  → unpack into a scratch workspace
      copy     → workspace root folder's contents into the destination

    The destination is destroyed before extraction, so a failure after the
    reset leaves it empty or partially populated. Scratch files are removed on
    every exit path.
    """

    def __init__(
        self,
        *,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.settings = settings or Settings.from_env()
        self.transport = transport
        logger.debug("Deployer created (settings=%s)", self.settings)

    # ---- Public API ----------------------------------------------------------

    def parse(self, repo_url: str) -> RepoReference:
        return parse_repo_url(repo_url, default_branch=self.settings.default_branch)

    def deploy(self, repo_url: str, dest: str | os.PathLike[str]) -> DeployReport:
        """
        Run one full deploy of `repo_url` into `dest`.

        Raises a DeployError subclass on the first failing step; nothing is
        retried.
        """
        ref = self.parse(repo_url)
        target = Path(dest).expanduser().absolute()
        logger.info("deploy: %s → %s", ref, short_path(target))

        with destination_lock(target):
            return self._run(ref, target)

    # ---- Internals -----------------------------------------------------------

    def _run(self, ref: RepoReference, target: Path) -> DeployReport:
        tmp_dir = self.settings.tmp_dir
        url = ref.archive_url

        with ExitStack() as scratch:
            archive = scratch.enter_context(scratch_file(dir=tmp_dir))
            size = download_archive(
                url,
                archive,
                user_agent=self.settings.user_agent,
                timeout=self.settings.timeout,
                transport=self.transport,
                logger=logger,
            )

            reset_destination(target)

            workspace = scratch.enter_context(scratch_dir(dir=tmp_dir))
            try:
                extract_archive(archive, workspace, logger=logger)
            finally:
                discard_file(archive)

            root = locate_root(workspace)
            logger.info("deploy: copying %s/ → %s", root.name, short_path(target))
            stats = copy_tree(root, target)

        report = DeployReport(
            reference=ref,
            destination=str(target),
            archive_url=url,
            bytes_downloaded=size,
            files_copied=stats.files_copied,
            dirs_created=stats.dirs_created,
        )
        logger.info(
            "deploy: complete %s files=%d dirs=%d bytes=%d",
            ref,
            report.files_copied,
            report.dirs_created,
            report.bytes_downloaded,
        )
        return report


def deploy(repo_url: str, dest: str | os.PathLike[str], **kwargs: Any) -> DeployReport:
    """Shortcut for Deployer(**kwargs).deploy(repo_url, dest)."""
    return Deployer(**kwargs).deploy(repo_url, dest)
