# -*- coding: utf-8 -*-
"""
ghdeploy.__init__

Public surface for github-deploy.

Exports:
    - Deployer       : Replaces a directory with a GitHub branch archive.
    - deploy         : One-call shortcut around Deployer.
    - DeployReport   : Summary of a successful deploy.
    - RepoReference  : Parsed owner/repo/branch.
    - parse_repo_url : Reference string → RepoReference.
    - Settings       : Environment-driven configuration.
    - DeployError and its kinds (InvalidUrlError, DownloadFailedError,
      DestinationError, CorruptArchiveError, EmptyArchiveError, CopyFailedError).
"""

from .config import Settings
from .deployer import DeployReport, Deployer, deploy
from .errors import (
    CopyFailedError,
    CorruptArchiveError,
    DeployError,
    DestinationError,
    DownloadFailedError,
    EmptyArchiveError,
    InvalidUrlError,
)
from .locking import destination_lock
from .reference import RepoReference, parse_repo_url

__all__ = [
    "Deployer",
    "DeployReport",
    "deploy",
    "destination_lock",
    "RepoReference",
    "parse_repo_url",
    "Settings",
    "DeployError",
    "InvalidUrlError",
    "DownloadFailedError",
    "DestinationError",
    "CorruptArchiveError",
    "EmptyArchiveError",
    "CopyFailedError",
]
