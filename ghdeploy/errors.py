# SPDX-License-Identifier: MIT
"""
ghdeploy.errors

Flat error taxonomy for a deploy. Every failure is terminal for the
invocation; callers catch DeployError and show str(err) directly.
"""
from __future__ import annotations

from typing import Optional

__all__ = [
    "DeployError",
    "InvalidUrlError",
    "DownloadFailedError",
    "DestinationError",
    "CorruptArchiveError",
    "EmptyArchiveError",
    "CopyFailedError",
]


class DeployError(RuntimeError):
    """
    Base class for deploy failures.

    Attributes:
        kind (str): Stable error kind name, e.g. "DownloadFailed".
        detail (str|None): Short human-friendly explanation.
    """

    kind = "DeployError"
    summary = "Deploy failed"

    def __init__(self, detail: Optional[str] = None) -> None:
        self.detail = detail
        super().__init__(f"{self.summary}: {detail}" if detail else self.summary)


class InvalidUrlError(DeployError):
    kind = "InvalidUrl"
    summary = "Invalid GitHub URL format"


class DownloadFailedError(DeployError):
    kind = "DownloadFailed"
    summary = "Error downloading ZIP"


class DestinationError(DeployError):
    kind = "DestinationError"
    summary = "Cannot prepare destination"


class CorruptArchiveError(DeployError):
    kind = "CorruptArchive"
    summary = "Failed to open downloaded ZIP"


class EmptyArchiveError(DeployError):
    kind = "EmptyArchive"
    summary = "Archive contains no root folder"


class CopyFailedError(DeployError):
    kind = "CopyFailed"
    summary = "Failed to copy extracted tree"
