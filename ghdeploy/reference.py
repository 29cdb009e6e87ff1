# SPDX-License-Identifier: MIT
"""
ghdeploy.reference

Parse a user-supplied GitHub URL into a RepoReference and derive the archive
download URL for it.

Accepted shapes:
    https://github.com/<owner>/<repo>                     → default branch
    https://github.com/<owner>/<repo>/tree/<branch>       → explicit branch
    https://github.com/<owner>/<repo>/blob/<branch>/<path> → everything after
        blob/ is taken as the branch token (sub-paths are not split off)

Only branches under refs/heads are addressable; tags and commit SHAs are not
resolved.
"""
from __future__ import annotations

import re
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, field_validator

from .config import DEFAULT_BRANCH
from .errors import InvalidUrlError

__all__ = ["RepoReference", "parse_repo_url"]

_GITHUB_URL = re.compile(r"github\.com/([^/]+)/([^/]+)(?:/(tree|blob)/(.+))?$", re.IGNORECASE)

ARCHIVE_URL = "https://github.com/{owner}/{repo}/archive/refs/heads/{branch}.zip"


class RepoReference(BaseModel):
    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    branch: str = DEFAULT_BRANCH

    @field_validator("owner", "repo")
    @classmethod
    def _single_segment(cls, v: str) -> str:
        if not v or "/" in v:
            raise ValueError("must be a non-empty path segment without '/'")
        return v

    @field_validator("branch")
    @classmethod
    def _non_empty_branch(cls, v: str) -> str:
        if not v:
            raise ValueError("branch must not be empty")
        return v

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def archive_url(self) -> str:
        # Slashes in branch names are percent-encoded as well.
        return ARCHIVE_URL.format(
            owner=self.owner,
            repo=self.repo,
            branch=quote(self.branch, safe=""),
        )

    def __str__(self) -> str:
        return f"{self.slug}@{self.branch}"


def parse_repo_url(url: str, *, default_branch: str = DEFAULT_BRANCH) -> RepoReference:
    """
    Parse a GitHub URL into owner/repo/branch.

    Raises:
        InvalidUrlError: if the string does not contain github.com/<owner>/<repo>
            in one of the accepted shapes.
    """
    m = _GITHUB_URL.search((url or "").strip())
    if not m:
        raise InvalidUrlError(f"expected https://github.com/<owner>/<repo>[/tree/<branch>], got {url!r}")
    owner, repo, _kind, branch = m.groups()
    return RepoReference(owner=owner, repo=repo, branch=branch or default_branch or DEFAULT_BRANCH)
