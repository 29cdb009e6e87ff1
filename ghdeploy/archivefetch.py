# SPDX-License-Identifier: MIT
"""
ghdeploy.archivefetch

Download a GitHub branch archive to a local file and unpack it.

Features
- HTTP(S) download via httpx, streamed to disk, with redirect support
- Identifying User-Agent; no timeout unless one is configured
- ZIP extraction that keeps empty directories and refuses entries that would
  land outside the workspace ("zip slip")
- Locates the single root folder GitHub wraps archives in (<repo>-<branch>/)

Public API
----------
download_archive(url, dest, *, user_agent, timeout=None, transport=None, logger=None) -> int
extract_archive(archive, workspace, *, logger=None) -> int
locate_root(workspace) -> pathlib.Path
"""
from __future__ import annotations

import logging
import os
import shutil
import zipfile
import zlib
from pathlib import Path
from typing import Optional

import httpx

from .config import DEFAULT_USER_AGENT, short_path, configure_logger
from .errors import CorruptArchiveError, DownloadFailedError, EmptyArchiveError

__all__ = [
    "download_archive",
    "extract_archive",
    "locate_root",
]

_log = configure_logger("archivefetch")

_CHUNK = 64 * 1024


# --------------------------------------------------------------------------------------
# Download
# --------------------------------------------------------------------------------------
def download_archive(
    url: str,
    dest: Path,
    *,
    user_agent: str = DEFAULT_USER_AGENT,
    timeout: Optional[float] = None,
    transport: Optional[httpx.BaseTransport] = None,
    logger: Optional[logging.Logger] = None,
) -> int:
    """
    GET `url` (following redirects) and write the body to `dest`.

    Returns the number of bytes written. The caller owns `dest` and removes it
    on failure.

    Raises
    ------
    DownloadFailedError for transport errors, non-2xx responses, or write errors.
    """
    lg = logger or _log
    lg.info("http: GET %s", url)
    written = 0
    try:
        with httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": user_agent},
            transport=transport,
        ) as client:
            with client.stream("GET", url) as resp:
                resp.raise_for_status()
                with open(dest, "wb") as out:
                    for chunk in resp.iter_bytes(_CHUNK):
                        out.write(chunk)
                        written += len(chunk)
    except httpx.HTTPStatusError as e:
        raise DownloadFailedError(f"http {e.response.status_code} for {url}") from e
    except httpx.HTTPError as e:
        raise DownloadFailedError(f"{type(e).__name__}: {e}") from e
    except OSError as e:
        raise DownloadFailedError(f"cannot write {dest}: {e}") from e

    lg.debug("http: downloaded %d bytes → %s", written, short_path(dest))
    return written


# --------------------------------------------------------------------------------------
# Extraction
# --------------------------------------------------------------------------------------
def _member_target(member: zipfile.ZipInfo, root: Path) -> Path:
    name = member.filename
    if name.startswith(("/", "\\")) or ".." in Path(name).parts:
        raise CorruptArchiveError(f"unsafe zip entry path: {name}")
    dest = (root / name).resolve()
    if dest != root and root not in dest.parents:
        raise CorruptArchiveError(f"unsafe zip entry path: {name}")
    return dest


def extract_archive(archive: Path, workspace: Path, *, logger: Optional[logging.Logger] = None) -> int:
    """
    Extract every entry of the ZIP at `archive` into `workspace`, keeping the
    relative layout. Directory entries are created even when empty.

    Returns the number of members processed.

    Raises
    ------
    CorruptArchiveError if the file is not a ZIP, an entry is unsafe or
    damaged, or extraction cannot write to the workspace.
    """
    lg = logger or _log
    root = workspace.resolve()
    try:
        with zipfile.ZipFile(archive) as zf:
            members = zf.infolist()
            for member in members:
                dest = _member_target(member, root)
                if member.is_dir():
                    dest.mkdir(parents=True, exist_ok=True)
                    continue
                dest.parent.mkdir(parents=True, exist_ok=True)
                try:
                    with zf.open(member, "r") as src, open(dest, "wb") as out:
                        shutil.copyfileobj(src, out)
                except (zlib.error, EOFError, RuntimeError) as e:
                    # encrypted entries raise a plain RuntimeError
                    raise CorruptArchiveError(f"damaged zip entry {member.filename}: {e}") from e
    except (zipfile.BadZipFile, NotImplementedError) as e:
        raise CorruptArchiveError(f"bad zip file: {e}") from e
    except OSError as e:
        raise CorruptArchiveError(f"cannot extract into {workspace}: {e}") from e

    lg.debug("zip: extracted %d member(s) → %s", len(members), short_path(workspace))
    return len(members)


def locate_root(workspace: Path) -> Path:
    """
    Return the folder GitHub wraps the tree in: the first entry of the
    workspace listing.

    Raises
    ------
    EmptyArchiveError if the workspace is empty or that entry is not a directory.
    """
    entries = os.listdir(workspace)
    if not entries:
        raise EmptyArchiveError("extracted archive is empty")
    root = workspace / entries[0]
    if not root.is_dir():
        raise EmptyArchiveError(f"top-level entry {entries[0]!r} is not a folder")
    _log.debug("zip: root folder %s", root.name)
    return root
