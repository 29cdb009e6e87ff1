# SPDX-License-Identifier: MIT
# ghdeploy/tree.py
from __future__ import annotations

import os
import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from .config import short_path, configure_logger
from .errors import CopyFailedError, DestinationError

__all__ = [
    "CopyStats",
    "copy_tree",
    "discard_file",
    "remove_tree",
    "reset_destination",
    "scratch_dir",
    "scratch_file",
]

logger = configure_logger("tree")

DIR_MODE = 0o755


@dataclass(frozen=True)
class CopyStats:
    files_copied: int = 0
    dirs_created: int = 0


# ------------------------------ scratch scopes ------------------------------ #

def discard_file(path: Path) -> None:
    """Remove a scratch file if it is still there; failures are only logged."""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("cleanup: could not remove %s: %s", short_path(path), e)


def remove_tree(path: Path) -> None:
    """Remove a scratch directory recursively; failures are only logged."""
    shutil.rmtree(path, ignore_errors=True)
    if path.exists():
        logger.warning("cleanup: %s still present after removal", short_path(path))


@contextmanager
def scratch_file(*, prefix: str = "ghzip_", suffix: str = ".zip", dir: Optional[str] = None) -> Iterator[Path]:
    """
    Create a uniquely named empty file and yield its path; the file is
    removed when the block exits, whichever way it exits.
    """
    fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=dir)
    os.close(fd)
    path = Path(name)
    logger.debug("scratch: file %s", short_path(path))
    try:
        yield path
    finally:
        discard_file(path)


@contextmanager
def scratch_dir(*, prefix: str = "ghrepo_", dir: Optional[str] = None) -> Iterator[Path]:
    """
    Create a uniquely named directory and yield its path; it is removed
    recursively when the block exits.
    """
    path = Path(tempfile.mkdtemp(prefix=prefix, dir=dir))
    logger.debug("scratch: dir %s", short_path(path))
    try:
        yield path
    finally:
        remove_tree(path)


# ------------------------------ destination --------------------------------- #

def reset_destination(dest: Path) -> None:
    """
    Destroy `dest` completely and recreate it as an empty directory.

    Directory contents are removed depth-first; symlinks are unlinked, never
    followed. A symlink or file sitting at `dest` itself is unlinked.

    Raises:
        DestinationError: if removal or recreation fails.
    """
    try:
        if dest.is_symlink() or (dest.exists() and not dest.is_dir()):
            logger.info("reset: unlinking %s", short_path(dest))
            dest.unlink()
        elif dest.exists():
            logger.info("reset: removing %s", short_path(dest))
            shutil.rmtree(dest)
    except OSError as e:
        raise DestinationError(f"cannot remove {dest}: {e}") from e

    try:
        dest.mkdir(mode=DIR_MODE, parents=True)
    except OSError as e:
        raise DestinationError(f"cannot create {dest}: {e}") from e
    logger.debug("reset: %s recreated empty", short_path(dest))


# ------------------------------ copy ---------------------------------------- #

def _walk_failed(e: OSError) -> None:
    raise CopyFailedError(f"cannot read {e.filename}: {e.strerror}") from e


def copy_tree(src: Path, dst: Path) -> CopyStats:
    """
    Copy everything under `src` into `dst`, visiting each directory before
    its descendants. Directories are created when missing (empty ones
    included); files are copied byte-for-byte and overwrite existing ones.

    Raises:
        CopyFailedError: on the first directory or file that cannot be written.
    """
    files = dirs = 0
    for dirpath, _dirnames, filenames in os.walk(src, onerror=_walk_failed):
        here = Path(dirpath)
        rel = here.relative_to(src)
        target_dir = dst / rel
        if not target_dir.is_dir():
            try:
                target_dir.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
            except OSError as e:
                raise CopyFailedError(f"cannot create directory {target_dir}: {e}") from e
            dirs += 1

        for name in filenames:
            source = here / name
            target = target_dir / name
            try:
                shutil.copyfile(source, target)
            except OSError as e:
                raise CopyFailedError(f"cannot copy {rel / name}: {e}") from e
            files += 1

    logger.info("copy: %d file(s), %d dir(s) → %s", files, dirs, short_path(dst))
    return CopyStats(files_copied=files, dirs_created=dirs)
