# SPDX-License-Identifier: MIT
# ghdeploy/locking.py
from __future__ import annotations

import os
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List

__all__ = ["destination_lock"]

_registry_guard = threading.Lock()
# key → [lock, number of callers holding or waiting on it]
_locks: Dict[str, List[Any]] = {}


def _key(path: str | os.PathLike[str]) -> str:
    return os.path.normcase(str(Path(path).expanduser().resolve()))


def _acquire_entry(key: str) -> threading.Lock:
    with _registry_guard:
        entry = _locks.get(key)
        if entry is None:
            entry = _locks[key] = [threading.Lock(), 0]
        entry[1] += 1
        return entry[0]


def _release_entry(key: str) -> None:
    with _registry_guard:
        entry = _locks[key]
        entry[1] -= 1
        if entry[1] == 0:
            del _locks[key]


@contextmanager
def destination_lock(path: str | os.PathLike[str]) -> Iterator[None]:
    """
    Serialize deploys that target the same destination within this process.

    Locks are keyed by the resolved path, so "./site" and "/abs/site" share
    one. Different destinations never block each other. Other processes are
    not covered. A key is dropped from the registry once nobody holds or
    waits on it.
    """
    key = _key(path)
    lock = _acquire_entry(key)
    try:
        with lock:
            yield
    finally:
        _release_entry(key)
