# tests/conftest.py
# Shared fixtures: mock HTTP transports, in-memory ZIP builders, isolated scratch dirs.
from __future__ import annotations

import io
import struct
import zipfile
from pathlib import Path
from typing import Callable, Dict, Optional

import httpx
import pytest

from ghdeploy import Deployer, Settings


# ---- helpers ----------------------------------------------------------------
def build_zip(entries: Dict[str, Optional[bytes]]) -> bytes:
    """
    Build ZIP bytes from {name: content}. A name ending in "/" with content
    None becomes an explicit directory entry.
    """
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in entries.items():
            if data is None:
                zf.writestr(zipfile.ZipInfo(name), b"")
            else:
                zf.writestr(name, data)
    return buf.getvalue()


def _central_header(data: bytearray, name: str) -> int:
    """Offset of the central directory record for `name`."""
    raw = name.encode("utf-8")
    pos = data.find(b"PK\x01\x02")
    while pos != -1:
        name_len = struct.unpack_from("<H", data, pos + 28)[0]
        if bytes(data[pos + 46 : pos + 46 + name_len]) == raw:
            return pos
        pos = data.find(b"PK\x01\x02", pos + 4)
    raise KeyError(name)


def damage_entry(payload: bytes, name: str) -> bytes:
    """Overwrite the start of an entry's compressed data, leaving the directory intact."""
    data = bytearray(payload)
    with zipfile.ZipFile(io.BytesIO(payload)) as zf:
        info = zf.getinfo(name)
    name_len, extra_len = struct.unpack_from("<HH", data, info.header_offset + 26)
    start = info.header_offset + 30 + name_len + extra_len
    for i in range(start, min(start + 20, start + info.compress_size)):
        data[i] ^= 0xFF
    return bytes(data)


def flag_encrypted(payload: bytes, name: str) -> bytes:
    """Set the "encrypted" bit on an entry's central directory record."""
    data = bytearray(payload)
    pos = _central_header(data, name)
    flags = struct.unpack_from("<H", data, pos + 8)[0]
    struct.pack_into("<H", data, pos + 8, flags | 0x1)
    return bytes(data)


def damaged_zips() -> dict[str, bytes]:
    """Well-formed ZIP containers whose X/a.txt entry cannot be read back."""
    good = build_zip({"X/": None, "X/a.txt": b"hello world " * 200})
    return {
        "damaged-deflate": damage_entry(good, "X/a.txt"),
        "encrypted-flag": flag_encrypted(good, "X/a.txt"),
    }


def list_tree(root: Path) -> set[str]:
    """All paths under root, relative and "/"-joined; directories end in "/"."""
    out = set()
    for p in root.rglob("*"):
        rel = p.relative_to(root).as_posix()
        out.add(rel + "/" if p.is_dir() else rel)
    return out


# ---- fixtures ----------------------------------------------------------------
@pytest.fixture
def mock_transport_factory() -> (
    Callable[[Callable[[httpx.Request], httpx.Response]], httpx.MockTransport]
):
    """
    Factory returning an httpx.MockTransport from a handler function.

    Usage:
        def handler(request: httpx.Request) -> httpx.Response: ...
        transport = mock_transport_factory(handler)
    """

    def _factory(
        handler: Callable[[httpx.Request], httpx.Response],
    ) -> httpx.MockTransport:
        return httpx.MockTransport(handler)

    return _factory


@pytest.fixture
def scratch_root(tmp_path: Path) -> Path:
    """Private temp root so tests can assert nothing is left behind."""
    d = tmp_path / "scratch"
    d.mkdir()
    return d


@pytest.fixture
def settings(scratch_root: Path) -> Settings:
    return Settings(tmp_dir=str(scratch_root))


@pytest.fixture
def serve_zip(mock_transport_factory, settings: Settings):
    """
    Return a function that builds a Deployer whose HTTP layer answers every
    request with the given ZIP bytes. Requests are recorded on `.requests`.
    """

    def _make(payload: bytes, status: int = 200) -> Deployer:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(status, content=payload)

        d = Deployer(settings=settings, transport=mock_transport_factory(handler))
        d.requests = seen  # type: ignore[attr-defined]
        return d

    return _make
