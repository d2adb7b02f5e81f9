"""Shared helpers for building tar buffers in tests."""

from __future__ import annotations

import io
import tarfile

import pytest


BLOCK = 512


def build_header(name: bytes, size: bytes = b"", mtime: bytes = b"", typeflag: bytes = b"0") -> bytes:
    """Hand-build a 512-byte header with only the fields the decoder reads."""
    header = bytearray(BLOCK)
    header[0:len(name)] = name
    header[124:124 + len(size)] = size
    header[136:136 + len(mtime)] = mtime
    header[156:157] = typeflag
    return bytes(header)


def pad(data: bytes) -> bytes:
    remainder = len(data) % BLOCK
    return data + b"\0" * (BLOCK - remainder if remainder else 0)


def build_tar(entries) -> bytes:
    """Build a USTAR archive with the standard library.

    entries: iterable of (name, content, mtime); content None makes a directory.
    """
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w", format=tarfile.USTAR_FORMAT) as tar:
        for name, content, mtime in entries:
            info = tarfile.TarInfo(name)
            info.mtime = mtime
            if content is None:
                info.type = tarfile.DIRTYPE
                tar.addfile(info)
            else:
                info.size = len(content)
                tar.addfile(info, io.BytesIO(content))
    return buf.getvalue()


@pytest.fixture
def make_header():
    return build_header


@pytest.fixture
def make_tar():
    return build_tar


@pytest.fixture
def pad_block():
    return pad


@pytest.fixture
def sample_tar() -> bytes:
    return build_tar([
        ("assets", None, 1_600_000_000),
        ("assets/app.js", b"console.log('hi');\n", 1_600_000_001),
        ("assets/site.css", b"body { color: red; }\n", 1_600_000_002),
        ("data/config.json", b'{"name": "demo", "items": [1, 2, 3]}', 1_600_000_003),
        ("data/feed.xml", b"<feed><entry id='1'/></feed>", 1_600_000_004),
        ("img/logo.png", b"\x89PNG\r\n\x1a\nfake", 1_600_000_005),
        ("readme.txt", b"hello world\n", 1_600_000_006),
    ])


@pytest.fixture(autouse=True)
def no_configured_credentials(monkeypatch):
    from fileloader import config

    monkeypatch.setattr(config, "USERNAME", "")
    monkeypatch.setattr(config, "PASSWORD", "")
