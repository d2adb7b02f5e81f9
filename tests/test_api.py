from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from fileloader.modules.api import api
from fileloader.modules.keepers.archive_cache import ArchiveCache


ARCHIVE = "https://example.com/a.tar"


@pytest.fixture
def archive_host(sample_tar, make_header):
    archives = {
        ARCHIVE: sample_tar,
        "https://example.com/bad.tar": make_header(b"bad", b"zz"),
    }
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        body = archives.get(str(request.url))
        if body is None:
            return httpx.Response(404)
        return httpx.Response(200, content=body)

    return handler, calls


@pytest.fixture
def client(monkeypatch, archive_host):
    handler, _ = archive_host
    monkeypatch.setattr(api, "archives", ArchiveCache(transport=httpx.MockTransport(handler)))
    with TestClient(api.app) as test_client:
        yield test_client


def test_list_files(client):
    resp = client.get("/files", params={"url": ARCHIVE})
    assert resp.status_code == 200
    body = resp.json()
    assert [f["name"] for f in body][:2] == ["assets/app.js", "assets/site.css"]
    assert body[-1] == {"name": "readme.txt", "size": 12, "mtime": 1_600_000_006}


def test_list_files_with_pattern(client):
    resp = client.get("/files", params={"url": ARCHIVE, "pattern": r"^data/"})
    assert [f["name"] for f in resp.json()] == ["data/config.json", "data/feed.xml"]


def test_list_files_bad_pattern(client):
    resp = client.get("/files", params={"url": ARCHIVE, "pattern": "("})
    assert resp.status_code == 400


def test_get_file(client):
    resp = client.get("/file", params={"url": ARCHIVE, "name": "img/logo.png"})
    assert resp.status_code == 200
    assert resp.content == b"\x89PNG\r\n\x1a\nfake"
    assert resp.headers["content-type"] == "image/png"


def test_get_missing_file(client):
    resp = client.get("/file", params={"url": ARCHIVE, "name": "nope"})
    assert resp.status_code == 404


def test_get_text_and_json(client):
    text = client.get("/text", params={"url": ARCHIVE, "name": "readme.txt"})
    assert text.text == "hello world\n"

    parsed = client.get("/json", params={"url": ARCHIVE, "name": "data/config.json"})
    assert parsed.json() == {"name": "demo", "items": [1, 2, 3]}

    not_json = client.get("/json", params={"url": ARCHIVE, "name": "readme.txt"})
    assert not_json.status_code == 422


def test_archive_fetched_once(client, archive_host):
    _, calls = archive_host
    client.get("/files", params={"url": ARCHIVE})
    client.get("/text", params={"url": ARCHIVE, "name": "readme.txt"})
    assert calls == [ARCHIVE]


def test_upstream_error_is_bad_gateway(client):
    resp = client.get("/files", params={"url": "https://example.com/missing.tar"})
    assert resp.status_code == 502


def test_malformed_archive_is_unprocessable(client):
    resp = client.get("/files", params={"url": "https://example.com/bad.tar"})
    assert resp.status_code == 422


def test_resolve_reference(client):
    resp = client.get("/resolve", params={"ref": f"data:FileLoader.js,{ARCHIVE},readme.txt"})
    assert resp.status_code == 200
    assert resp.content == b"hello world\n"

    bad = client.get("/resolve", params={"ref": "not-a-reference"})
    assert bad.status_code == 400
