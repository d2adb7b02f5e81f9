from __future__ import annotations

import os
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest
import requests

from fileloader.modules.errors import TransportError
from fileloader.modules.finders.tar_parser import FileRecord
from fileloader.modules.formatters import format_entry_line, format_mtime, human_readable_size
from fileloader.modules.keepers import downloaders
from fileloader.modules.keepers.extractor import extract_files, output_path_for


def test_fetch_reads_local_file(tmp_path, sample_tar):
    path = tmp_path / "local.tar"
    path.write_bytes(sample_tar)

    assert downloaders.fetch_archive_bytes(str(path)) == sample_tar
    assert len(downloaders.load_archive(str(path))) == 6


def test_fetch_over_http(monkeypatch, sample_tar):
    get = Mock(return_value=Mock(status_code=200, content=sample_tar))
    monkeypatch.setattr(downloaders.session, "get", get)

    files = downloaders.load_archive("https://example.com/a.tar", timeout=5)

    assert len(files) == 6
    get.assert_called_once_with("https://example.com/a.tar", auth=None, timeout=5)


def test_fetch_non_200_raises_without_retry(monkeypatch):
    get = Mock(return_value=Mock(status_code=500, content=b""))
    monkeypatch.setattr(downloaders.session, "get", get)

    with pytest.raises(TransportError) as excinfo:
        downloaders.fetch_archive_bytes("https://example.com/a.tar")
    assert excinfo.value.status_code == 500
    assert get.call_count == 1


def test_fetch_connection_failure(monkeypatch):
    get = Mock(side_effect=requests.ConnectionError("refused"))
    monkeypatch.setattr(downloaders.session, "get", get)

    with pytest.raises(TransportError) as excinfo:
        downloaders.fetch_archive_bytes("https://example.com/a.tar")
    assert excinfo.value.status_code is None


def _record(name, content=b"data", mtime=1_600_000_000):
    return FileRecord(name, datetime.fromtimestamp(mtime, tz=timezone.utc), content)


def test_extract_writes_files_with_mtime(tmp_path):
    files = [_record("a.txt", b"aaa"), _record("sub/b.txt", b"bb", 1_600_000_100)]
    result = extract_files(files, str(tmp_path))

    assert result.files_written == 2
    assert result.bytes_written == 5
    assert result.error is None
    assert (tmp_path / "a.txt").read_bytes() == b"aaa"
    assert (tmp_path / "sub" / "b.txt").read_bytes() == b"bb"
    assert int(os.path.getmtime(tmp_path / "sub" / "b.txt")) == 1_600_000_100


def test_extract_applies_filter(tmp_path):
    files = [_record("a.txt"), _record("b.bin")]
    result = extract_files(files, str(tmp_path), "b.bin")

    assert result.files_written == 1
    assert not (tmp_path / "a.txt").exists()


def test_extract_refuses_escaping_paths(tmp_path):
    out = tmp_path / "out"
    files = [_record("../evil.txt"), _record("/abs/ok.txt")]
    result = extract_files(files, str(out))

    assert result.skipped == ["../evil.txt"]
    assert not (tmp_path / "evil.txt").exists()
    assert (out / "abs" / "ok.txt").exists()
    assert result.to_dict()["files_written"] == 1


def test_output_path_for_rejects_root(tmp_path):
    assert output_path_for("", str(tmp_path)) is None
    assert output_path_for("./", str(tmp_path)) is None


def test_formatters():
    assert human_readable_size(512) == "512.0 B"
    assert human_readable_size(2048) == "2.0 KB"
    assert format_mtime(datetime.fromtimestamp(0, tz=timezone.utc)) == "----.--.-- --:--"
    assert format_mtime(datetime(2020, 9, 13, 12, 26, tzinfo=timezone.utc)) == "2020-09-13 12:26"

    record = _record("x.txt", b"abc")
    assert format_entry_line(record, simple=True) == "  [FILE] x.txt (3.0 B)"
    assert format_entry_line(record).endswith("x.txt")
