import os
import requests

from fileloader import config
from fileloader.modules.errors import TransportError
from fileloader.modules.finders.tar_parser import FileRecord, read_tar_file

# =============================================================================
# Shared Session
# =============================================================================

session = requests.Session()
session.headers.update({
    "Accept": "application/x-tar, application/octet-stream;q=0.9, */*;q=0.8"
})


# =============================================================================
# Archive Download (Full)
# =============================================================================

def fetch_archive_bytes(source, timeout=None, verbose=False) -> bytes:
    """
    Return the raw bytes of an archive.

    A source naming an existing local file is read from disk; anything else
    is fetched with a GET request. There is no retry: a non-200 response
    raises TransportError straight away.
    """
    if os.path.isfile(source):
        if verbose:
            print(f"[*] Reading {source}")
        with open(source, "rb") as f:
            return f.read()

    if verbose:
        print(f"[*] Fetching {source}")

    try:
        resp = session.get(
            source,
            auth=config.basic_auth(),
            timeout=timeout or config.REQUEST_TIMEOUT,
        )
    except requests.RequestException as e:
        raise TransportError(source, reason=str(e)) from e

    if resp.status_code != 200:
        raise TransportError(source, resp.status_code)

    return resp.content


def load_archive(source, timeout=None, verbose=False) -> list[FileRecord]:
    """
    Fetch an archive and decode it.
    """
    data = fetch_archive_bytes(source, timeout=timeout, verbose=verbose)
    files = read_tar_file(data)
    if verbose:
        print(f"[+] Loaded {len(files)} files from {source}")
    return files
